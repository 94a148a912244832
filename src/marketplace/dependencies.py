"""FastAPI dependencies resolving the per-process services.

``initialize_services`` builds every client once and stores them on
``app.state.services``; route handlers receive them through these
dependencies instead of reaching for module-level globals.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request

from marketplace.matching.finder import MatchFinder
from marketplace.notifications.dispatcher import Notifier
from marketplace.payments.reconciliation import PaymentReconciler
from marketplace.store.store import MarketplaceStore


def get_services(request: Request) -> dict[str, Any]:
    services: dict[str, Any] = request.app.state.services
    return services


def get_store(request: Request) -> MarketplaceStore:
    store: MarketplaceStore = get_services(request)["store"]
    return store


def get_notifier(request: Request) -> Notifier:
    notifier: Notifier = get_services(request)["notifier"]
    return notifier


def get_match_finder(request: Request) -> MatchFinder:
    finder: MatchFinder = get_services(request)["match_finder"]
    return finder


def get_reconciler(request: Request) -> PaymentReconciler:
    reconciler: PaymentReconciler = get_services(request)["reconciler"]
    return reconciler
