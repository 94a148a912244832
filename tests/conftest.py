"""Shared pytest fixtures for the marketplace test suite."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from marketplace.app import create_app
from marketplace.config import Settings
from marketplace.domain.models import Campaign, InfluencerProfile
from marketplace.domain.types import CampaignStatus
from marketplace.matching.finder import MatchFinder
from marketplace.notifications.dispatcher import StoreNotifier
from marketplace.payments.reconciliation import PaymentReconciler
from marketplace.store.schema import init_marketplace_db
from marketplace.store.store import MarketplaceStore


@pytest.fixture
def conn() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite connection with the marketplace tables initialized."""
    connection = init_marketplace_db(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def store(conn: sqlite3.Connection) -> MarketplaceStore:
    """MarketplaceStore backed by the in-memory connection."""
    return MarketplaceStore(conn)


@pytest.fixture
def notifier(store: MarketplaceStore) -> StoreNotifier:
    return StoreNotifier(store)


@pytest.fixture
def fashion_campaign() -> Campaign:
    """An active fashion/beauty campaign with a mid-tier budget."""
    return Campaign(
        id="camp-fashion",
        brand_id="brand-1",
        title="Spring Looks",
        target_niches={"fashion", "beauty"},
        budget=Decimal("5000"),
        status=CampaignStatus.ACTIVE,
        start_date=date(2026, 3, 1),
        end_date=date(2026, 5, 31),
    )


@pytest.fixture
def fashion_influencer() -> InfluencerProfile:
    """An influencer covering both fashion and beauty with strong engagement."""
    return InfluencerProfile(
        id="inf-1",
        full_name="Ava Style",
        niches={"fashion", "beauty"},
        audience_size=80_000,
        engagement_rate=0.08,
        follower_count=80_000,
    )


@pytest.fixture
def services(
    conn: sqlite3.Connection, store: MarketplaceStore, notifier: StoreNotifier
) -> dict[str, Any]:
    """Services dict shaped like ``initialize_services`` output."""
    return {
        "_settings": Settings(payment_webhook_secret="test-secret"),  # type: ignore[call-arg]
        "db_conn": conn,
        "store": store,
        "notifier": notifier,
        "match_finder": MatchFinder(store),
        "reconciler": PaymentReconciler(store, notifier),
    }


@pytest.fixture
def client(services: dict[str, Any]) -> TestClient:
    """TestClient for the full app without Prometheus instrumentation."""
    return TestClient(create_app(services, enable_metrics=False))