"""HTTP endpoints for applications and campaign lifecycle sweeps."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketplace.auth.access import ensure_admin, get_caller
from marketplace.campaigns.applications import review_application, submit_application
from marketplace.campaigns.lifecycle import activate_due_campaigns, expire_campaigns
from marketplace.dependencies import get_notifier, get_store
from marketplace.domain.models import Caller
from marketplace.notifications.dispatcher import Notifier
from marketplace.store.store import MarketplaceStore

router = APIRouter()


class ReviewRequest(BaseModel):
    """Body of an application review: ``approve``, ``reject`` or ``complete``."""

    event: str


class SweepRequest(BaseModel):
    """Optional override of the sweep date (defaults to today, UTC)."""

    today: date | None = None


def _today(body: SweepRequest | None) -> date:
    if body is not None and body.today is not None:
        return body.today
    return datetime.now(tz=UTC).date()


@router.post("/campaigns/{campaign_id}/applications", status_code=201)
def apply_to_campaign(
    campaign_id: str,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, Any]:
    application = submit_application(store, notifier, caller, campaign_id)
    return {"application": application.model_dump(mode="json")}


@router.put("/campaigns/{campaign_id}/applications/{influencer_id}/status")
def update_application_status(
    campaign_id: str,
    influencer_id: str,
    body: ReviewRequest,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, Any]:
    application = review_application(
        store, notifier, caller, campaign_id, influencer_id, body.event
    )
    return {
        "message": "Application status updated successfully",
        "application": application.model_dump(mode="json"),
    }


@router.post("/campaigns/activate")
def activate_campaigns(
    body: SweepRequest | None = None,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, Any]:
    """Activate scheduled campaigns whose start date has arrived (admin only)."""
    ensure_admin(caller)
    activated = activate_due_campaigns(store, notifier, _today(body))
    return {"activated_count": len(activated), "campaign_ids": activated}


@router.post("/campaigns/expire")
def expire_due_campaigns(
    body: SweepRequest | None = None,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    """Expire campaigns whose end date has passed (admin only)."""
    ensure_admin(caller)
    expired = expire_campaigns(store, _today(body))
    return {"expired_count": len(expired), "campaign_ids": expired}
