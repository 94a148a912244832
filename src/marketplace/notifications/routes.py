"""HTTP endpoints for the caller's notification inbox."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketplace.auth.access import get_caller
from marketplace.dependencies import get_store
from marketplace.domain.models import Caller
from marketplace.store.store import MarketplaceStore

router = APIRouter()


class MarkReadRequest(BaseModel):
    """IDs to mark read; omit to mark the whole inbox read."""

    ids: list[int] | None = None


@router.get("/notifications")
def list_inbox(
    unread_only: bool = False,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    notifications = store.list_notifications(caller.user_id, unread_only=unread_only)
    return {
        "notifications": notifications,
        "unread_count": sum(1 for n in notifications if not n["is_read"]),
    }


@router.post("/notifications/read")
def mark_read(
    body: MarkReadRequest | None = None,
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    """Mark the caller's notifications read.

    IDs belonging to other users are ignored rather than rejected.
    """
    ids = body.ids if body is not None else None
    return {"updated": store.mark_notifications_read(caller.user_id, ids)}
