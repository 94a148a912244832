"""Caller identity and access rules for marketplace resources.

Authentication happens upstream: the gateway in front of this service
verifies the session and forwards the user's ID and role in the
``X-User-Id`` and ``X-User-Role`` headers.  This module turns those headers
into a ``Caller`` and decides what that caller may see or change.
"""

from __future__ import annotations

from fastapi import Header, HTTPException

from marketplace.domain.errors import UnauthorizedError
from marketplace.domain.models import Caller, Campaign
from marketplace.domain.types import UserRole


def get_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    """FastAPI dependency resolving the authenticated caller.

    Raises:
        HTTPException: 401 if the identity headers are missing or the role
            is unknown.
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        role = UserRole(x_user_role.lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="Unauthorized") from None
    return Caller(user_id=x_user_id, role=role)


def ensure_can_view_influencer_matches(caller: Caller, influencer_id: str) -> None:
    """Allow only the influencer themself or an admin.

    Raises:
        UnauthorizedError: If *caller* is neither.
    """
    if caller.user_id != influencer_id and not caller.is_admin:
        raise UnauthorizedError(
            "You are not authorized to view matches for this influencer"
        )


def ensure_can_manage_campaign(caller: Caller, campaign: Campaign) -> None:
    """Allow only the brand that owns *campaign* or an admin.

    Raises:
        UnauthorizedError: If *caller* is neither.
    """
    if caller.user_id != campaign.brand_id and not caller.is_admin:
        raise UnauthorizedError("You are not authorized to manage this campaign")


def ensure_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise UnauthorizedError("Administrator role required")
