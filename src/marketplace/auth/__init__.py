"""Caller identity resolution and access rules."""

from marketplace.auth.access import (
    ensure_admin,
    ensure_can_manage_campaign,
    ensure_can_view_influencer_matches,
    get_caller,
)

__all__ = [
    "ensure_admin",
    "ensure_can_manage_campaign",
    "ensure_can_view_influencer_matches",
    "get_caller",
]
