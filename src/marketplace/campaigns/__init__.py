"""Campaign applications, review, and date-driven lifecycle sweeps."""

from marketplace.campaigns.applications import (
    REVIEW_EVENTS,
    review_application,
    submit_application,
)
from marketplace.campaigns.lifecycle import activate_due_campaigns, expire_campaigns

__all__ = [
    "REVIEW_EVENTS",
    "activate_due_campaigns",
    "expire_campaigns",
    "review_application",
    "submit_application",
]
