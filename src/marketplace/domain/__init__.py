"""Domain types, models, and errors for the marketplace core."""

from marketplace.domain.errors import (
    InvalidInputError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)
from marketplace.domain.models import (
    Application,
    AudienceRange,
    Caller,
    Campaign,
    InfluencerProfile,
)
from marketplace.domain.types import (
    MATCHABLE_CAMPAIGN_STATUSES,
    ApplicationStatus,
    CampaignStatus,
    NotificationType,
    PaymentStatus,
    UserRole,
)

__all__ = [
    "MATCHABLE_CAMPAIGN_STATUSES",
    "Application",
    "ApplicationStatus",
    "AudienceRange",
    "Caller",
    "Campaign",
    "CampaignStatus",
    "InfluencerProfile",
    "InvalidInputError",
    "InvalidTransitionError",
    "MarketplaceError",
    "NotFoundError",
    "NotificationType",
    "PaymentStatus",
    "StoreError",
    "UnauthorizedError",
    "UserRole",
]
