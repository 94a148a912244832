"""Domain enumerations for the influencer marketplace."""

from enum import StrEnum


class CampaignStatus(StrEnum):
    """States in the campaign lifecycle, in forward order."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ApplicationStatus(StrEnum):
    """States in an influencer application's approval/payment lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    APPROVED_AND_PAID = "approved_and_paid"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentStatus(StrEnum):
    """Payment status reported by the payment provider for a checkout session."""

    PAID = "paid"
    UNPAID = "unpaid"
    NO_PAYMENT_REQUIRED = "no_payment_required"


class UserRole(StrEnum):
    """Roles a marketplace user can hold."""

    BRAND = "brand"
    INFLUENCER = "influencer"
    ADMIN = "admin"


class NotificationType(StrEnum):
    """Categories of in-app notifications."""

    MESSAGE = "message"
    APPLICATION = "application"
    CAMPAIGN = "campaign"
    INVITATION = "invitation"
    PAYMENT = "payment"


# Campaign statuses eligible to appear in match results
MATCHABLE_CAMPAIGN_STATUSES: frozenset[CampaignStatus] = frozenset(
    {CampaignStatus.ACTIVE, CampaignStatus.SCHEDULED}
)
