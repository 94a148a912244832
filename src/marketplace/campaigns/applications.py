"""Application submission and brand review.

Influencers apply to open campaigns; the owning brand (or an admin) then
approves, rejects, or completes the application.  Payment status is only ever
set by payment reconciliation, never by review.
"""

from __future__ import annotations

import structlog

from marketplace.auth.access import ensure_can_manage_campaign
from marketplace.domain.errors import (
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
)
from marketplace.domain.models import Application, Caller
from marketplace.domain.types import (
    MATCHABLE_CAMPAIGN_STATUSES,
    NotificationType,
    UserRole,
)
from marketplace.notifications.dispatcher import Notifier
from marketplace.state_machine.machine import ApplicationStateMachine
from marketplace.state_machine.transitions import ApplicationEvent
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()

REVIEW_EVENTS: frozenset[ApplicationEvent] = frozenset(
    {ApplicationEvent.APPROVE, ApplicationEvent.REJECT, ApplicationEvent.COMPLETE}
)

_REVIEW_MESSAGES: dict[ApplicationEvent, tuple[str, str]] = {
    ApplicationEvent.APPROVE: (
        "Application approved",
        "Your application for '{title}' was approved.",
    ),
    ApplicationEvent.REJECT: (
        "Application rejected",
        "Your application for '{title}' was not accepted.",
    ),
    ApplicationEvent.COMPLETE: (
        "Collaboration completed",
        "Your work on '{title}' was marked complete.",
    ),
}


def submit_application(
    store: MarketplaceStore,
    notifier: Notifier,
    caller: Caller,
    campaign_id: str,
) -> Application:
    """Create a pending application from the calling influencer.

    Raises:
        UnauthorizedError: If the caller is not an influencer.
        NotFoundError: If the campaign or the caller's profile does not exist.
        InvalidInputError: If the campaign is not open for applications.
        StoreError: If the influencer already applied to the campaign.
    """
    if caller.role != UserRole.INFLUENCER:
        raise UnauthorizedError("Only influencers can apply to campaigns")

    campaign = store.get_campaign(campaign_id)
    if campaign is None:
        raise NotFoundError("campaign", campaign_id)
    if store.get_influencer(caller.user_id) is None:
        raise NotFoundError("influencer", caller.user_id)
    if campaign.status not in MATCHABLE_CAMPAIGN_STATUSES:
        raise InvalidInputError(
            f"Campaign '{campaign_id}' is not accepting applications (status '{campaign.status}')"
        )

    application = store.create_application(campaign_id, caller.user_id)
    logger.info(
        "application_submitted",
        campaign_id=campaign_id,
        influencer_id=caller.user_id,
        application_id=application.id,
    )

    try:
        notifier.notify(
            campaign.brand_id,
            "New application",
            f"An influencer applied to '{campaign.title or campaign.id}'.",
            notification_type=NotificationType.APPLICATION,
            metadata={"campaign_id": campaign_id, "influencer_id": caller.user_id},
        )
    except Exception:
        logger.exception("application_notification_failed", campaign_id=campaign_id)

    return application


def review_application(
    store: MarketplaceStore,
    notifier: Notifier,
    caller: Caller,
    campaign_id: str,
    influencer_id: str,
    event: str,
) -> Application:
    """Apply a brand review *event* to the pair's application.

    Args:
        store: The marketplace store.
        notifier: Used to tell the influencer about the decision.
        caller: The reviewing user; must own the campaign or be an admin.
        campaign_id: The campaign the application belongs to.
        influencer_id: The applicant.
        event: One of ``approve``, ``reject``, ``complete``.

    Returns:
        The application with its new status.

    Raises:
        InvalidInputError: If *event* is not a review event.
        NotFoundError: If the campaign or application does not exist.
        UnauthorizedError: If the caller may not manage the campaign.
        InvalidTransitionError: If the event is illegal from the current
            status, or the status changed concurrently.
    """
    try:
        review_event = ApplicationEvent(event)
    except ValueError:
        raise InvalidInputError(f"Unknown review event '{event}'") from None
    if review_event not in REVIEW_EVENTS:
        raise InvalidInputError(
            f"'{event}' cannot be applied by review; payment status is set on payment confirmation"
        )

    campaign = store.get_campaign(campaign_id)
    if campaign is None:
        raise NotFoundError("campaign", campaign_id)
    ensure_can_manage_campaign(caller, campaign)

    application = store.get_application(campaign_id, influencer_id)
    if application is None:
        raise NotFoundError("application", f"{campaign_id}/{influencer_id}")

    machine = ApplicationStateMachine(application.status)
    new_status = machine.trigger(review_event)

    if not store.set_application_status(application.id, new_status, expected=application.status):
        current = store.get_application(campaign_id, influencer_id)
        raise InvalidTransitionError(
            current.status if current else application.status, review_event
        )

    logger.info(
        "application_reviewed",
        campaign_id=campaign_id,
        influencer_id=influencer_id,
        from_status=application.status.value,
        to_status=new_status.value,
        review_event=review_event.value,
    )

    title, template = _REVIEW_MESSAGES[review_event]
    try:
        notifier.notify(
            influencer_id,
            title,
            template.format(title=campaign.title or campaign.id),
            notification_type=NotificationType.APPLICATION,
            metadata={"campaign_id": campaign_id, "status": new_status.value},
        )
    except Exception:
        logger.exception(
            "review_notification_failed",
            campaign_id=campaign_id,
            influencer_id=influencer_id,
        )

    return application.model_copy(update={"status": new_status})
