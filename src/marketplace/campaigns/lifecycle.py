"""Date-driven campaign status sweeps.

``activate_due_campaigns`` moves scheduled campaigns whose start date has
arrived to ``active`` and announces them to influencers.
``expire_campaigns`` moves campaigns whose end date has passed to
``expired``.  Both use the store's conditional status write, so running a
sweep twice, or concurrently with a payment confirmation, never moves a
campaign backwards.
"""

from __future__ import annotations

from datetime import date

import structlog

from marketplace.domain.types import CampaignStatus, NotificationType
from marketplace.notifications.dispatcher import Notifier
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()


def activate_due_campaigns(
    store: MarketplaceStore,
    notifier: Notifier,
    today: date,
) -> list[str]:
    """Activate scheduled campaigns starting on or before *today*.

    Each newly activated campaign is announced to every influencer.
    Notification failures are logged and do not undo the activation.

    Returns:
        IDs of the campaigns this call activated.
    """
    activated: list[str] = []
    due = store.campaigns_due_for_activation(today)
    influencers = store.list_influencers() if due else []

    for campaign in due:
        if not store.advance_campaign_status(campaign.id, CampaignStatus.ACTIVE):
            continue
        activated.append(campaign.id)
        logger.info("campaign_activated", campaign_id=campaign.id)

        for influencer in influencers:
            try:
                notifier.notify(
                    influencer.id,
                    "New campaign available",
                    f"'{campaign.title or campaign.id}' is now accepting applications.",
                    notification_type=NotificationType.CAMPAIGN,
                    metadata={"campaign_id": campaign.id},
                )
            except Exception:
                logger.exception(
                    "campaign_announcement_failed",
                    campaign_id=campaign.id,
                    influencer_id=influencer.id,
                )

    logger.info("campaign_activation_sweep", due=len(due), activated=len(activated))
    return activated


def expire_campaigns(store: MarketplaceStore, today: date) -> list[str]:
    """Expire non-terminal campaigns whose end date is before *today*.

    Returns:
        IDs of the campaigns this call expired.
    """
    expired: list[str] = []
    for campaign in store.campaigns_past_end(today):
        if store.advance_campaign_status(campaign.id, CampaignStatus.EXPIRED):
            expired.append(campaign.id)
            logger.info("campaign_expired", campaign_id=campaign.id)
    return expired
