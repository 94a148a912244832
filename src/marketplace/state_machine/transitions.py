"""Transition maps for the application and campaign lifecycles."""

from enum import StrEnum

from marketplace.domain.types import ApplicationStatus, CampaignStatus


class ApplicationEvent(StrEnum):
    """Events that can trigger state transitions on an application."""

    APPROVE = "approve"
    REJECT = "reject"
    MARK_PAID = "mark_paid"
    COMPLETE = "complete"


# All valid (current_status, event_string) -> next_status mappings.
# Any pair not in this dict is an invalid transition.
APPLICATION_TRANSITIONS: dict[tuple[ApplicationStatus, str], ApplicationStatus] = {
    # From PENDING
    (ApplicationStatus.PENDING, ApplicationEvent.APPROVE): ApplicationStatus.APPROVED,
    (ApplicationStatus.PENDING, ApplicationEvent.REJECT): ApplicationStatus.REJECTED,
    # Brands may pay at approval time, skipping the separate approve step
    (ApplicationStatus.PENDING, ApplicationEvent.MARK_PAID): ApplicationStatus.APPROVED_AND_PAID,
    # From APPROVED
    (ApplicationStatus.APPROVED, ApplicationEvent.REJECT): ApplicationStatus.REJECTED,
    (ApplicationStatus.APPROVED, ApplicationEvent.MARK_PAID): ApplicationStatus.APPROVED_AND_PAID,
    # From APPROVED_AND_PAID
    (ApplicationStatus.APPROVED_AND_PAID, ApplicationEvent.MARK_PAID): (
        ApplicationStatus.APPROVED_AND_PAID
    ),
    (ApplicationStatus.APPROVED_AND_PAID, ApplicationEvent.COMPLETE): ApplicationStatus.COMPLETED,
}

# States that reject all events -- no outgoing transitions allowed.
APPLICATION_TERMINAL_STATES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.REJECTED, ApplicationStatus.COMPLETED}
)

# Statuses for which a payment confirmation changes nothing.
PAYMENT_SETTLED_STATES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.APPROVED_AND_PAID, ApplicationStatus.COMPLETED}
)

# Forward order of the campaign lifecycle.  COMPLETED and EXPIRED share the
# final rank: both are terminal.
CAMPAIGN_ORDER: dict[CampaignStatus, int] = {
    CampaignStatus.DRAFT: 0,
    CampaignStatus.SCHEDULED: 1,
    CampaignStatus.ACTIVE: 2,
    CampaignStatus.IN_PROGRESS: 3,
    CampaignStatus.COMPLETED: 4,
    CampaignStatus.EXPIRED: 4,
}

CAMPAIGN_TERMINAL_STATES: frozenset[CampaignStatus] = frozenset(
    {CampaignStatus.COMPLETED, CampaignStatus.EXPIRED}
)


def campaign_statuses_before(target: CampaignStatus) -> list[CampaignStatus]:
    """Return the non-terminal statuses from which *target* is a forward move.

    Sorted in lifecycle order.  Used to build conditional store writes of the
    form ``... WHERE status IN (...)``.
    """
    return [
        status
        for status in sorted(CAMPAIGN_ORDER, key=CAMPAIGN_ORDER.__getitem__)
        if can_advance_campaign(status, target)
    ]


def can_advance_campaign(current: CampaignStatus, target: CampaignStatus) -> bool:
    """Return True if moving a campaign from *current* to *target* is allowed.

    Transitions only move forward; terminal statuses accept nothing.
    Expiry is reachable from every non-terminal status.
    """
    if current in CAMPAIGN_TERMINAL_STATES or current == target:
        return False
    if target == CampaignStatus.EXPIRED:
        return True
    return CAMPAIGN_ORDER[target] > CAMPAIGN_ORDER[current]
