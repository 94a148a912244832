"""Application and campaign lifecycle state machines."""

from marketplace.state_machine.machine import ApplicationStateMachine
from marketplace.state_machine.transitions import (
    APPLICATION_TERMINAL_STATES,
    APPLICATION_TRANSITIONS,
    CAMPAIGN_TERMINAL_STATES,
    PAYMENT_SETTLED_STATES,
    ApplicationEvent,
    can_advance_campaign,
    campaign_statuses_before,
)

__all__ = [
    "APPLICATION_TERMINAL_STATES",
    "APPLICATION_TRANSITIONS",
    "CAMPAIGN_TERMINAL_STATES",
    "PAYMENT_SETTLED_STATES",
    "ApplicationEvent",
    "ApplicationStateMachine",
    "campaign_statuses_before",
    "can_advance_campaign",
]
