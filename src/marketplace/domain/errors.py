"""Domain-specific exception classes for the marketplace core."""

from __future__ import annotations

from enum import StrEnum


class MarketplaceError(Exception):
    """Base class for all domain errors in the marketplace core."""


class NotFoundError(MarketplaceError):
    """Raised when an anchor entity (campaign, influencer, application) is missing.

    Attributes:
        entity: Kind of entity that was looked up (e.g. ``"campaign"``).
        identifier: The identifier that did not resolve.
    """

    def __init__(self, entity: str, identifier: str) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} '{identifier}' not found")


class InvalidInputError(MarketplaceError):
    """Raised when a threshold, event, or request field is malformed."""


class UnauthorizedError(MarketplaceError):
    """Raised when the caller lacks rights to the requested resource."""


class InvalidTransitionError(MarketplaceError):
    """Raised when an invalid state transition is attempted.

    Attributes:
        current_state: The state the machine was in when the transition was attempted.
        event: The event that was rejected.
    """

    def __init__(self, current_state: StrEnum, event: str) -> None:
        self.current_state = current_state
        self.event = event
        super().__init__(
            f"Cannot apply event '{event}' in state '{current_state}'"
        )


class StoreError(MarketplaceError):
    """Raised when the backing store rejects a read or write."""
