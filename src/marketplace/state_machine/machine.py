"""ApplicationStateMachine class with trigger, history, and valid_events."""

from __future__ import annotations

from marketplace.domain.errors import InvalidTransitionError
from marketplace.domain.types import ApplicationStatus
from marketplace.state_machine.transitions import (
    APPLICATION_TERMINAL_STATES,
    APPLICATION_TRANSITIONS,
)


class ApplicationStateMachine:
    """Finite state machine governing an application's lifecycle.

    Tracks the current status, validates transitions against the transition
    map, and records the history of all status changes.

    Usage::

        sm = ApplicationStateMachine()
        sm.trigger("approve")     # -> APPROVED
        sm.trigger("mark_paid")   # -> APPROVED_AND_PAID
        sm.trigger("complete")    # -> COMPLETED (terminal)
    """

    def __init__(
        self,
        initial_state: ApplicationStatus = ApplicationStatus.PENDING,
    ) -> None:
        self._state: ApplicationStatus = initial_state
        self._history: list[tuple[ApplicationStatus, str, ApplicationStatus]] = []

    @property
    def state(self) -> ApplicationStatus:
        """Return the current application status."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Return True if the machine is in a terminal state (REJECTED or COMPLETED)."""
        return self._state in APPLICATION_TERMINAL_STATES

    @property
    def history(self) -> list[tuple[ApplicationStatus, str, ApplicationStatus]]:
        """Return a copy of the transition history as ``(from, event, to)`` tuples."""
        return list(self._history)

    def trigger(self, event: str) -> ApplicationStatus:
        """Apply an event to the current status and transition.

        Args:
            event: The event string (e.g. ``"approve"``).

        Returns:
            The new status after the transition.

        Raises:
            InvalidTransitionError: If the transition is not allowed from
                the current status, or if the machine is in a terminal state.
        """
        if self.is_terminal:
            raise InvalidTransitionError(self._state, event)

        key = (self._state, event)
        if key not in APPLICATION_TRANSITIONS:
            raise InvalidTransitionError(self._state, event)

        old_state = self._state
        new_state = APPLICATION_TRANSITIONS[key]
        self._history.append((old_state, event, new_state))
        self._state = new_state
        return new_state

    def get_valid_events(self) -> list[str]:
        """Return a sorted list of events valid from the current status.

        Returns an empty list if the machine is in a terminal state.
        """
        if self.is_terminal:
            return []
        return sorted(
            event for state, event in APPLICATION_TRANSITIONS if state == self._state
        )
