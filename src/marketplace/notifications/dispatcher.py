"""Notification dispatch to marketplace users.

``StoreNotifier`` writes in-app notifications to the ``notifications`` table.
Callers depend on the ``Notifier`` protocol so tests and alternative channels
can be substituted without touching the flows that send notifications.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from marketplace.domain.types import NotificationType
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()


class Notifier(Protocol):
    """Anything that can deliver a notification to a user."""

    def notify(
        self,
        recipient_id: str,
        title: str,
        message: str,
        *,
        notification_type: NotificationType,
        metadata: dict[str, str] | None = None,
    ) -> int: ...


class StoreNotifier:
    """Persists notifications as unread rows in the marketplace store.

    Args:
        store: The marketplace store to write notifications into.
    """

    def __init__(self, store: MarketplaceStore) -> None:
        self._store = store

    def notify(
        self,
        recipient_id: str,
        title: str,
        message: str,
        *,
        notification_type: NotificationType,
        metadata: dict[str, str] | None = None,
    ) -> int:
        """Insert a notification for *recipient_id*.

        Args:
            recipient_id: The user to notify.
            title: Short headline.
            message: Notification body.
            notification_type: Category used for filtering in the inbox.
            metadata: Related identifiers (e.g. ``campaign_id``).

        Returns:
            The row ID of the stored notification.
        """
        notification_id = self._store.insert_notification(
            user_id=recipient_id,
            title=title,
            message=message,
            notification_type=notification_type.value,
            metadata=metadata,
        )
        logger.debug(
            "notification_stored",
            recipient_id=recipient_id,
            notification_type=notification_type.value,
            notification_id=notification_id,
        )
        return notification_id
