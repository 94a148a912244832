"""In-app notification dispatch."""

from marketplace.notifications.dispatcher import Notifier, StoreNotifier

__all__ = [
    "Notifier",
    "StoreNotifier",
]
