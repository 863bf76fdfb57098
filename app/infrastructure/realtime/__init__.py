"""Realtime change feed helpers for the infrastructure layer."""

from .change_feed import ChangeFeed, Subscription
from .publisher import ChangeEventPublisher
from .serialization import (
    serialize_change_event,
    serialize_notification,
)

__all__ = [
    "ChangeEventPublisher",
    "ChangeFeed",
    "Subscription",
    "serialize_change_event",
    "serialize_notification",
]
