"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_BOOK_REQUEST = "book_request"
NOTIFICATION_TYPE_REQUEST_ACCEPTED = "request_accepted"
NOTIFICATION_TYPE_REQUEST_REJECTED = "request_rejected"
NOTIFICATION_TYPE_NEW_MESSAGE = "new_message"
NOTIFICATION_TYPE_SYSTEM = "system"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str | None
    user_id: str
    type: str
    title: str
    message: str
    read: bool = False
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


__all__ = [
    "Notification",
    "NOTIFICATION_TYPE_BOOK_REQUEST",
    "NOTIFICATION_TYPE_NEW_MESSAGE",
    "NOTIFICATION_TYPE_REQUEST_ACCEPTED",
    "NOTIFICATION_TYPE_REQUEST_REJECTED",
    "NOTIFICATION_TYPE_SYSTEM",
]
