"""Use cases and helpers for user notifications."""

from .events import (
    notifications_read_events,
    notify_request_created,
    notify_request_responded,
    preview_message,
    request_created_events,
    request_responded_events,
)
from .list_notifications import list_notifications
from .mark_read import mark_all_notifications_read, mark_notifications_read

__all__ = [
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notifications_read",
    "notifications_read_events",
    "notify_request_created",
    "notify_request_responded",
    "preview_message",
    "request_created_events",
    "request_responded_events",
]
