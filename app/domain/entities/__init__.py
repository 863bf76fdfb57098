"""Domain entities exposed by the application."""

from .book import UNKNOWN_BOOK_TITLE, Book
from .book_request import (
    REQUEST_DECISIONS,
    REQUEST_STATUS_ACCEPTED,
    REQUEST_STATUS_PENDING,
    REQUEST_STATUS_REJECTED,
    REQUEST_TRANSITIONS,
    BookRequest,
    RequestPartition,
    can_transition,
    status_rank,
)
from .change_event import (
    CHANGE_DELETE,
    CHANGE_INSERT,
    CHANGE_UPDATE,
    TABLE_NOTIFICATIONS,
    TABLE_REQUESTS,
    ChangeEvent,
)
from .notification import (
    NOTIFICATION_TYPE_BOOK_REQUEST,
    NOTIFICATION_TYPE_NEW_MESSAGE,
    NOTIFICATION_TYPE_REQUEST_ACCEPTED,
    NOTIFICATION_TYPE_REQUEST_REJECTED,
    NOTIFICATION_TYPE_SYSTEM,
    Notification,
)
from .user import UNKNOWN_USER_NAME, UserProfile

__all__ = [
    "Book",
    "UNKNOWN_BOOK_TITLE",
    "BookRequest",
    "RequestPartition",
    "REQUEST_DECISIONS",
    "REQUEST_STATUS_ACCEPTED",
    "REQUEST_STATUS_PENDING",
    "REQUEST_STATUS_REJECTED",
    "REQUEST_TRANSITIONS",
    "can_transition",
    "status_rank",
    "ChangeEvent",
    "CHANGE_DELETE",
    "CHANGE_INSERT",
    "CHANGE_UPDATE",
    "TABLE_NOTIFICATIONS",
    "TABLE_REQUESTS",
    "Notification",
    "NOTIFICATION_TYPE_BOOK_REQUEST",
    "NOTIFICATION_TYPE_NEW_MESSAGE",
    "NOTIFICATION_TYPE_REQUEST_ACCEPTED",
    "NOTIFICATION_TYPE_REQUEST_REJECTED",
    "NOTIFICATION_TYPE_SYSTEM",
    "UNKNOWN_USER_NAME",
    "UserProfile",
]
