"""Repository implementations for infrastructure layer."""

from .book_repository import BookRepository
from .book_request_repository import BookRequestRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "BookRepository",
    "BookRequestRepository",
    "NotificationRepository",
    "UserRepository",
]
