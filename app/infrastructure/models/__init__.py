"""ORM models used by the application infrastructure."""

from .book import BookModel
from .book_request import PENDING_REQUEST_INDEX, BookRequestModel
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "BookModel",
    "BookRequestModel",
    "NotificationModel",
    "PENDING_REQUEST_INDEX",
    "UserModel",
]
