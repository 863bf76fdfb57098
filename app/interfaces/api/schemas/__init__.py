from .notification import NotificationMarkReadRequest, NotificationRead, NotificationReadResult
from .request import (
    BookRequestCreate,
    BookRequestListRead,
    BookRequestRead,
    BookRequestRespond,
)

__all__ = [
    "BookRequestCreate",
    "BookRequestListRead",
    "BookRequestRead",
    "BookRequestRespond",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationReadResult",
]
