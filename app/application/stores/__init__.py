"""Client-side stores kept consistent with the remote store."""

from .listener import RealtimeListener
from .notification_store import NotificationStore
from .reducers import (
    Fetched,
    NotificationState,
    OptimisticRead,
    RemoteChange,
    RequestState,
    WriteConfirmed,
    WriteRolledBack,
    reduce_notifications,
    reduce_requests,
)
from .request_store import RequestStore
from .session import ExchangeSession, open_exchange_session

__all__ = [
    "ExchangeSession",
    "Fetched",
    "NotificationState",
    "NotificationStore",
    "OptimisticRead",
    "RealtimeListener",
    "RemoteChange",
    "RequestState",
    "RequestStore",
    "WriteConfirmed",
    "WriteRolledBack",
    "open_exchange_session",
    "reduce_notifications",
    "reduce_requests",
]
