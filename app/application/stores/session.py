"""Scoped wiring of the client stores and their realtime listener."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import anyio

from app.application.ports import ChangeSource, ExchangeBackend, static_identity
from app.domain.errors import ensure_authenticated

from .listener import RealtimeListener
from .notification_store import NotificationStore
from .request_store import RequestStore


@dataclass(frozen=True)
class ExchangeSession:
    user_id: str
    requests: RequestStore
    notifications: NotificationStore


@asynccontextmanager
async def open_exchange_session(
    backend: ExchangeBackend,
    feed: ChangeSource,
    user_id: str | None,
    *,
    refresh: bool = True,
) -> AsyncIterator[ExchangeSession]:
    """Yield stores kept in sync with ``feed`` for the lifetime of the block.

    The listener subscribes before the first fetch so no change committed in
    between is lost; overlaps are absorbed by the reducers.
    """

    user_id = ensure_authenticated(user_id)
    identity = static_identity(user_id)
    requests = RequestStore(backend, identity)
    notifications = NotificationStore(backend, identity)
    listener = RealtimeListener(
        feed, user_id=user_id, requests=requests, notifications=notifications
    )

    failure: Exception | None = None
    async with anyio.create_task_group() as task_group:
        await task_group.start(listener.run)
        try:
            if refresh:
                await requests.refresh()
                await notifications.refresh()
            yield ExchangeSession(user_id=user_id, requests=requests, notifications=notifications)
        except Exception as exc:
            failure = exc
        finally:
            task_group.cancel_scope.cancel()
    # Raised outside the task group so callers get the error itself, not a group.
    if failure is not None:
        raise failure


__all__ = ["ExchangeSession", "open_exchange_session"]
