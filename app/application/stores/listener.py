"""Bridge from change-feed subscriptions into the client stores."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Callable

import anyio
from anyio.abc import TaskStatus

from app.application.ports import ChangeSource
from app.domain.entities import TABLE_NOTIFICATIONS, TABLE_REQUESTS, ChangeEvent

from .notification_store import NotificationStore
from .request_store import RequestStore

logger = logging.getLogger(__name__)


class RealtimeListener:
    """Patch the stores by id from the user's change feeds.

    Three subscriptions are held while :meth:`run` is active: requests the
    user sent, requests addressed to them, and their notifications. They are
    released when ``run`` returns, fails or is cancelled.
    """

    def __init__(
        self,
        feed: ChangeSource,
        *,
        user_id: str,
        requests: RequestStore,
        notifications: NotificationStore,
    ) -> None:
        self._feed = feed
        self._user_id = user_id
        self._requests = requests
        self._notifications = notifications

    async def run(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        with ExitStack() as stack:
            routes = [
                (
                    stack.enter_context(
                        self._feed.subscribe(TABLE_REQUESTS, column="requester_id", value=self._user_id)
                    ),
                    self._requests.apply_change,
                ),
                (
                    stack.enter_context(
                        self._feed.subscribe(TABLE_REQUESTS, column="owner_id", value=self._user_id)
                    ),
                    self._requests.apply_change,
                ),
                (
                    stack.enter_context(
                        self._feed.subscribe(TABLE_NOTIFICATIONS, column="user_id", value=self._user_id)
                    ),
                    self._notifications.apply_change,
                ),
            ]
            task_status.started()
            logger.info("Realtime listener started for %s", self._user_id)
            try:
                async with anyio.create_task_group() as task_group:
                    for subscription, handler in routes:
                        task_group.start_soon(self._pump, subscription, handler)
            finally:
                logger.info("Realtime listener stopped for %s", self._user_id)

    @staticmethod
    async def _pump(subscription, handler: Callable[[ChangeEvent], bool]) -> None:
        async for event in subscription:
            handler(event)


__all__ = ["RealtimeListener"]
