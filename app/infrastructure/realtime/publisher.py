"""Utility helpers to push committed changes to change feed subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from anyio import from_thread

from app.domain.entities import ChangeEvent

from .change_feed import ChangeFeed

logger = logging.getLogger(__name__)


class ChangeEventPublisher:
    """Deliver change events on the thread that owns the feed.

    Use cases commit inside worker threads (remote writes, sync FastAPI
    routes), so delivery is handed back to the event loop through AnyIO. Code
    running without any event loop (scripts) publishes directly.
    """

    def __init__(self, feed: ChangeFeed) -> None:
        self._feed = feed

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    def dispatch(self, event: ChangeEvent) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                delivered = from_thread.run_sync(self._feed.publish, event)
            except RuntimeError:
                delivered = self._feed.publish(event)
        else:
            delivered = self._feed.publish(event)
        logger.debug(
            "Published %s on %s to %s subscription(s)", event.event_type, event.table, delivered
        )

    def dispatch_many(self, events: Iterable[ChangeEvent]) -> None:
        for event in events:
            self.dispatch(event)


__all__ = ["ChangeEventPublisher"]
