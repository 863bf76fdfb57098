"""In-process change feed keyed by table and column filter."""

from __future__ import annotations

import logging
import math
from typing import Any

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from app.domain.entities import ChangeEvent

logger = logging.getLogger(__name__)


class Subscription:
    """Cancellable stream of :class:`ChangeEvent` for one filtered table.

    Iterate it with ``async for``; iteration ends once :meth:`close` is
    called. Using it as a context manager guarantees the release on every exit
    path.
    """

    def __init__(self, feed: "ChangeFeed", *, table: str, column: str, value: Any) -> None:
        self.table = table
        self.column = column
        self.value = value
        self._feed = feed
        self._closed = False
        send, receive = anyio.create_memory_object_stream(max_buffer_size=math.inf)
        self._send: MemoryObjectSendStream = send
        self._receive: MemoryObjectReceiveStream = receive

    @property
    def closed(self) -> bool:
        return self._closed

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        for record in (event.new, event.old):
            if record is not None and getattr(record, self.column, None) == self.value:
                return True
        return False

    def deliver(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        self._send.send_nowait(event)

    async def receive(self) -> ChangeEvent:
        """Return the next event, raising ``anyio.EndOfStream`` once closed."""

        try:
            return await self._receive.receive()
        except anyio.ClosedResourceError:
            raise anyio.EndOfStream from None

    def close(self) -> None:
        """Stop the stream and detach it from the feed. Safe to call twice."""

        if self._closed:
            return
        self._closed = True
        self._feed._detach(self)
        self._send.close()
        self._receive.close()
        logger.info("Closed %s subscription on %s=%s", self.table, self.column, self.value)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        try:
            return await self.receive()
        except anyio.EndOfStream:
            raise StopAsyncIteration from None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class ChangeFeed:
    """Fan committed changes out to the subscriptions whose filter matches.

    :meth:`publish` must run on the event loop thread that owns the
    subscriptions; :class:`ChangeEventPublisher` takes care of hopping threads.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, table: str, *, column: str, value: Any) -> Subscription:
        subscription = Subscription(self, table=table, column=column, value=value)
        self._subscriptions.append(subscription)
        logger.info("Opened %s subscription on %s=%s", table, column, value)
        return subscription

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` and return how many subscriptions received it."""

        delivered = 0
        for subscription in list(self._subscriptions):
            if subscription.matches(event):
                subscription.deliver(event)
                delivered += 1
        return delivered

    def _detach(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass


__all__ = ["ChangeFeed", "Subscription"]
