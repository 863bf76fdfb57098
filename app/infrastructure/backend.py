"""SQLAlchemy implementation of the exchange backend used by client stores."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

import anyio
from anyio import to_thread
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.application.use_cases import (
    create_request,
    list_notifications,
    list_requests,
    mark_all_notifications_read,
    mark_notifications_read,
    respond_to_request,
)
from app.config import get_settings
from app.domain.entities import BookRequest, Notification, RequestPartition
from app.domain.errors import TransientError

from .realtime import ChangeEventPublisher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlExchangeBackend:
    """Run use cases in worker threads with a bounded wait.

    Each call opens its own session, so calls may overlap without sharing
    connection state. A call that does not finish within ``timeout`` seconds
    raises :class:`TransientError`; the worker is abandoned, not retried, and
    its write may still commit.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        publisher: ChangeEventPublisher,
        *,
        timeout: float | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher
        self._timeout = timeout if timeout is not None else get_settings().write_timeout_seconds

    async def run(self, use_case: Callable[..., T], /, **kwargs: Any) -> T:
        def _call() -> T:
            with self._session_factory() as session:
                try:
                    return use_case(session, **kwargs)
                except OperationalError as exc:
                    raise TransientError() from exc
                except DBAPIError as exc:
                    if exc.connection_invalidated:
                        raise TransientError() from exc
                    raise

        name = getattr(use_case, "__name__", repr(use_case))
        try:
            with anyio.fail_after(self._timeout):
                return await to_thread.run_sync(_call, abandon_on_cancel=True)
        except TimeoutError as exc:
            logger.warning("%s did not finish within %.1fs", name, self._timeout)
            raise TransientError(f"{name} timed out") from exc

    async def list_requests(self, user_id: str) -> RequestPartition:
        return await self.run(list_requests, user_id=user_id)

    async def create_request(
        self,
        *,
        requester_id: str,
        book_id: str,
        owner_id: str | None,
        message: str,
        meeting_location: str | None = None,
    ) -> BookRequest:
        return await self.run(
            create_request,
            requester_id=requester_id,
            book_id=book_id,
            owner_id=owner_id,
            message=message,
            meeting_location=meeting_location,
            publisher=self._publisher,
        )

    async def respond_to_request(
        self,
        *,
        owner_id: str,
        request_id: str,
        decision: str,
        response_message: str | None = None,
    ) -> BookRequest:
        return await self.run(
            respond_to_request,
            owner_id=owner_id,
            request_id=request_id,
            decision=decision,
            response_message=response_message,
            publisher=self._publisher,
        )

    async def list_notifications(self, user_id: str) -> list[Notification]:
        return list(await self.run(list_notifications, user_id=user_id))

    async def mark_notifications_read(
        self, user_id: str, notification_ids: Iterable[str]
    ) -> list[Notification]:
        return await self.run(
            mark_notifications_read,
            user_id=user_id,
            notification_ids=list(notification_ids),
            publisher=self._publisher,
        )

    async def mark_all_notifications_read(self, user_id: str) -> list[Notification]:
        return await self.run(
            mark_all_notifications_read, user_id=user_id, publisher=self._publisher
        )


__all__ = ["SqlExchangeBackend"]
