"""Collaborators the client stores depend on.

The stores never reach for module-level clients: a backend, a change source
and an identity provider are handed to them at construction.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol

from app.domain.entities import BookRequest, Notification, RequestPartition

IdentityProvider = Callable[[], "str | None"]


class ExchangeBackend(Protocol):
    """Remote source of truth for requests and notifications.

    Every method may raise a :class:`~app.domain.errors.BookExchangeError`;
    transport failures and timeouts surface as ``TransientError``.
    """

    async def list_requests(self, user_id: str) -> RequestPartition: ...

    async def create_request(
        self,
        *,
        requester_id: str,
        book_id: str,
        owner_id: str | None,
        message: str,
        meeting_location: str | None = None,
    ) -> BookRequest: ...

    async def respond_to_request(
        self,
        *,
        owner_id: str,
        request_id: str,
        decision: str,
        response_message: str | None = None,
    ) -> BookRequest: ...

    async def list_notifications(self, user_id: str) -> list[Notification]: ...

    async def mark_notifications_read(
        self, user_id: str, notification_ids: Iterable[str]
    ) -> list[Notification]: ...

    async def mark_all_notifications_read(self, user_id: str) -> list[Notification]: ...


class ChangeSource(Protocol):
    """Change feed able to open filtered subscriptions."""

    def subscribe(self, table: str, *, column: str, value: str): ...


def static_identity(user_id: str | None) -> IdentityProvider:
    """Identity provider that always reports ``user_id``."""

    def _identity() -> str | None:
        return user_id

    return _identity


__all__ = ["ChangeSource", "ExchangeBackend", "IdentityProvider", "static_identity"]
