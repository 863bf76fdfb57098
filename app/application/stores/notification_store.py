"""Client-side cache of the current user's notifications."""

from __future__ import annotations

import logging

from app.application.ports import ExchangeBackend, IdentityProvider
from app.domain.entities import TABLE_NOTIFICATIONS, ChangeEvent, Notification
from app.domain.errors import ensure_authenticated

from .observable import ObservableStore
from .reducers import (
    Fetched,
    NotificationState,
    OptimisticRead,
    RemoteChange,
    WriteConfirmed,
    WriteRolledBack,
    reduce_notifications,
)

logger = logging.getLogger(__name__)


class NotificationStore(ObservableStore[NotificationState]):
    """Notifications newest first plus an unread counter derived from them.

    ``mark_read`` and ``mark_all_read`` flip the local flags before the remote
    write resolves and restore the exact previous flags if it fails, except for
    ids a remote change reported as read while the write was in flight.
    """

    def __init__(self, backend: ExchangeBackend, identity: IdentityProvider) -> None:
        super().__init__(NotificationState(), reduce_notifications)
        self._backend = backend
        self._identity = identity
        self._remote_read: set[str] = set()

    @property
    def notifications(self) -> list[Notification]:
        return list(self.state.items)

    @property
    def unread_count(self) -> int:
        return self.state.unread_count

    async def refresh(self) -> list[Notification]:
        user_id = ensure_authenticated(self._identity())
        fetched = await self._backend.list_notifications(user_id)
        self._dispatch(Fetched(tuple(fetched)))
        return self.notifications

    async def mark_read(self, notification_id: str) -> None:
        user_id = ensure_authenticated(self._identity())
        current = self.state.get(notification_id)
        if current is not None and current.read:
            return

        previous = {notification_id: False} if current is not None else {}
        self._begin_optimistic(previous)
        try:
            changed = await self._backend.mark_notifications_read(user_id, [notification_id])
        except Exception:
            self._roll_back(previous)
            raise
        self._dispatch(WriteConfirmed(tuple(changed)))

    async def mark_all_read(self) -> None:
        user_id = ensure_authenticated(self._identity())
        previous = {item.id: item.read for item in self.state.items if not item.read}
        self._begin_optimistic(previous)
        # The server may hold unread rows this cache has not seen yet.
        try:
            changed = await self._backend.mark_all_notifications_read(user_id)
        except Exception:
            self._roll_back(previous)
            raise
        self._dispatch(WriteConfirmed(tuple(changed)))

    def apply_change(self, event: ChangeEvent) -> bool:
        record = event.new
        if event.table == TABLE_NOTIFICATIONS and record is not None and record.read:
            self._remote_read.add(record.id)
        return self._dispatch(RemoteChange(event))

    def _begin_optimistic(self, previous: dict[str, bool]) -> None:
        if not previous:
            return
        self._remote_read.difference_update(previous)
        self._dispatch(OptimisticRead(frozenset(previous)))

    def _roll_back(self, previous: dict[str, bool]) -> None:
        restore = {
            notification_id: value
            for notification_id, value in previous.items()
            if notification_id not in self._remote_read
        }
        if not restore:
            return
        logger.warning("Rolling back read flag of %s notification(s)", len(restore))
        self._dispatch(WriteRolledBack(restore))


__all__ = ["NotificationStore"]
