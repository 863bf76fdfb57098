"""Pure reducers reconciling the local cache with the remote store.

Each reducer is total over every action kind and returns the *same* state
object when an action changes nothing, so replaying an event, or receiving a
change event for a write whose response was already applied, is a no-op.

Dedup works on id plus state, since change events carry no sequence number:

* requests only move forward (``pending`` before ``accepted``/``rejected``,
  then ``updated_at``), so an older version never overwrites a newer one;
* notifications only flip ``read`` from false to true, so remote changes can
  set the flag but never clear it. Clearing happens only through an explicit
  rollback of a failed local write, or through a server fetch.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping, TypeVar

from app.domain.entities import (
    CHANGE_DELETE,
    TABLE_NOTIFICATIONS,
    TABLE_REQUESTS,
    BookRequest,
    ChangeEvent,
    Notification,
    RequestPartition,
    status_rank,
)

E = TypeVar("E", BookRequest, Notification)


@dataclass(frozen=True)
class Fetched:
    """Server snapshot of the rows visible to the user."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class OptimisticRead:
    """Local ``read`` flip applied before the remote write resolves."""

    ids: frozenset[str]


@dataclass(frozen=True)
class WriteConfirmed:
    """Rows returned by a successful remote write."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class WriteRolledBack:
    """Restore the pre-call ``read`` value of each id after a failed write."""

    previous: Mapping[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoteChange:
    """Change event received from the change feed."""

    event: ChangeEvent


Action = Fetched | OptimisticRead | WriteConfirmed | WriteRolledBack | RemoteChange


@dataclass(frozen=True)
class NotificationState:
    items: tuple[Notification, ...] = ()

    @property
    def unread_count(self) -> int:
        return sum(1 for notification in self.items if not notification.read)

    def get(self, notification_id: str) -> Notification | None:
        return next((item for item in self.items if item.id == notification_id), None)


@dataclass(frozen=True)
class RequestState:
    items: tuple[BookRequest, ...] = ()

    def get(self, request_id: str) -> BookRequest | None:
        return next((item for item in self.items if item.id == request_id), None)

    def pending_for(self, *, book_id: str, requester_id: str) -> BookRequest | None:
        return next(
            (
                item
                for item in self.items
                if item.book_id == book_id
                and item.requester_id == requester_id
                and item.is_pending
            ),
            None,
        )

    def partition(self, user_id: str | None) -> RequestPartition:
        return RequestPartition(
            sent=[item for item in self.items if item.requester_id == user_id],
            received=[item for item in self.items if item.owner_id == user_id],
        )


def reduce_notifications(state: NotificationState, action: Action) -> NotificationState:
    if isinstance(action, Fetched):
        # The server version wins for every id the snapshot contains.
        items = _merge_fetched(state.items, action.items)
    elif isinstance(action, OptimisticRead):
        items = tuple(
            replace(item, read=True) if item.id in action.ids and not item.read else item
            for item in state.items
        )
    elif isinstance(action, WriteRolledBack):
        items = tuple(
            replace(item, read=action.previous[item.id])
            if item.id in action.previous and item.read != action.previous[item.id]
            else item
            for item in state.items
        )
    elif isinstance(action, WriteConfirmed):
        items = _upsert_all(state.items, action.items, _merge_notification)
    elif isinstance(action, RemoteChange):
        items = _apply_event(state.items, action.event, TABLE_NOTIFICATIONS, _merge_notification)
    else:
        return state
    return state if _unchanged(state.items, items) else NotificationState(items=items)


def reduce_requests(state: RequestState, action: Action) -> RequestState:
    if isinstance(action, Fetched):
        # A snapshot taken before a transition must not move a request backwards.
        items = _merge_fetched(state.items, action.items, _merge_request)
    elif isinstance(action, WriteConfirmed):
        items = _upsert_all(state.items, action.items, _merge_request)
    elif isinstance(action, RemoteChange):
        items = _apply_event(state.items, action.event, TABLE_REQUESTS, _merge_request)
    else:
        # Requests are never updated optimistically, so there is nothing to roll back.
        return state
    return state if _unchanged(state.items, items) else RequestState(items=items)


def _merge_notification(existing: Notification, incoming: Notification) -> Notification:
    if existing.read and not incoming.read:
        return replace(incoming, read=True)
    return incoming


def _merge_request(existing: BookRequest, incoming: BookRequest) -> BookRequest:
    if status_rank(incoming.status) < status_rank(existing.status):
        return existing
    if (
        status_rank(incoming.status) == status_rank(existing.status)
        and existing.updated_at is not None
        and incoming.updated_at is not None
        and incoming.updated_at < existing.updated_at
    ):
        return existing
    # Change events carry bare rows; keep the display data a fetch attached.
    return replace(
        incoming,
        book_title=incoming.book_title or existing.book_title,
        requester_name=incoming.requester_name or existing.requester_name,
        owner_name=incoming.owner_name or existing.owner_name,
    )


def _merge_fetched(
    current: tuple[E, ...],
    fetched: Iterable[E],
    merge: Callable[[E, E], E] | None = None,
) -> tuple[E, ...]:
    fetched = tuple(fetched)
    if merge is not None:
        known = {item.id: item for item in current}
        fetched = tuple(
            merge(known[item.id], item) if item.id in known else item for item in fetched
        )
    fetched_ids = {item.id for item in fetched}
    # Rows only known locally came from events or writes the snapshot predates.
    local_only = [item for item in current if item.id not in fetched_ids]
    return _sorted(list(fetched) + local_only)


def _upsert_all(
    current: tuple[E, ...], incoming: Iterable[E], merge: Callable[[E, E], E]
) -> tuple[E, ...]:
    items = current
    for item in incoming:
        items = _upsert(items, item, merge)
    return items


def _upsert(current: tuple[E, ...], incoming: E, merge: Callable[[E, E], E]) -> tuple[E, ...]:
    for index, existing in enumerate(current):
        if existing.id != incoming.id:
            continue
        merged = merge(existing, incoming)
        if merged == existing:
            return current
        return _sorted(current[:index] + (merged,) + current[index + 1 :])
    return _sorted(current + (incoming,))


def _apply_event(
    current: tuple[E, ...], event: ChangeEvent, table: str, merge: Callable[[E, E], E]
) -> tuple[E, ...]:
    if event.table != table:
        return current
    if event.event_type == CHANGE_DELETE:
        record = event.record
        if record is None:
            return current
        return tuple(item for item in current if item.id != record.id)
    if event.new is None:
        return current
    return _upsert(current, event.new, merge)


def _sorted(items: Iterable[E]) -> tuple[E, ...]:
    """Newest first, ties broken by id like the server queries."""

    def _key(item: E) -> tuple[float, str]:
        created = item.created_at.timestamp() if item.created_at else float("-inf")
        return (created, item.id or "")

    return tuple(sorted(items, key=_key, reverse=True))


def _unchanged(before: tuple[Any, ...], after: tuple[Any, ...]) -> bool:
    return before is after or before == after


__all__ = [
    "Action",
    "Fetched",
    "NotificationState",
    "OptimisticRead",
    "RemoteChange",
    "RequestState",
    "WriteConfirmed",
    "WriteRolledBack",
    "reduce_notifications",
    "reduce_requests",
]
