"""Tests for the pure cache reconciliation reducers."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from app.application.stores import (
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
from app.domain.entities import (
    CHANGE_DELETE,
    CHANGE_INSERT,
    CHANGE_UPDATE,
    TABLE_NOTIFICATIONS,
    TABLE_REQUESTS,
    BookRequest,
    ChangeEvent,
    Notification,
)

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _notification(index: int, *, read: bool = False, user_id: str = "u1") -> Notification:
    return Notification(
        id=f"n{index}",
        user_id=user_id,
        type="book_request",
        title=f"Title {index}",
        message=f"Message {index}",
        read=read,
        created_at=BASE + timedelta(minutes=index),
    )


def _request(index: int, *, status: str = "pending", updated: int = 0) -> BookRequest:
    return BookRequest(
        id=f"r{index}",
        book_id=f"b{index}",
        requester_id="u1",
        owner_id="u2",
        message="interested",
        status=status,
        created_at=BASE + timedelta(minutes=index),
        updated_at=BASE + timedelta(minutes=index + updated),
    )


def _insert(record, table: str = TABLE_NOTIFICATIONS) -> RemoteChange:
    return RemoteChange(ChangeEvent(table=table, event_type=CHANGE_INSERT, new=record))


def _update(record, old=None, table: str = TABLE_NOTIFICATIONS) -> RemoteChange:
    return RemoteChange(ChangeEvent(table=table, event_type=CHANGE_UPDATE, new=record, old=old))


def test_fetch_orders_newest_first() -> None:
    state = reduce_notifications(
        NotificationState(), Fetched((_notification(1), _notification(3), _notification(2)))
    )

    assert [item.id for item in state.items] == ["n3", "n2", "n1"]
    assert state.unread_count == 3


def test_insert_event_replay_is_a_noop() -> None:
    state = reduce_notifications(NotificationState(), Fetched((_notification(1),)))
    action = _insert(_notification(2))

    once = reduce_notifications(state, action)
    twice = reduce_notifications(once, action)

    assert twice is once
    assert [item.id for item in once.items] == ["n2", "n1"]
    assert once.unread_count == 2


def test_event_after_own_write_is_a_noop() -> None:
    """A change event echoing a write whose response was already applied changes nothing."""

    created = _request(1)
    state = reduce_requests(RequestState(), WriteConfirmed((created,)))

    after_event = reduce_requests(state, _insert(created, table=TABLE_REQUESTS))

    assert after_event is state
    assert len(after_event.items) == 1


def test_stale_request_event_does_not_move_status_backwards() -> None:
    accepted = _request(1, status="accepted", updated=5)
    state = reduce_requests(RequestState(), WriteConfirmed((accepted,)))

    after_event = reduce_requests(state, _update(_request(1), table=TABLE_REQUESTS))

    assert after_event is state
    assert state.get("r1").status == "accepted"


def test_stale_fetch_does_not_move_status_backwards() -> None:
    accepted = _request(1, status="accepted", updated=5)
    state = reduce_requests(RequestState(), WriteConfirmed((accepted,)))

    after_fetch = reduce_requests(state, Fetched((_request(1), _request(2))))

    assert after_fetch.get("r1").status == "accepted"
    assert after_fetch.get("r2") is not None


def test_request_update_keeps_display_fields() -> None:
    fetched = replace(_request(1), book_title="1984", requester_name="Bob", owner_name="Alice")
    state = reduce_requests(RequestState(), Fetched((fetched,)))

    state = reduce_requests(
        state, _update(_request(1, status="accepted", updated=1), table=TABLE_REQUESTS)
    )

    item = state.get("r1")
    assert item.status == "accepted"
    assert (item.book_title, item.requester_name, item.owner_name) == ("1984", "Bob", "Alice")


def test_fetch_keeps_rows_only_known_locally() -> None:
    state = reduce_notifications(NotificationState(), _insert(_notification(5)))

    state = reduce_notifications(state, Fetched((_notification(1),)))

    assert [item.id for item in state.items] == ["n5", "n1"]


def test_optimistic_read_then_rollback_restores_previous_value() -> None:
    state = reduce_notifications(
        NotificationState(), Fetched((_notification(1), _notification(2, read=True)))
    )

    optimistic = reduce_notifications(state, OptimisticRead(frozenset({"n1"})))
    assert optimistic.unread_count == 0

    rolled_back = reduce_notifications(optimistic, WriteRolledBack({"n1": False}))
    assert rolled_back == state
    assert rolled_back.get("n2").read is True


def test_fetch_overrides_optimistic_read() -> None:
    state = reduce_notifications(NotificationState(), Fetched((_notification(1),)))
    state = reduce_notifications(state, OptimisticRead(frozenset({"n1"})))

    after = reduce_notifications(state, Fetched((_notification(1, read=False),)))

    assert after.get("n1").read is False
    assert after.unread_count == 1


def test_remote_update_never_clears_read_flag() -> None:
    state = reduce_notifications(NotificationState(), Fetched((_notification(1, read=True),)))

    after = reduce_notifications(state, _update(_notification(1, read=False)))

    assert after is state
    assert after.unread_count == 0


def test_delete_event_removes_row() -> None:
    state = reduce_notifications(
        NotificationState(), Fetched((_notification(1), _notification(2)))
    )

    after = reduce_notifications(
        state,
        RemoteChange(
            ChangeEvent(table=TABLE_NOTIFICATIONS, event_type=CHANGE_DELETE, old=_notification(1))
        ),
    )

    assert [item.id for item in after.items] == ["n2"]
    assert after.unread_count == 1


def test_events_for_other_tables_are_ignored() -> None:
    state = NotificationState(items=(_notification(1),))

    assert reduce_notifications(state, _insert(_request(1), table=TABLE_REQUESTS)) is state
    assert reduce_requests(RequestState(), _insert(_notification(1))) == RequestState()


def test_request_reducer_ignores_read_actions() -> None:
    state = RequestState(items=(_request(1),))

    assert reduce_requests(state, OptimisticRead(frozenset({"r1"}))) is state
    assert reduce_requests(state, WriteRolledBack({"r1": False})) is state


@pytest.mark.parametrize(
    "actions",
    [
        [
            OptimisticRead(frozenset({"n1"})),
            _insert(_notification(4)),
            WriteConfirmed((_notification(1, read=True),)),
            _update(_notification(2, read=True), old=_notification(2)),
        ],
        [
            _insert(_notification(4)),
            OptimisticRead(frozenset({"n1", "n2", "n4"})),
            WriteRolledBack({"n1": False, "n2": False, "n4": False}),
            _insert(_notification(4)),
        ],
        [
            _update(_notification(3, read=True)),
            Fetched((_notification(1), _notification(2), _notification(3))),
            OptimisticRead(frozenset({"n2"})),
            _update(_notification(2, read=True)),
        ],
    ],
)
def test_unread_count_is_derived_from_items(actions) -> None:
    state = reduce_notifications(
        NotificationState(), Fetched((_notification(1), _notification(2), _notification(3)))
    )
    for action in actions:
        state = reduce_notifications(state, action)
        assert state.unread_count == sum(1 for item in state.items if not item.read)
        assert len({item.id for item in state.items}) == len(state.items)
