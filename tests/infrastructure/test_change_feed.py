"""Tests for the in-process change feed and its publisher."""

from __future__ import annotations

import anyio
import pytest
from anyio import to_thread

from app.domain.entities import (
    CHANGE_INSERT,
    CHANGE_UPDATE,
    TABLE_NOTIFICATIONS,
    TABLE_REQUESTS,
    BookRequest,
    ChangeEvent,
    Notification,
)
from app.infrastructure.realtime import serialize_change_event


def _request(status: str = "pending") -> BookRequest:
    return BookRequest(
        id="r1", book_id="b1", requester_id="bob", owner_id="alice", message="hi", status=status
    )


def _notification(user_id: str = "alice") -> Notification:
    return Notification(id="n1", user_id=user_id, type="system", title="t", message="m")


def test_subscription_filters_by_table_and_column(feed) -> None:
    owner = feed.subscribe(TABLE_REQUESTS, column="owner_id", value="alice")
    requester = feed.subscribe(TABLE_REQUESTS, column="requester_id", value="alice")
    notifications = feed.subscribe(TABLE_NOTIFICATIONS, column="user_id", value="alice")

    delivered = feed.publish(ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=_request()))

    assert delivered == 1
    assert owner._receive.receive_nowait().new.id == "r1"
    with pytest.raises(anyio.WouldBlock):
        requester._receive.receive_nowait()
    with pytest.raises(anyio.WouldBlock):
        notifications._receive.receive_nowait()


def test_update_matches_on_previous_row(feed) -> None:
    subscription = feed.subscribe(TABLE_NOTIFICATIONS, column="user_id", value="alice")

    event = ChangeEvent(
        table=TABLE_NOTIFICATIONS,
        event_type=CHANGE_UPDATE,
        new=_notification(user_id="carol"),
        old=_notification(),
    )

    assert feed.publish(event) == 1
    assert subscription.matches(event)


def test_close_detaches_and_is_idempotent(feed) -> None:
    with feed.subscribe(TABLE_REQUESTS, column="owner_id", value="alice") as subscription:
        assert feed.subscription_count == 1

    assert subscription.closed
    assert feed.subscription_count == 0
    subscription.close()
    assert feed.publish(ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=_request())) == 0


@pytest.mark.anyio
async def test_iteration_ends_when_closed(feed) -> None:
    subscription = feed.subscribe(TABLE_REQUESTS, column="owner_id", value="alice")
    received: list[ChangeEvent] = []

    async def _consume() -> None:
        async for event in subscription:
            received.append(event)

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_consume)
        await anyio.sleep(0)
        feed.publish(ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=_request()))
        await anyio.sleep(0.01)
        subscription.close()

    assert [event.new.id for event in received] == ["r1"]


@pytest.mark.anyio
async def test_publisher_hops_from_worker_thread(feed, publisher) -> None:
    subscription = feed.subscribe(TABLE_REQUESTS, column="owner_id", value="alice")
    event = ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=_request())

    await to_thread.run_sync(publisher.dispatch, event)

    with anyio.fail_after(1):
        assert await subscription.receive() is event
    subscription.close()


def test_publisher_without_event_loop(feed, publisher) -> None:
    subscription = feed.subscribe(TABLE_REQUESTS, column="owner_id", value="alice")

    publisher.dispatch_many(
        [
            ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=_request()),
            ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_UPDATE, new=_request("accepted")),
        ]
    )

    assert subscription._receive.statistics().current_buffer_used == 2


def test_serialize_change_event_uses_iso_timestamps() -> None:
    event = ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_UPDATE, new=_request("accepted"))

    payload = serialize_change_event(event)

    assert payload["table"] == "requests"
    assert payload["new"]["status"] == "accepted"
    assert payload["old"] is None
    assert isinstance(payload["committed_at"], str)
