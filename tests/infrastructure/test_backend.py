"""Tests for running use cases through the SQL exchange backend."""

from __future__ import annotations

import time

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.domain.entities import REQUEST_STATUS_ACCEPTED, TABLE_NOTIFICATIONS, TABLE_REQUESTS
from app.domain.errors import DuplicateRequestError, TransientError
from app.infrastructure.backend import SqlExchangeBackend
from conftest import ALICE, BOB, BOOK_1984

pytestmark = pytest.mark.anyio


@pytest.fixture
def backend(seeded, publisher):
    return SqlExchangeBackend(seeded, publisher, timeout=2)


async def test_round_trip_through_worker_threads(backend, feed) -> None:
    owner_feed = feed.subscribe(TABLE_REQUESTS, column="owner_id", value=ALICE)
    requester_feed = feed.subscribe(TABLE_NOTIFICATIONS, column="user_id", value=BOB)

    created = await backend.create_request(
        requester_id=BOB, book_id=BOOK_1984, owner_id=ALICE, message="interested"
    )
    answered = await backend.respond_to_request(
        owner_id=ALICE, request_id=created.id, decision="accepted", response_message="sure"
    )

    assert answered.status == REQUEST_STATUS_ACCEPTED
    assert (await owner_feed.receive()).new.id == created.id
    assert (await owner_feed.receive()).new.status == REQUEST_STATUS_ACCEPTED
    assert "sure" in (await requester_feed.receive()).new.message

    partition = await backend.list_requests(ALICE)
    assert [item.id for item in partition.received] == [created.id]
    notifications = await backend.list_notifications(BOB)
    assert len(notifications) == 1

    changed = await backend.mark_all_notifications_read(BOB)
    assert [item.id for item in changed] == [notifications[0].id]
    assert await backend.mark_notifications_read(BOB, [notifications[0].id]) == []

    owner_feed.close()
    requester_feed.close()


async def test_domain_errors_pass_through(backend) -> None:
    await backend.create_request(
        requester_id=BOB, book_id=BOOK_1984, owner_id=ALICE, message="interested"
    )

    with pytest.raises(DuplicateRequestError):
        await backend.create_request(
            requester_id=BOB, book_id=BOOK_1984, owner_id=ALICE, message="again"
        )


async def test_slow_call_times_out_as_transient(seeded, publisher) -> None:
    backend = SqlExchangeBackend(seeded, publisher, timeout=0.05)

    def slow_use_case(session):
        time.sleep(0.5)

    with pytest.raises(TransientError) as excinfo:
        await backend.run(slow_use_case)

    assert excinfo.value.retryable is True
    assert "slow_use_case" in excinfo.value.message


async def test_database_unavailable_is_transient(backend) -> None:
    def unavailable(session):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(TransientError):
        await backend.run(unavailable)


async def test_other_database_errors_propagate(backend) -> None:
    def broken(session):
        raise IntegrityError("INSERT", {}, Exception("constraint"))

    with pytest.raises(IntegrityError):
        await backend.run(broken)
