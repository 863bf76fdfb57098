"""Domain entity representing a request to borrow a book."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

REQUEST_STATUS_PENDING = "pending"
REQUEST_STATUS_ACCEPTED = "accepted"
REQUEST_STATUS_REJECTED = "rejected"

REQUEST_DECISIONS = frozenset({REQUEST_STATUS_ACCEPTED, REQUEST_STATUS_REJECTED})

# Allowed transitions; accepted and rejected are terminal.
REQUEST_TRANSITIONS: dict[str, frozenset[str]] = {
    REQUEST_STATUS_PENDING: REQUEST_DECISIONS,
    REQUEST_STATUS_ACCEPTED: frozenset(),
    REQUEST_STATUS_REJECTED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    """Return whether a request in ``current`` may move to ``target``."""

    return target in REQUEST_TRANSITIONS.get(current, frozenset())


def status_rank(status: str) -> int:
    """Order statuses by lifecycle progress so stale versions can be detected."""

    return 0 if status == REQUEST_STATUS_PENDING else 1


@dataclass
class BookRequest:
    """A requester asking the owner of a book to lend it."""

    id: str | None
    book_id: str
    requester_id: str
    owner_id: str
    message: str
    status: str = REQUEST_STATUS_PENDING
    meeting_location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    book_title: str | None = None
    requester_name: str | None = None
    owner_name: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == REQUEST_STATUS_PENDING


@dataclass(frozen=True)
class RequestPartition:
    """Requests a user sent and requests addressed to the books they own."""

    sent: list[BookRequest] = field(default_factory=list)
    received: list[BookRequest] = field(default_factory=list)


__all__ = [
    "BookRequest",
    "RequestPartition",
    "REQUEST_DECISIONS",
    "REQUEST_STATUS_ACCEPTED",
    "REQUEST_STATUS_PENDING",
    "REQUEST_STATUS_REJECTED",
    "REQUEST_TRANSITIONS",
    "can_transition",
    "status_rank",
]
