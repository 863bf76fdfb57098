"""Domain entity describing a committed change on a realtime collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

TABLE_REQUESTS = "requests"
TABLE_NOTIFICATIONS = "notifications"

CHANGE_INSERT = "INSERT"
CHANGE_UPDATE = "UPDATE"
CHANGE_DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """Row-level change delivered through the change feed.

    ``new`` holds the committed entity for inserts and updates, ``old`` the last
    known entity for updates and deletes.
    """

    table: str
    event_type: str
    new: Any = None
    old: Any = None
    committed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def record(self) -> Any:
        """Entity the event refers to, preferring the committed version."""

        return self.new if self.new is not None else self.old


__all__ = [
    "CHANGE_DELETE",
    "CHANGE_INSERT",
    "CHANGE_UPDATE",
    "ChangeEvent",
    "TABLE_NOTIFICATIONS",
    "TABLE_REQUESTS",
]
