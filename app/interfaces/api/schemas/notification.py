"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[str] = []
        seen: set[str] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: str
    title: str
    message: str
    read: bool
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class NotificationReadResult(BaseModel):
    """Notifications whose read flag changed, plus the remaining unread count."""

    updated: list[NotificationRead] = Field(default_factory=list)
    unread_count: int


__all__ = ["NotificationMarkReadRequest", "NotificationRead", "NotificationReadResult"]
