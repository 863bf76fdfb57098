"""Helpers that turn request transitions into notifications and change events."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.orm import Session

from app.domain.entities import (
    CHANGE_INSERT,
    CHANGE_UPDATE,
    NOTIFICATION_TYPE_BOOK_REQUEST,
    NOTIFICATION_TYPE_REQUEST_ACCEPTED,
    NOTIFICATION_TYPE_REQUEST_REJECTED,
    REQUEST_STATUS_ACCEPTED,
    TABLE_NOTIFICATIONS,
    TABLE_REQUESTS,
    BookRequest,
    ChangeEvent,
    Notification,
)
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone


def _persist_notification(
    session: Session,
    *,
    user_id: str,
    notification_type: str,
    title: str,
    message: str,
    data: dict | None = None,
) -> Notification:
    notification = Notification(
        id=None,
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        read=False,
        data=data or {},
        created_at=now_in_app_timezone(),
    )
    return NotificationRepository(session).create(notification)


def preview_message(message: str, *, length: int) -> str:
    """Return ``message`` cut to ``length`` characters, marking the cut with ``...``."""

    if len(message) <= length:
        return message
    return f"{message[:length]}..."


def notify_request_created(
    session: Session,
    *,
    request: BookRequest,
    book_title: str,
    requester_name: str,
    preview_length: int,
) -> Notification:
    """Tell the book owner that someone wants to borrow their book."""

    preview = preview_message(request.message, length=preview_length)
    return _persist_notification(
        session,
        user_id=request.owner_id,
        notification_type=NOTIFICATION_TYPE_BOOK_REQUEST,
        title="New borrow request",
        message=f"{requester_name} wants to borrow \"{book_title}\". Message: \"{preview}\"",
        data={
            "request_id": request.id,
            "book_id": request.book_id,
            "requester_id": request.requester_id,
            "requester_name": requester_name,
        },
    )


def notify_request_responded(
    session: Session,
    *,
    request: BookRequest,
    book_title: str,
    owner_name: str,
    response_message: str | None,
) -> Notification:
    """Tell the requester how the owner answered."""

    accepted = request.status == REQUEST_STATUS_ACCEPTED
    if accepted:
        title = "Request accepted!"
        message = f"{owner_name} accepted your request for \"{book_title}\"."
    else:
        title = "Request declined"
        message = f"{owner_name} declined your request for \"{book_title}\"."
    if response_message:
        message = f"{message} {response_message}"

    data = {
        "request_id": request.id,
        "book_id": request.book_id,
        "owner_id": request.owner_id,
        "status": request.status,
    }
    if response_message:
        data["owner_message"] = response_message

    return _persist_notification(
        session,
        user_id=request.requester_id,
        notification_type=(
            NOTIFICATION_TYPE_REQUEST_ACCEPTED if accepted else NOTIFICATION_TYPE_REQUEST_REJECTED
        ),
        title=title,
        message=message,
        data=data,
    )


def request_created_events(
    request: BookRequest, notification: Notification
) -> list[ChangeEvent]:
    return [
        ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_INSERT, new=request),
        ChangeEvent(table=TABLE_NOTIFICATIONS, event_type=CHANGE_INSERT, new=notification),
    ]


def request_responded_events(
    previous: BookRequest, updated: BookRequest, notification: Notification
) -> list[ChangeEvent]:
    return [
        ChangeEvent(table=TABLE_REQUESTS, event_type=CHANGE_UPDATE, new=updated, old=previous),
        ChangeEvent(table=TABLE_NOTIFICATIONS, event_type=CHANGE_INSERT, new=notification),
    ]


def notifications_read_events(notifications: list[Notification]) -> list[ChangeEvent]:
    return [
        ChangeEvent(
            table=TABLE_NOTIFICATIONS,
            event_type=CHANGE_UPDATE,
            new=notification,
            old=replace(notification, read=False),
        )
        for notification in notifications
    ]


__all__ = [
    "notifications_read_events",
    "notify_request_created",
    "notify_request_responded",
    "preview_message",
    "request_created_events",
    "request_responded_events",
]
