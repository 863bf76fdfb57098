"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Any

import anyio
from anyio import to_thread
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.application.use_cases import (
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notifications_read as mark_notifications_read_uc,
)
from app.domain.entities import TABLE_NOTIFICATIONS, TABLE_REQUESTS, Notification
from app.domain.errors import BookExchangeError
from app.infrastructure.realtime import (
    ChangeEventPublisher,
    serialize_change_event,
    serialize_notification,
)
from app.infrastructure.security import user_id_from_token
from app.interfaces.api.dependencies import get_current_user_id, get_db, get_publisher
from app.interfaces.api.routes_helpers import to_http_exception
from app.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationReadResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

# Policy violation close code used for missing or invalid tokens.
WS_POLICY_VIOLATION = 1008


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _read_result(db: Session, user_id: str, changed: list[Notification]) -> NotificationReadResult:
    unread = list_notifications_uc(db, user_id=user_id, unread_only=True)
    return NotificationReadResult(
        updated=[_notification_to_schema(item) for item in changed],
        unread_count=len(unread),
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    """Return the notifications of the authenticated user, newest first."""

    try:
        notifications = list_notifications_uc(db, user_id=user_id, unread_only=unread_only)
    except BookExchangeError as exc:
        raise to_http_exception(exc) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/read", response_model=NotificationReadResult)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    publisher: ChangeEventPublisher = Depends(get_publisher),
) -> NotificationReadResult:
    try:
        changed = mark_notifications_read_uc(
            db, user_id=user_id, notification_ids=payload.unique_ids(), publisher=publisher
        )
    except BookExchangeError as exc:
        raise to_http_exception(exc) from exc
    return _read_result(db, user_id, changed)


@router.post("/read-all", response_model=NotificationReadResult)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    publisher: ChangeEventPublisher = Depends(get_publisher),
) -> NotificationReadResult:
    try:
        changed = mark_all_notifications_read_uc(db, user_id=user_id, publisher=publisher)
    except BookExchangeError as exc:
        raise to_http_exception(exc) from exc
    return _read_result(db, user_id, changed)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream the user's request and notification changes over a websocket.

    Clients receive an ``init`` message with their unread notifications, then
    one ``change`` message per committed change. They may send ``ping`` and
    ``ack`` (with ``ids`` to mark as read).
    """

    user_id = user_id_from_token(websocket.query_params.get("token"))
    if user_id is None:
        await websocket.close(code=WS_POLICY_VIOLATION)
        return

    state = websocket.app.state
    await websocket.accept()

    with ExitStack() as stack:
        feed = state.change_feed
        subscriptions = [
            stack.enter_context(feed.subscribe(TABLE_REQUESTS, column="requester_id", value=user_id)),
            stack.enter_context(feed.subscribe(TABLE_REQUESTS, column="owner_id", value=user_id)),
            stack.enter_context(
                feed.subscribe(TABLE_NOTIFICATIONS, column="user_id", value=user_id)
            ),
        ]

        pending = await to_thread.run_sync(_load_unread, state.session_factory, user_id)
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(item) for item in pending]}
        )

        async with anyio.create_task_group() as task_group:
            for subscription in subscriptions:
                task_group.start_soon(_forward_changes, websocket, subscription)
            await _receive_client_messages(websocket, state, user_id)
            task_group.cancel_scope.cancel()
    logger.debug("Websocket of %s disconnected", user_id)


def _load_unread(session_factory, user_id: str) -> list[Notification]:
    with session_factory() as session:
        return list(list_notifications_uc(session, user_id=user_id, unread_only=True))


def _acknowledge(session_factory, publisher: ChangeEventPublisher, user_id: str, ids: list[str]) -> None:
    with session_factory() as session:
        mark_notifications_read_uc(
            session, user_id=user_id, notification_ids=ids, publisher=publisher
        )


async def _forward_changes(websocket: WebSocket, subscription) -> None:
    async for event in subscription:
        try:
            await websocket.send_json({"type": "change", "data": serialize_change_event(event)})
        except (WebSocketDisconnect, RuntimeError):
            # The client went away; the receive loop ends the connection.
            return


async def _receive_client_messages(websocket: WebSocket, state: Any, user_id: str) -> None:
    while True:
        try:
            message = await websocket.receive_json()
        except WebSocketDisconnect:
            return
        except ValueError:
            continue

        if not isinstance(message, dict):
            continue

        message_type = message.get("type")
        if message_type == "ping":
            await websocket.send_json({"type": "pong"})
            continue

        if message_type == "ack":
            ids = message.get("ids", [])
            if isinstance(ids, list) and ids:
                await to_thread.run_sync(
                    _acknowledge,
                    state.session_factory,
                    state.publisher,
                    user_id,
                    [str(item) for item in ids],
                )
