"""Use cases for flipping notifications to read."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.domain.errors import ensure_authenticated
from app.infrastructure.realtime import ChangeEventPublisher
from app.infrastructure.repositories import NotificationRepository

from .events import notifications_read_events

logger = logging.getLogger(__name__)


def mark_notifications_read(
    session: Session,
    *,
    user_id: str | None,
    notification_ids: Iterable[str],
    publisher: ChangeEventPublisher | None = None,
) -> list[Notification]:
    """Mark the given notifications of ``user_id`` as read.

    Notifications that are already read, or that belong to somebody else, are
    left untouched; the returned list only holds the ones that changed.
    """

    user_id = ensure_authenticated(user_id)
    repository = NotificationRepository(session)
    try:
        changed = repository.mark_as_read(notification_ids, user_id=user_id)
        session.commit()
    except Exception:
        session.rollback()
        raise
    _publish(changed, publisher)
    return changed


def mark_all_notifications_read(
    session: Session,
    *,
    user_id: str | None,
    publisher: ChangeEventPublisher | None = None,
) -> list[Notification]:
    """Mark every unread notification of ``user_id`` as read in one transaction."""

    user_id = ensure_authenticated(user_id)
    repository = NotificationRepository(session)
    try:
        changed = repository.mark_all_as_read(user_id=user_id)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.debug("Marked %s notification(s) as read for %s", len(changed), user_id)
    _publish(changed, publisher)
    return changed


def _publish(changed: list[Notification], publisher: ChangeEventPublisher | None) -> None:
    if publisher is not None and changed:
        publisher.dispatch_many(notifications_read_events(changed))


__all__ = ["mark_all_notifications_read", "mark_notifications_read"]
