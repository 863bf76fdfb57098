"""Use case for listing the notifications of a user."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.domain.errors import ensure_authenticated
from app.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session, *, user_id: str | None, unread_only: bool = False
) -> Sequence[Notification]:
    """Return the notifications of ``user_id`` newest first."""

    user_id = ensure_authenticated(user_id)
    return NotificationRepository(session).list_for_user(user_id, unread_only=unread_only)
