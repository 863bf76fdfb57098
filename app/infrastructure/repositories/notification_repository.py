"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.models import NotificationModel
from app.utils import from_storage_datetime, storage_now, to_storage_datetime


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            read=notification.read,
            data=dict(notification.data or {}),
            created_at=to_storage_datetime(notification.created_at) or storage_now(),
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def mark_as_read(
        self, notification_ids: Iterable[str], *, user_id: str
    ) -> list[Notification]:
        """Flip unread notifications of ``user_id`` to read.

        Only the rows that actually changed are returned, so repeated calls
        return an empty list.
        """

        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not ids:
            return []
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
        )
        return self._flip(query.all())

    def mark_all_as_read(self, *, user_id: str) -> list[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
        )
        return self._flip(query.all())

    def _flip(self, models: list[NotificationModel]) -> list[Notification]:
        for model in models:
            model.read = True
        self.session.flush()
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            read=bool(model.read),
            data=dict(model.data or {}),
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["NotificationRepository"]
