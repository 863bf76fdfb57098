"""Persistence helpers for book request entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import BookRequest
from app.domain.errors import DuplicateRequestError
from app.infrastructure.models import PENDING_REQUEST_INDEX, BookRequestModel
from app.utils import from_storage_datetime, storage_now, to_storage_datetime


class BookRequestRepository:
    """Provide CRUD operations for :class:`BookRequest` objects.

    Writes are flushed but not committed; the calling use case owns the
    transaction so a request and its notification are stored together.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, request_id: str) -> BookRequest | None:
        model = self.session.get(BookRequestModel, request_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def get_pending(self, *, book_id: str, requester_id: str) -> BookRequest | None:
        model = (
            self.session.query(BookRequestModel)
            .filter(BookRequestModel.book_id == book_id)
            .filter(BookRequestModel.requester_id == requester_id)
            .filter(BookRequestModel.status == "pending")
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_requester(self, requester_id: str) -> Sequence[BookRequest]:
        query = (
            self.session.query(BookRequestModel)
            .filter(BookRequestModel.requester_id == requester_id)
            .order_by(BookRequestModel.created_at.desc(), BookRequestModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_for_owner(self, owner_id: str) -> Sequence[BookRequest]:
        query = (
            self.session.query(BookRequestModel)
            .filter(BookRequestModel.owner_id == owner_id)
            .order_by(BookRequestModel.created_at.desc(), BookRequestModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, request: BookRequest) -> BookRequest:
        now = storage_now()
        model = BookRequestModel(
            book_id=request.book_id,
            requester_id=request.requester_id,
            owner_id=request.owner_id,
            message=request.message,
            meeting_location=request.meeting_location,
            status=request.status,
            created_at=to_storage_datetime(request.created_at) or now,
            updated_at=to_storage_datetime(request.updated_at) or now,
        )
        self.session.add(model)
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_pending_conflict(exc):
                raise DuplicateRequestError() from exc
            raise
        return self._to_entity(model)

    def transition(
        self, request_id: str, *, expected_status: str, new_status: str
    ) -> BookRequest | None:
        """Move the request to ``new_status`` only if it is still ``expected_status``.

        Returns ``None`` when another writer changed the status first.
        """

        updated = (
            self.session.query(BookRequestModel)
            .filter(BookRequestModel.id == request_id)
            .filter(BookRequestModel.status == expected_status)
            .update(
                {
                    BookRequestModel.status: new_status,
                    BookRequestModel.updated_at: storage_now(),
                },
                synchronize_session=False,
            )
        )
        if not updated:
            return None
        return self.get(request_id)

    @staticmethod
    def _to_entity(model: BookRequestModel) -> BookRequest:
        return BookRequest(
            id=model.id,
            book_id=model.book_id,
            requester_id=model.requester_id,
            owner_id=model.owner_id,
            message=model.message,
            status=model.status,
            meeting_location=model.meeting_location,
            created_at=from_storage_datetime(model.created_at),
            updated_at=from_storage_datetime(model.updated_at),
        )


def _is_pending_conflict(exc: IntegrityError) -> bool:
    detail = str(exc.orig).lower()
    if PENDING_REQUEST_INDEX in detail:
        return True
    return "unique" in detail and "requests.book_id" in detail


__all__ = ["BookRequestRepository"]
