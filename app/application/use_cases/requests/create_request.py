"""Use case for asking the owner of a book to lend it."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.application.use_cases.display_names import resolve_user_names
from app.application.use_cases.notifications import (
    notify_request_created,
    request_created_events,
)
from app.config import get_settings
from app.domain.entities import BookRequest
from app.domain.errors import (
    DuplicateRequestError,
    InvalidOperationError,
    NotFoundError,
    ensure_authenticated,
)
from app.infrastructure.realtime import ChangeEventPublisher
from app.infrastructure.repositories import BookRepository, BookRequestRepository

from .validators import normalize_meeting_location, normalize_request_message

logger = logging.getLogger(__name__)


def create_request(
    session: Session,
    *,
    requester_id: str | None,
    book_id: str,
    message: str,
    owner_id: str | None = None,
    meeting_location: str | None = None,
    publisher: ChangeEventPublisher | None = None,
) -> BookRequest:
    """Create a pending request for ``book_id`` and notify the book owner.

    The request and the owner's notification are committed together. A second
    pending request by the same requester for the same book is rejected with
    :class:`DuplicateRequestError`, both by the pre-check below and by the
    partial unique index when two writers race.
    """

    requester_id = ensure_authenticated(requester_id)
    settings = get_settings()
    normalized_message = normalize_request_message(
        message, max_length=settings.request_message_max_length
    )
    location = normalize_meeting_location(meeting_location)

    book = BookRepository(session).get(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    if book.owner_id == requester_id:
        raise InvalidOperationError("You cannot request your own book")
    if owner_id is not None and owner_id != book.owner_id:
        raise InvalidOperationError("The book belongs to a different owner")
    if not book.available:
        raise InvalidOperationError("This book is not available for exchange")

    repository = BookRequestRepository(session)
    if repository.get_pending(book_id=book_id, requester_id=requester_id) is not None:
        raise DuplicateRequestError()

    requester_name = resolve_user_names(session, [requester_id])[requester_id]

    try:
        saved = repository.create(
            BookRequest(
                id=None,
                book_id=book_id,
                requester_id=requester_id,
                owner_id=book.owner_id,
                message=normalized_message,
                meeting_location=location,
            )
        )
        notification = notify_request_created(
            session,
            request=saved,
            book_title=book.title,
            requester_name=requester_name,
            preview_length=settings.notification_preview_length,
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Request %s created by %s for book %s", saved.id, requester_id, book_id)
    if publisher is not None:
        publisher.dispatch_many(request_created_events(saved, notification))
    return saved


__all__ = ["create_request"]
