"""Use case for the owner accepting or rejecting a book request."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.application.use_cases.display_names import resolve_book_titles, resolve_user_names
from app.application.use_cases.notifications import (
    notify_request_responded,
    request_responded_events,
)
from app.config import get_settings
from app.domain.entities import BookRequest, can_transition
from app.domain.errors import (
    InvalidStateTransitionError,
    NotFoundError,
    UnauthorizedError,
    ensure_authenticated,
)
from app.infrastructure.realtime import ChangeEventPublisher
from app.infrastructure.repositories import BookRequestRepository

from .validators import normalize_decision, normalize_response_message

logger = logging.getLogger(__name__)


def respond_to_request(
    session: Session,
    *,
    owner_id: str | None,
    request_id: str,
    decision: str,
    response_message: str | None = None,
    publisher: ChangeEventPublisher | None = None,
) -> BookRequest:
    """Move a pending request to ``decision`` and notify the requester.

    Only the owner of the requested book may answer, and only once: answering
    a request that is no longer pending raises
    :class:`InvalidStateTransitionError` and leaves it untouched.
    """

    owner_id = ensure_authenticated(owner_id)
    decision = normalize_decision(decision)
    reply = normalize_response_message(
        response_message, max_length=get_settings().request_message_max_length
    )

    repository = BookRequestRepository(session)
    current = repository.get(request_id)
    if current is None:
        raise NotFoundError("Request not found")
    if current.owner_id != owner_id:
        raise UnauthorizedError("Only the owner of the book can answer this request")
    if not can_transition(current.status, decision):
        raise InvalidStateTransitionError(f"This request was already {current.status}")

    owner_name = resolve_user_names(session, [owner_id])[owner_id]
    book_title = resolve_book_titles(session, [current.book_id])[current.book_id]

    try:
        updated = repository.transition(
            request_id, expected_status=current.status, new_status=decision
        )
        if updated is None:
            # Another response committed between the read and the update.
            raise InvalidStateTransitionError()
        notification = notify_request_responded(
            session,
            request=updated,
            book_title=book_title,
            owner_name=owner_name,
            response_message=reply,
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Request %s %s by %s", request_id, decision, owner_id)
    if publisher is not None:
        publisher.dispatch_many(request_responded_events(current, updated, notification))
    return updated


__all__ = ["respond_to_request"]
