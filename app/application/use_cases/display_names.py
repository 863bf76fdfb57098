"""Best-effort lookups of display data attached to requests and notifications.

These reads are optional: when they fail the caller receives placeholders
instead of an error.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import UNKNOWN_BOOK_TITLE, UNKNOWN_USER_NAME
from app.infrastructure.repositories import BookRepository, UserRepository

logger = logging.getLogger(__name__)


def resolve_user_names(session: Session, user_ids: Iterable[str]) -> dict[str, str]:
    """Map every id in ``user_ids`` to a display name or the placeholder."""

    ids = {user_id for user_id in user_ids if user_id}
    try:
        profiles = UserRepository(session).get_map_by_ids(ids)
    except SQLAlchemyError as exc:
        logger.warning("Could not load display names for %s: %s", sorted(ids), exc)
        session.rollback()
        profiles = {}
    return {
        user_id: profiles[user_id].display_name if user_id in profiles else UNKNOWN_USER_NAME
        for user_id in ids
    }


def resolve_book_titles(session: Session, book_ids: Iterable[str]) -> dict[str, str]:
    """Map every id in ``book_ids`` to a title or the placeholder."""

    ids = {book_id for book_id in book_ids if book_id}
    try:
        books = BookRepository(session).get_map_by_ids(ids)
    except SQLAlchemyError as exc:
        logger.warning("Could not load book titles for %s: %s", sorted(ids), exc)
        session.rollback()
        books = {}
    return {
        book_id: books[book_id].title if book_id in books else UNKNOWN_BOOK_TITLE
        for book_id in ids
    }


__all__ = ["resolve_book_titles", "resolve_user_names"]
