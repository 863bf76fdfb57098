"""Persistence layer for listed books."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import Book
from app.infrastructure.models import BookModel
from app.utils import from_storage_datetime


class BookRepository:
    """Read and register books offered for exchange."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, book_id: str) -> Book | None:
        model = self.session.get(BookModel, book_id)
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, book_ids: Iterable[str]) -> dict[str, Book]:
        ids = {book_id for book_id in book_ids if book_id}
        if not ids:
            return {}
        models = self.session.query(BookModel).filter(BookModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    def create(self, book: Book) -> Book:
        model = BookModel(
            owner_id=book.owner_id,
            title=book.title,
            author=book.author,
            available=book.available,
        )
        if book.id:
            model.id = book.id
        self.session.add(model)
        self.session.commit()
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: BookModel) -> Book:
        return Book(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            author=model.author,
            available=bool(model.available),
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["BookRepository"]
