"""Domain entity representing a listed book."""

from dataclasses import dataclass
from datetime import datetime

UNKNOWN_BOOK_TITLE = "Unknown book"


@dataclass
class Book:
    """A book offered for exchange by its owner."""

    id: str | None
    owner_id: str
    title: str
    author: str
    available: bool = True
    created_at: datetime | None = None


__all__ = ["Book", "UNKNOWN_BOOK_TITLE"]
