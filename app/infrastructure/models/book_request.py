"""SQLAlchemy model for book requests."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, text

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id

PENDING_REQUEST_INDEX = "uq_requests_pending_book_requester"


class BookRequestModel(Base):
    """Database representation of a request to borrow a book."""

    __tablename__ = "requests"
    __table_args__ = (
        # At most one pending request per (book, requester).
        Index(
            PENDING_REQUEST_INDEX,
            "book_id",
            "requester_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    book_id = Column(String(36), ForeignKey("books.id"), nullable=False, index=True)
    requester_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    meeting_location = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime, nullable=False, default=storage_now)
    updated_at = Column(DateTime, nullable=False, default=storage_now)


__all__ = ["BookRequestModel", "PENDING_REQUEST_INDEX"]
