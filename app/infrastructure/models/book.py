"""SQLAlchemy model for listed books."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id


class BookModel(Base):
    """Database representation of a book offered for exchange."""

    __tablename__ = "books"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    author = Column(String(100), nullable=False)
    available = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime, nullable=False, default=storage_now)

    owner = relationship("UserModel", lazy="joined")


__all__ = ["BookModel"]
