"""SQLAlchemy model for user profiles."""

from sqlalchemy import Column, DateTime, String

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id


class UserModel(Base):
    """Public profile of a marketplace participant."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    display_name = Column(String(50), nullable=False)
    email = Column(String(120), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=storage_now)


__all__ = ["UserModel"]
