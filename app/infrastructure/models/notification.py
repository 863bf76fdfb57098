"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=storage_now, index=True)


__all__ = ["NotificationModel"]
