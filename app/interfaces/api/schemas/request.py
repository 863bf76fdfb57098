"""Pydantic models describing book request payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BookRequestCreate(BaseModel):
    """Payload used to ask the owner of a book to lend it."""

    model_config = ConfigDict(extra="forbid")

    book_id: str = Field(..., min_length=1)
    owner_id: str | None = Field(
        default=None, description="Owner the client believes the book belongs to"
    )
    message: str
    meeting_location: str | None = None


class BookRequestRespond(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decision: str = Field(..., description="Either \"accepted\" or \"rejected\"")
    response_message: str | None = None


class BookRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    book_id: str
    requester_id: str
    owner_id: str
    message: str
    status: str
    meeting_location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    book_title: str | None = None
    requester_name: str | None = None
    owner_name: str | None = None


class BookRequestListRead(BaseModel):
    sent: list[BookRequestRead] = Field(default_factory=list)
    received: list[BookRequestRead] = Field(default_factory=list)


__all__ = [
    "BookRequestCreate",
    "BookRequestListRead",
    "BookRequestRead",
    "BookRequestRespond",
]
