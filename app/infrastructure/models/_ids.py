"""Identifier helpers shared by the ORM models."""

from uuid import uuid4


def new_id() -> str:
    """Return a new opaque primary key."""

    return str(uuid4())
