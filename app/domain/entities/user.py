"""Domain entity representing the public profile of a user."""

from dataclasses import dataclass

UNKNOWN_USER_NAME = "Unknown user"


@dataclass
class UserProfile:
    """Display information about a marketplace participant."""

    id: str
    display_name: str
    email: str | None = None


__all__ = ["UNKNOWN_USER_NAME", "UserProfile"]
