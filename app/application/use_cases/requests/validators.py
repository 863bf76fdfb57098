"""Common validation helpers for book request use cases."""

from app.domain.entities import REQUEST_DECISIONS
from app.domain.errors import RequestValidationError

MEETING_LOCATION_MAX_LENGTH = 100


def normalize_request_message(message: str | None, *, max_length: int) -> str:
    """Return the trimmed request message or raise ``RequestValidationError``."""

    normalized = (message or "").strip()
    if not normalized:
        raise RequestValidationError("The request message cannot be empty")
    if len(normalized) > max_length:
        raise RequestValidationError(
            f"The request message must have at most {max_length} characters"
        )
    return normalized


def normalize_response_message(message: str | None, *, max_length: int) -> str | None:
    """Return the trimmed owner reply, ``None`` when blank."""

    normalized = (message or "").strip()
    if not normalized:
        return None
    if len(normalized) > max_length:
        raise RequestValidationError(
            f"The response message must have at most {max_length} characters"
        )
    return normalized


def normalize_meeting_location(location: str | None) -> str | None:
    normalized = (location or "").strip()
    if not normalized:
        return None
    if len(normalized) > MEETING_LOCATION_MAX_LENGTH:
        raise RequestValidationError(
            f"The meeting location must have at most {MEETING_LOCATION_MAX_LENGTH} characters"
        )
    return normalized


def normalize_decision(decision: str) -> str:
    normalized = (decision or "").strip().lower()
    if normalized not in REQUEST_DECISIONS:
        raise RequestValidationError("The decision must be 'accepted' or 'rejected'")
    return normalized
