"""Error taxonomy shared by every layer of the book exchange core.

Each error carries a stable ``code`` so callers (HTTP routes, client stores,
user interfaces) can react to the kind of failure instead of its wording.
"""

from __future__ import annotations


class BookExchangeError(Exception):
    """Base class for all failures raised by the core."""

    code = "error"
    retryable = False
    default_message = "The operation could not be completed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message


class UnauthenticatedError(BookExchangeError):
    code = "unauthenticated"
    default_message = "Authentication required"


class UnauthorizedError(BookExchangeError):
    code = "unauthorized"
    default_message = "You are not allowed to perform this operation"


class InvalidOperationError(UnauthorizedError):
    """The actor is known but the operation makes no sense for them."""

    code = "invalid_operation"
    default_message = "This operation is not allowed"


class DuplicateRequestError(BookExchangeError):
    code = "duplicate_request"
    default_message = "You already have a pending request for this book"


class InvalidStateTransitionError(BookExchangeError):
    code = "invalid_state_transition"
    default_message = "This request has already been answered"


class NotFoundError(BookExchangeError):
    code = "not_found"
    default_message = "Resource not found"


class RequestValidationError(BookExchangeError, ValueError):
    code = "validation_error"
    default_message = "Invalid input"


class TransientError(BookExchangeError):
    """Network, timeout or database availability failure; safe to retry manually."""

    code = "transient"
    retryable = True
    default_message = "The service is temporarily unavailable, please try again"


def ensure_authenticated(user_id: str | None) -> str:
    """Return ``user_id`` or raise :class:`UnauthenticatedError` when missing."""

    if user_id is None or not str(user_id).strip():
        raise UnauthenticatedError()
    return user_id


__all__ = [
    "BookExchangeError",
    "DuplicateRequestError",
    "InvalidOperationError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "RequestValidationError",
    "TransientError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "ensure_authenticated",
]
