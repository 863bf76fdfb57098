"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from app.domain.errors import (
    BookExchangeError,
    DuplicateRequestError,
    InvalidStateTransitionError,
    NotFoundError,
    RequestValidationError,
    TransientError,
    UnauthenticatedError,
    UnauthorizedError,
)

# Checked in order, so subclasses must precede their bases.
_STATUS_BY_ERROR: tuple[tuple[type[BookExchangeError], int], ...] = (
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (DuplicateRequestError, status.HTTP_409_CONFLICT),
    (InvalidStateTransitionError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (RequestValidationError, status.HTTP_400_BAD_REQUEST),
    (TransientError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(exc: BookExchangeError) -> int:
    """Return the HTTP status matching the kind of ``exc``."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: BookExchangeError) -> HTTPException:
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, TransientError):
        headers = {"Retry-After": "1"}
    return HTTPException(
        status_code=status_code_for(exc),
        detail={"code": exc.code, "message": exc.message},
        headers=headers,
    )


__all__ = ["status_code_for", "to_http_exception"]
