"""FastAPI dependency utilities."""

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.infrastructure.realtime import ChangeEventPublisher
from app.infrastructure.security import user_id_from_token

# Tokens are minted by the external identity provider; ``tokenUrl`` only
# documents where clients obtain them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session bound to the application's engine for one request."""

    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_publisher(request: Request) -> ChangeEventPublisher:
    return request.app.state.publisher


def get_current_user_id(token: str | None = Depends(oauth2_scheme)) -> str:
    """Return the user id carried by the bearer token."""

    user_id = user_id_from_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "unauthenticated", "message": "Invalid credentials"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


__all__ = [
    "get_current_user_id",
    "get_db",
    "get_publisher",
    "oauth2_scheme",
]
