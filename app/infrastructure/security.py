"""Bearer token helpers."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import get_settings

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def user_id_from_token(token: str | None) -> str | None:
    """Return the ``sub`` claim of a valid token, or ``None``."""

    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) and subject else None


__all__ = ["ALGORITHM", "create_access_token", "decode_access_token", "user_id_from_token"]
