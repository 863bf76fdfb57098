"""Helpers for working with timezone-aware timestamps."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone configured through ``APP_TIMEZONE``.

    Values such as ``Europe/Lisbon`` or ``UTC-03:00`` are accepted; anything that
    cannot be resolved falls back to UTC.
    """

    tz_name = (get_settings().app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` as a naive UTC datetime suitable for ``DateTime`` columns."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_app_timezone())
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Attach UTC to a stored naive datetime and express it in the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())


def storage_now() -> datetime:
    """Column default: the current instant as naive UTC."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def _resolve_timezone(tz_name: str) -> tzinfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            return timezone(sign * timedelta(hours=hours, minutes=minutes))
    return timezone.utc
