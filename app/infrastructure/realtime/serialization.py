"""JSON representations of change events for websocket clients."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from app.domain.entities import ChangeEvent, Notification


def serialize_change_event(event: ChangeEvent) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``event``."""

    payload = {
        "table": event.table,
        "event_type": event.event_type,
        "new": _serialize_record(event.new),
        "old": _serialize_record(event.old),
        "committed_at": event.committed_at,
    }
    _normalize_datetime_values(payload)
    return payload


def serialize_notification(notification: Notification) -> dict[str, Any]:
    payload = asdict(notification)
    _normalize_datetime_values(payload)
    return payload


def _serialize_record(record: Any) -> dict[str, Any] | None:
    if record is None:
        return None
    if is_dataclass(record):
        return asdict(record)
    return dict(record)


def _normalize_datetime_values(data: dict[str, Any] | list[Any]) -> None:
    """Convert ``datetime`` instances nested inside ``data`` into ISO strings."""

    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, (dict, list)):
                _normalize_datetime_values(value)
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, datetime):
                data[index] = item.isoformat()
            elif isinstance(item, (dict, list)):
                _normalize_datetime_values(item)


__all__ = ["serialize_change_event", "serialize_notification"]
