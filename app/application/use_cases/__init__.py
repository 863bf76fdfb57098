"""Aggregate application use cases."""

from .notifications import (
    list_notifications,
    mark_all_notifications_read,
    mark_notifications_read,
)
from .requests import create_request, list_requests, respond_to_request

__all__ = [
    "create_request",
    "list_notifications",
    "list_requests",
    "mark_all_notifications_read",
    "mark_notifications_read",
    "respond_to_request",
]
