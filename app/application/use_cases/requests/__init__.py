"""Use cases for managing book requests."""

from .create_request import create_request
from .list_requests import list_requests
from .respond_to_request import respond_to_request

__all__ = ["create_request", "list_requests", "respond_to_request"]
