"""
Error taxonomy shared by the order service, the HTTP layer and the API client.
"""
from typing import Iterable, Optional


class ServiceError(Exception):
    """Base class for failures raised by the catalog and order service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed request fields (HTTP 400)."""


class NotFoundError(ServiceError):
    """Unknown order or item id (HTTP 404)."""


class UnknownItemError(NotFoundError):
    """One or more item ids of a line set do not resolve against the catalog."""

    def __init__(self, item_ids: Iterable[str]):
        self.item_ids = list(item_ids)
        super().__init__(f"Item with ID {', '.join(self.item_ids)} not found")


class PersistenceError(ServiceError):
    """Store unavailable or a write failed (HTTP 500, cause is only logged)."""


class ApiError(Exception):
    """Raised by the API client for transport failures and non-2xx responses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OrderLockedError(Exception):
    """The guest tried to change an order that is no longer editable."""
