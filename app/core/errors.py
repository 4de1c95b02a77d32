"""
Domain-specific exceptions for the Invoice Dashboard API.

These exceptions represent data-access and lookup failures and are mapped
to appropriate HTTP status codes in the API layer.
"""

from typing import Any


class InvoiceDashboardError(Exception):
    """Base exception for all invoice dashboard domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DataFetchError(InvoiceDashboardError):
    """
    Raised when a read query against the store fails.

    The message is a fixed, user-facing string chosen per operation.
    The underlying storage error is logged server-side and never
    attached to this exception.

    HTTP Status: 500 Internal Server Error
    """

    @property
    def operation(self) -> str | None:
        return self.details.get("operation")


class NotFoundError(InvoiceDashboardError):
    """
    Raised when a requested resource does not exist.

    Examples:
    - Invoice ID not found

    HTTP Status: 404 Not Found
    """

    pass


# HTTP Status Code Mapping
ERROR_STATUS_MAP = {
    NotFoundError: 404,
    DataFetchError: 500,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
