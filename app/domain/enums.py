"""
Domain enums matching the values stored in the database.

These enums provide type-safe representations of constrained text columns
and are used throughout the application for validation and query building.
"""

from enum import Enum


class InvoiceStatus(str, Enum):
    """Invoice payment status - matches the chk_invoices_status constraint."""

    PAID = "paid"
    PENDING = "pending"
    CANCELED = "canceled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]
