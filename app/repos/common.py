"""
Common repository functions shared across multiple repos.

All read operations run inside ``translate_fetch_errors`` so that storage
failures are logged once, counted in the DB metrics, and surfaced to callers
as a ``DataFetchError`` carrying a fixed message.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import case, func

from app.core.errors import DataFetchError
from app.core.observability import db_metrics
from app.db.models import Invoice
from app.domain.enums import InvoiceStatus

logger = logging.getLogger(__name__)

__all__ = [
    "translate_fetch_errors",
    "coerce_uuid",
    "row_to_dict",
    "sum_amount_for_status",
]


@contextmanager
def translate_fetch_errors(operation: str, message: str) -> Iterator[None]:
    """Guard a read operation against leaking storage errors.

    Usage:
        with translate_fetch_errors("fetch_revenue", "Failed to fetch revenue data."):
            result = await db.execute(stmt)

    Args:
        operation: Operation name used for logs and metric labels
        message: Fixed user-facing message for the raised error

    Raises:
        DataFetchError: If anything inside the block raises. The original
            exception is logged (each one, when concurrent queries fail
            together) and not chained.
    """
    with db_metrics.track(operation):
        try:
            yield
        except DataFetchError:
            raise
        except Exception as exc:
            for error in _leaf_errors(exc):
                logger.error(
                    f"Database Error ({operation}): {error}",
                    exc_info=error,
                    extra={"operation": operation},
                )
            raise DataFetchError(message, details={"operation": operation}) from None


def _leaf_errors(exc: BaseException) -> list[BaseException]:
    """Flatten an ExceptionGroup from concurrent queries into its individual errors."""
    if isinstance(exc, BaseExceptionGroup):
        return [leaf for inner in exc.exceptions for leaf in _leaf_errors(inner)]
    return [exc]


def coerce_uuid(value: uuid.UUID | str) -> uuid.UUID | None:
    """Return ``value`` as a UUID, or None if it is not a valid UUID string."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a SQLAlchemy result Row into a plain dict keyed by column label."""
    return dict(row._mapping)


def sum_amount_for_status(status: InvoiceStatus):
    """SUM of invoice amounts (cents) restricted to one status, 0 for other rows."""
    return func.sum(case((Invoice.status == status.value, Invoice.amount), else_=0))
