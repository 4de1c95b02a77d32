"""
Repository functions for invoice listings and lookups.

All amounts returned here stay in minor units (cents) unless the row is
meant for direct display, in which case they are formatted with
``format_currency``.
"""

import uuid
from typing import Any

from sqlalchemy import ColumnElement, String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Customer, Invoice
from app.domain.currency import format_currency
from app.repos.common import coerce_uuid, row_to_dict, translate_fetch_errors
from app.repos.pagination import apply_page, total_pages

# Number of invoices shown in the dashboard "latest invoices" card
LATEST_INVOICES_LIMIT = 5


def invoice_search_filter(query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match across the searchable invoice fields.

    A row matches when the customer name, customer email, amount, date or
    status contains ``query``. The query is bound as a parameter and its
    LIKE wildcards are escaped.
    """
    return or_(
        Customer.name.icontains(query, autoescape=True),
        Customer.email.icontains(query, autoescape=True),
        cast(Invoice.amount, String).icontains(query, autoescape=True),
        cast(Invoice.date, String).icontains(query, autoescape=True),
        Invoice.status.icontains(query, autoescape=True),
    )


async def fetch_latest_invoices(db: AsyncSession) -> list[dict[str, Any]]:
    """Return the five most recent invoices with customer display fields.

    Returns:
        List of dicts with id, name, email, image_url and a formatted amount

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_latest_invoices", "Failed to fetch the latest invoices."):
        stmt = (
            select(
                Invoice.amount,
                Customer.name,
                Customer.image_url,
                Customer.email,
                Invoice.id,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc())
            .limit(LATEST_INVOICES_LIMIT)
        )
        result = await db.execute(stmt)
        rows = result.all()

    return [
        {**row_to_dict(row), "amount": format_currency(row.amount)}
        for row in rows
    ]


async def fetch_filtered_invoices(db: AsyncSession, query: str, page: Any) -> list[dict[str, Any]]:
    """Return one page of invoices matching ``query``, newest first.

    Args:
        db: Async database session
        query: Search text; empty string matches every invoice
        page: 1-indexed page number, clamped to >= 1

    Returns:
        At most ITEMS_PER_PAGE dicts with invoice fields (amount in cents)
        and the customer's name, email and image_url

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_filtered_invoices", "Failed to fetch invoices."):
        stmt = (
            select(
                Invoice.id,
                Invoice.amount,
                Invoice.date,
                Invoice.status,
                Customer.name,
                Customer.email,
                Customer.image_url,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(invoice_search_filter(query))
            # id breaks ties between invoices on the same date so pages do not overlap
            .order_by(Invoice.date.desc(), Invoice.id.desc())
        )
        result = await db.execute(apply_page(stmt, page))
        return [row_to_dict(row) for row in result.all()]


async def fetch_invoices_pages(db: AsyncSession, query: str) -> int:
    """Return how many pages ``fetch_filtered_invoices`` has for ``query``.

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors(
        "fetch_invoices_pages", "Failed to fetch total number of invoices."
    ):
        stmt = (
            select(func.count())
            .select_from(Invoice)
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(invoice_search_filter(query))
        )
        result = await db.execute(stmt)
        return total_pages(result.scalar_one())


async def fetch_invoice_by_id(
    db: AsyncSession, invoice_id: uuid.UUID | str
) -> dict[str, Any] | None:
    """Return the editable fields of one invoice.

    Args:
        db: Async database session
        invoice_id: Invoice UUID (or its string form)

    Returns:
        Dict with id, customer_id, amount (cents) and status, or None when
        no invoice has that id

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_invoice_by_id", "Failed to fetch invoice."):
        key = coerce_uuid(invoice_id)
        if key is None:
            return None

        stmt = (
            select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status)
            .where(Invoice.id == key)
            .limit(1)
        )
        result = await db.execute(stmt)
        row = result.first()

    if row is None:
        return None
    return row_to_dict(row)
