"""Repository functions for customer selection lists and the customers table."""

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Customer, Invoice
from app.domain.currency import format_currency
from app.domain.enums import InvoiceStatus
from app.repos.common import row_to_dict, sum_amount_for_status, translate_fetch_errors


async def fetch_customers(db: AsyncSession) -> list[dict[str, Any]]:
    """Return id and name of every customer, alphabetically.

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_customers", "Failed to fetch all customers."):
        stmt = select(Customer.id, Customer.name).order_by(Customer.name.asc())
        result = await db.execute(stmt)
        return [row_to_dict(row) for row in result.all()]


async def fetch_filtered_customers(db: AsyncSession, query: str) -> list[dict[str, Any]]:
    """Return customers matching ``query`` with their invoice totals.

    Customers are matched on a case-insensitive substring of name or email.
    Each row carries the invoice count and the paid / pending sums formatted
    for display. Customers without invoices report 0 and "$0.00".

    Args:
        db: Async database session
        query: Search text; empty string matches every customer

    Returns:
        List of dicts ordered by customer name

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_filtered_customers", "Failed to fetch customer table."):
        stmt = (
            select(
                Customer.id,
                Customer.name,
                Customer.email,
                Customer.image_url,
                func.count(Invoice.id).label("total_invoices"),
                sum_amount_for_status(InvoiceStatus.PENDING).label("total_pending"),
                sum_amount_for_status(InvoiceStatus.PAID).label("total_paid"),
            )
            .outerjoin(Invoice, Customer.id == Invoice.customer_id)
            .where(
                or_(
                    Customer.name.icontains(query, autoescape=True),
                    Customer.email.icontains(query, autoescape=True),
                )
            )
            .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
            .order_by(Customer.name.asc())
        )
        result = await db.execute(stmt)
        rows = result.all()

    return [
        {
            **row_to_dict(row),
            "total_invoices": int(row.total_invoices or 0),
            "total_pending": format_currency(row.total_pending or 0),
            "total_paid": format_currency(row.total_paid or 0),
        }
        for row in rows
    ]
