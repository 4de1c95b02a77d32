"""
Repository functions for the dashboard summary cards.

The card figures come from three independent queries which run
concurrently, each on its own session.
"""

import asyncio
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import Customer, Invoice
from app.domain.currency import format_currency
from app.domain.enums import InvoiceStatus
from app.repos.common import sum_amount_for_status, translate_fetch_errors


async def _fetch_one(session_factory: async_sessionmaker[AsyncSession], stmt: Select) -> Row:
    async with session_factory() as session:
        result = await session.execute(stmt)
        return result.one()


async def fetch_card_data(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, Any]:
    """Return invoice/customer counts and paid/pending totals.

    Args:
        session_factory: Factory used to open one session per concurrent query

    Returns:
        Dict with number_of_customers, number_of_invoices,
        total_paid_invoices and total_pending_invoices (formatted)

    Raises:
        DataFetchError: If any of the three queries fails
    """
    with translate_fetch_errors("fetch_card_data", "Failed to fetch card data."):
        invoice_count_stmt = select(func.count()).select_from(Invoice)
        customer_count_stmt = select(func.count()).select_from(Customer)
        invoice_status_stmt = select(
            sum_amount_for_status(InvoiceStatus.PAID).label("paid"),
            sum_amount_for_status(InvoiceStatus.PENDING).label("pending"),
        )

        # A failing query cancels the other two before the error propagates
        async with asyncio.TaskGroup() as tg:
            invoice_count_task = tg.create_task(_fetch_one(session_factory, invoice_count_stmt))
            customer_count_task = tg.create_task(_fetch_one(session_factory, customer_count_stmt))
            invoice_status_task = tg.create_task(_fetch_one(session_factory, invoice_status_stmt))

        invoice_count = invoice_count_task.result()
        customer_count = customer_count_task.result()
        invoice_status = invoice_status_task.result()

    # SUM over an empty table is NULL
    return {
        "number_of_customers": int(customer_count[0] or 0),
        "number_of_invoices": int(invoice_count[0] or 0),
        "total_paid_invoices": format_currency(invoice_status.paid or 0),
        "total_pending_invoices": format_currency(invoice_status.pending or 0),
    }
