from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.schemas.invoice import (
    InvoiceFormResponse,
    InvoicePagesResponse,
    InvoiceTableRowResponse,
)
from app.core.dependencies import AsyncDbSession
from app.core.errors import NotFoundError
from app.repos.invoice_repo import (
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
)
from app.repos.pagination import MAX_PAGE

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("")
async def list_invoices(
    db: AsyncDbSession,
    query: Annotated[
        str, Query(description="Case-insensitive text matched against customer and invoice fields")
    ] = "",
    page: Annotated[
        int,
        Query(le=MAX_PAGE, description="1-indexed page number; values below 1 mean 1"),
    ] = 1,
) -> list[InvoiceTableRowResponse]:
    """List invoices matching `query`, newest first, six per page.

    **Examples:**
        - First page: GET /invoices
        - Search: GET /invoices?query=smith&page=2
    """
    rows = await fetch_filtered_invoices(db, query, page)
    return [InvoiceTableRowResponse(**row) for row in rows]


@router.get("/pages")
async def get_invoice_pages(
    db: AsyncDbSession,
    query: Annotated[str, Query(description="Same search text as GET /invoices")] = "",
) -> InvoicePagesResponse:
    """Total number of pages GET /invoices has for `query`."""
    pages = await fetch_invoices_pages(db, query)
    return InvoicePagesResponse(query=query, total_pages=pages)


@router.get("/{invoice_id}")
async def get_invoice(invoice_id: UUID, db: AsyncDbSession) -> InvoiceFormResponse:
    """Fetch one invoice for the edit form. Amount is in cents."""
    invoice = await fetch_invoice_by_id(db, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found", details={"invoice_id": str(invoice_id)})
    return InvoiceFormResponse(**invoice)
