from __future__ import annotations

from fastapi import APIRouter

from app.api.schemas.dashboard import CardDataResponse, RevenueResponse
from app.api.schemas.invoice import LatestInvoiceResponse
from app.core.dependencies import AsyncDbSession, AsyncSessionFactory
from app.repos.dashboard_repo import fetch_card_data
from app.repos.invoice_repo import fetch_latest_invoices
from app.repos.revenue_repo import fetch_revenue

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/revenue")
async def get_revenue(db: AsyncDbSession) -> list[RevenueResponse]:
    """Monthly revenue figures for the revenue chart."""
    rows = await fetch_revenue(db)
    return [RevenueResponse.model_validate(row) for row in rows]


@router.get("/latest-invoices")
async def get_latest_invoices(db: AsyncDbSession) -> list[LatestInvoiceResponse]:
    """The five most recent invoices, amounts formatted for display."""
    rows = await fetch_latest_invoices(db)
    return [LatestInvoiceResponse(**row) for row in rows]


@router.get("/cards")
async def get_card_data(session_factory: AsyncSessionFactory) -> CardDataResponse:
    """Summary card figures: invoice and customer counts, paid and pending totals.

    The three underlying queries run concurrently.
    """
    data = await fetch_card_data(session_factory)
    return CardDataResponse(**data)
