from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.schemas.customer import CustomerFieldResponse, CustomerSummaryResponse
from app.core.dependencies import AsyncDbSession
from app.repos.customer_repo import fetch_customers, fetch_filtered_customers

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("")
async def list_customers(db: AsyncDbSession) -> list[CustomerFieldResponse]:
    """All customers (id and name) for selection lists, sorted by name."""
    rows = await fetch_customers(db)
    return [CustomerFieldResponse(**row) for row in rows]


@router.get("/summary")
async def list_customer_summaries(
    db: AsyncDbSession,
    query: Annotated[
        str, Query(description="Case-insensitive text matched against name and email")
    ] = "",
) -> list[CustomerSummaryResponse]:
    """Customers matching `query` with invoice count and paid/pending totals."""
    rows = await fetch_filtered_customers(db, query)
    return [CustomerSummaryResponse(**row) for row in rows]
