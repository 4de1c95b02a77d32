from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RevenueResponse(BaseModel):
    month: str
    revenue: int

    model_config = ConfigDict(from_attributes=True)


class CardDataResponse(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str
