from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CustomerFieldResponse(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class CustomerSummaryResponse(BaseModel):
    id: UUID
    name: str
    email: str
    image_url: str | None = None
    total_invoices: int
    total_pending: str
    total_paid: str

    model_config = ConfigDict(from_attributes=True)
