from __future__ import annotations

import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import InvoiceStatus


class LatestInvoiceResponse(BaseModel):
    id: UUID
    name: str
    email: str
    image_url: str | None = None
    amount: str = Field(description="Formatted display amount, e.g. $1,234.56")

    model_config = ConfigDict(from_attributes=True)


class InvoiceTableRowResponse(BaseModel):
    id: UUID
    amount: int = Field(description="Amount in cents")
    date: datetime.date
    status: InvoiceStatus
    name: str
    email: str
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceFormResponse(BaseModel):
    id: UUID
    customer_id: UUID
    amount: int = Field(description="Amount in cents")
    status: InvoiceStatus

    model_config = ConfigDict(from_attributes=True)


class InvoicePagesResponse(BaseModel):
    query: str
    total_pages: int
