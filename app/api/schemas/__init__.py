"""
Pydantic schemas for API responses.

This package contains schema definitions for the dashboard, invoice and
customer endpoints.
"""

# Re-export schemas for convenient imports.
from .customer import CustomerFieldResponse as CustomerFieldResponse
from .customer import CustomerSummaryResponse as CustomerSummaryResponse
from .dashboard import CardDataResponse as CardDataResponse
from .dashboard import RevenueResponse as RevenueResponse
from .invoice import InvoiceFormResponse as InvoiceFormResponse
from .invoice import InvoicePagesResponse as InvoicePagesResponse
from .invoice import InvoiceTableRowResponse as InvoiceTableRowResponse
from .invoice import LatestInvoiceResponse as LatestInvoiceResponse
