"""
Repository layer for read-only data access.

Each module owns the queries for one area of the dashboard (revenue,
invoices, customers, summary cards). Every operation turns storage
failures into a DataFetchError with a fixed message.
"""
