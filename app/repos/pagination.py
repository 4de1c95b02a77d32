"""Shared utilities for offset-based page-number pagination."""

import math
from typing import Any

from sqlalchemy import Select

# Fixed number of rows returned per listing page
ITEMS_PER_PAGE = 6

# Largest page whose OFFSET still fits a PostgreSQL bigint
MAX_PAGE = (2**63 - 1) // ITEMS_PER_PAGE + 1


def normalize_page(page: Any) -> int:
    """Coerce a requested page number to a valid 1-indexed page.

    Fractional pages are truncated, values that cannot be read as a number
    become page 1, and anything below 1 is clamped to 1 so the offset is
    never negative. Pages past MAX_PAGE are clamped to MAX_PAGE.

    Args:
        page: Requested page number (usually an int from the query string)

    Returns:
        Page number between 1 and MAX_PAGE
    """
    try:
        number = int(page)
    except (TypeError, ValueError, OverflowError):
        return 1
    return min(max(number, 1), MAX_PAGE)


def page_offset(page: Any, page_size: int = ITEMS_PER_PAGE) -> int:
    """Row offset of the first item on ``page``."""
    return (normalize_page(page) - 1) * page_size


def total_pages(total: int | None, page_size: int = ITEMS_PER_PAGE) -> int:
    """Number of pages needed to show ``total`` rows.

    Args:
        total: Number of matching rows (``None`` counts as zero)
        page_size: Rows per page

    Returns:
        ceil(total / page_size)
    """
    return math.ceil(max(total or 0, 0) / page_size)


def apply_page(stmt: Select, page: Any, page_size: int = ITEMS_PER_PAGE) -> Select:
    """Apply LIMIT/OFFSET for ``page`` to an ordered query."""
    return stmt.limit(page_size).offset(page_offset(page, page_size))
