"""Repository functions for the precomputed monthly revenue table."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Revenue
from app.repos.common import translate_fetch_errors


async def fetch_revenue(db: AsyncSession) -> list[Revenue]:
    """Return every revenue row in storage order.

    Args:
        db: Async database session

    Returns:
        List of Revenue rows

    Raises:
        DataFetchError: If the query fails
    """
    with translate_fetch_errors("fetch_revenue", "Failed to fetch revenue data."):
        result = await db.execute(select(Revenue))
        return list(result.scalars().all())
