"""
FastAPI dependency injection utilities.

Routes receive their storage handles through these dependencies so that
tests can swap in fakes with ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.db import get_async_sessionmaker


async def get_async_db_session() -> AsyncGenerator[AsyncSession]:
    """
    Async database session dependency for FastAPI endpoints.

    Usage:
        @router.get("/invoices")
        async def list_invoices(db: AsyncDbSession):
            return await fetch_filtered_invoices(db, "", 1)

    Yields:
        Async SQLAlchemy database session
    """
    session_maker = get_async_sessionmaker()
    async with session_maker() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory dependency for operations that fan out concurrent queries.

    An AsyncSession cannot run concurrent statements, so callers open one
    session per query from this factory.
    """
    return get_async_sessionmaker()


# Type alias for async database session dependency
AsyncDbSession = Annotated[AsyncSession, Depends(get_async_db_session)]

# Type alias for the session factory dependency
AsyncSessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
