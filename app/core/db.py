"""
Database connection and session management.

Provides SQLAlchemy engines and session factories. The async engine
(asyncpg) backs the API; the sync engine (psycopg) is only used by
setup scripts.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None

_async_engine: AsyncEngine | None = None
_async_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> Engine:
    """
    Create the sync SQLAlchemy engine used by scripts (schema setup, seeding).

    Returns:
        Configured SQLAlchemy engine
    """
    global _engine

    if _engine is not None:
        return _engine

    url = settings.sync_url
    if not url:
        raise RuntimeError("DATABASE_URL_APP is required")

    _engine = create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": 5},
        echo=False,
    )
    return _engine


def _async_engine_kwargs() -> dict[str, object]:
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
        "echo": False,
        "connect_args": {
            "server_settings": {"timezone": "UTC", "search_path": settings.database_search_path},
            "timeout": 30,
        },
    }


def create_fresh_async_engine() -> AsyncEngine:
    """Create a fresh async engine without caching.

    Used for tests to ensure each test gets its own engine bound to its event loop.
    """
    url = settings.async_url
    if not url:
        raise RuntimeError("DATABASE_URL_APP is required")

    return create_async_engine(url, **_async_engine_kwargs())


def get_async_engine() -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    Uses asyncpg driver for async operations (FastAPI endpoints).

    Returns:
        Configured async SQLAlchemy engine
    """
    global _async_engine

    if _async_engine is not None:
        return _async_engine

    _async_engine = create_fresh_async_engine()
    logger.debug("Created async database engine")
    return _async_engine


def get_async_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    Get or create the async sessionmaker.

    Returns:
        Async sessionmaker factory
    """
    global _async_sessionmaker
    if _async_sessionmaker is not None:
        return _async_sessionmaker

    _async_sessionmaker = async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    return _async_sessionmaker


async def reset_async_engine() -> None:
    """Reset the async database engine and sessionmaker.

    Called on application shutdown, and by tests that need fresh
    connections on a new event loop.
    """
    global _async_engine, _async_sessionmaker

    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_sessionmaker = None
