"""Database engine and session factory with the psycopg3 async driver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from notification_service.core.database import Base

if TYPE_CHECKING:
    from notification_service.core.settings.postgres import PostgresSettings

logger = logging.getLogger(__name__)


def create_engine(settings: PostgresSettings) -> AsyncEngine:
    """Create the async engine for the notification store."""
    logger.info(
        "Creating database engine",
        extra={"pool_size": settings.pool_size, "echo": settings.echo},
    )
    return create_async_engine(settings.get_sqlalchemy_url(), **settings.engine_kwargs())


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``.

    Sessions do not expire on commit, so rows returned by the store stay
    readable after the transaction that loaded them has ended.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet (local development and tests)."""
    # Registers the notification tables on Base.metadata
    import notification_service.features.notifications.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def check_database_health(engine: AsyncEngine) -> bool:
    """Return True when the database answers ``SELECT 1``."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        return False
    return True
