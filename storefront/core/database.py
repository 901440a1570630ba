"""
Database connection and session management
Uses SQLAlchemy async engine (asyncpg in production, aiosqlite in tests)
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from storefront.core.config import settings

logger = logging.getLogger(__name__)


if not settings.DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file or deployment environment."
    )


def _connect_args(url: str) -> dict:
    """asyncpg-specific connection arguments; other drivers get none."""
    if not url.startswith("postgresql+asyncpg"):
        return {}
    # Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
    return {
        "command_timeout": 60,
        "server_settings": {
            "application_name": "storefront_api",
        },
    }


# NullPool: every request checks out a fresh connection and closes it afterwards,
# which keeps serverless deployments from reusing connections across invocations
# Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    poolclass=NullPool,
    connect_args=_connect_args(settings.DATABASE_URL),
)


# Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#session-basics
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keep objects accessible after commit
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models"""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency function that provides a database session

    One session per request:
    - Commits on success
    - Rolls back on error
    - Always closes the session
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            try:
                await session.rollback()
            except Exception as rollback_error:
                # Connection already gone; the request error is re-raised below
                logger.debug(f"Rollback failed after request error: {rollback_error}")
            raise
        finally:
            await session.close()
