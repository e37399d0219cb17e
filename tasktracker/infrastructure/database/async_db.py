from __future__ import annotations

"""
Asynchronous database utilities.

Builds the SQLAlchemy async engine from ``DATABASE_URL`` on first use and
hands out ``AsyncSession`` objects to the SQL repositories. Nothing here is
touched when ``USE_MEMORY_STORE`` is enabled.

Key Components:
    - get_engine: The process-wide asynchronous engine.
    - get_session_factory: Factory for asynchronous database sessions.
    - get_async_db: Async context manager yielding a session, rolling back on error.
    - create_async_db_and_tables: Creates the schema, retried while the database starts up.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tasktracker.core.config.settings import settings

# Registers the tables on SQLModel.metadata
from tasktracker.domain.entities import Session, User  # noqa: F401

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    engine_kwargs = {"echo": settings.DATABASE_ECHO, "future": True}
    if not settings.DATABASE_URL.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
    return create_async_engine(settings.DATABASE_URL, **engine_kwargs)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return sessionmaker(  # type: ignore[call-overload]
        bind=get_engine(), class_=AsyncSession, expire_on_commit=False
    )


@asynccontextmanager
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yields an AsyncSession.

    The transaction is rolled back if the body raises, and the session is
    always closed.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def create_async_db_and_tables() -> None:
    """Create the tables if they do not exist yet."""
    logger.info("Creating database tables")
    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ready")


async def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        logger.info("Database engine disposed")
