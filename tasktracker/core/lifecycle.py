"""Application lifecycle management.

Start-up loads the signing key, prepares the SQL schema when the SQL store is
in use and launches the expired-session sweep; shutdown stops the sweep and
releases the database engine.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from tasktracker.core.config.settings import settings
from tasktracker.core.logging import logger
from tasktracker.domain.interfaces.repositories import ISessionRepository
from tasktracker.infrastructure.database.async_db import (
    create_async_db_and_tables,
    dispose_engine,
    get_async_db,
)
from tasktracker.infrastructure.dependency_injection.auth_dependencies import (
    get_memory_store,
    get_token_codec,
)
from tasktracker.infrastructure.repositories.memory import InMemorySessionRepository
from tasktracker.infrastructure.repositories.session_repository import SessionRepository


async def purge_expired_sessions(repository: ISessionRepository) -> int:
    """Delete every session whose refresh token has already expired."""
    return await repository.delete_expired_before(datetime.now(timezone.utc))


async def _sweep_once() -> int:
    if settings.USE_MEMORY_STORE:
        return await purge_expired_sessions(InMemorySessionRepository(get_memory_store()))
    async with get_async_db() as db:
        return await purge_expired_sessions(SessionRepository(db))


async def run_session_cleanup(interval_seconds: int) -> None:
    """Background loop that periodically removes expired sessions."""
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await _sweep_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("session_cleanup_failed", error=str(exc))
    except asyncio.CancelledError:
        logger.info("session_cleanup_task_cancelled")
        raise


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        get_token_codec()
        if not settings.USE_MEMORY_STORE:
            await create_async_db_and_tables()

        cleanup_task = None
        if settings.SESSION_CLEANUP_INTERVAL_SECONDS > 0:
            cleanup_task = asyncio.create_task(
                run_session_cleanup(settings.SESSION_CLEANUP_INTERVAL_SECONDS)
            )
        app.state.session_cleanup_task = cleanup_task
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            store="memory" if settings.USE_MEMORY_STORE else "sql",
        )

        yield

        # Shutdown
        if cleanup_task is not None:
            cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await cleanup_task
        await dispose_engine()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
