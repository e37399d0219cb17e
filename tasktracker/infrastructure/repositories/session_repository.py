"""Session Repository implementation using SQLAlchemy.

The rotate step is a single conditional ``UPDATE``: it only matches while the
row still holds the refresh token the caller read. Two requests racing with
the same refresh token therefore cannot both rotate the row; the loser sees
zero affected rows.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from tasktracker.core.exceptions import DatabaseError
from tasktracker.core.logging import mask_secret
from tasktracker.domain.entities.session import Session
from tasktracker.domain.interfaces.repositories import ISessionRepository
from tasktracker.domain.value_objects.user_profile import SessionMetadata

logger = get_logger(__name__)


class SessionRepository(ISessionRepository):
    """SQLAlchemy implementation of :class:`ISessionRepository`."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def _commit(self, operation: str) -> None:
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Session store write failed", operation=operation, error=str(e))
            raise DatabaseError() from e

    async def create(
        self,
        user_id: uuid.UUID,
        refresh_token: str,
        ttl: timedelta,
        metadata: Optional[SessionMetadata] = None,
    ) -> Session:
        now = datetime.now(timezone.utc)
        metadata = metadata or SessionMetadata()
        session = Session(
            user_id=user_id,
            refresh_token=refresh_token,
            expires_at=now + ttl,
            created_at=now,
            last_used_at=now,
            user_agent=metadata.user_agent,
            ip_address=metadata.ip_address,
            is_active=True,
        )
        self.db_session.add(session)
        await self._commit("create")
        await self.db_session.refresh(session)
        logger.info("Session created", session_id=str(session.id), user_id=str(user_id))
        return session

    async def find_by_refresh_token(
        self, refresh_token: str, user_id: uuid.UUID
    ) -> Optional[Session]:
        statement = select(Session).where(
            Session.refresh_token == refresh_token,
            Session.user_id == user_id,
        )
        result = await self.db_session.execute(statement)
        return result.scalars().first()

    async def rotate(
        self, session: Session, new_refresh_token: str, new_ttl: timedelta
    ) -> Optional[Session]:
        now = datetime.now(timezone.utc)
        statement = (
            update(Session)
            .where(
                Session.id == session.id,
                Session.refresh_token == session.refresh_token,
                Session.is_active.is_(True),
            )
            .values(refresh_token=new_refresh_token, expires_at=now + new_ttl, last_used_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.db_session.execute(statement)
        if result.rowcount != 1:
            await self.db_session.rollback()
            logger.warning(
                "Session rotation lost a race",
                session_id=str(session.id),
                refresh_token=mask_secret(session.refresh_token),
            )
            return None
        await self._commit("rotate")
        rotated = await self.db_session.get(Session, session.id, populate_existing=True)
        logger.info("Session rotated", session_id=str(session.id), user_id=str(session.user_id))
        return rotated

    async def invalidate_all(self, user_id: uuid.UUID) -> int:
        statement = (
            update(Session)
            .where(Session.user_id == user_id, Session.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.db_session.execute(statement)
        await self._commit("invalidate_all")
        logger.info("Sessions invalidated", user_id=str(user_id), count=result.rowcount)
        return result.rowcount

    async def delete(self, session: Session) -> None:
        statement = delete(Session).where(Session.id == session.id)
        await self.db_session.execute(statement)
        await self._commit("delete")
        logger.info("Session deleted", session_id=str(session.id))

    async def delete_expired_before(self, timestamp: datetime) -> int:
        statement = delete(Session).where(Session.expires_at < timestamp)
        result = await self.db_session.execute(statement)
        await self._commit("delete_expired_before")
        logger.info("Expired sessions purged", count=result.rowcount, cutoff=timestamp.isoformat())
        return result.rowcount

    async def list_active(self, user_id: uuid.UUID) -> List[Session]:
        statement = (
            select(Session)
            .where(
                Session.user_id == user_id,
                Session.is_active.is_(True),
                Session.expires_at > datetime.now(timezone.utc),
            )
            .order_by(Session.created_at.desc())
        )
        result = await self.db_session.execute(statement)
        return list(result.scalars().all())
