"""User Repository implementation using SQLAlchemy.

Implements :class:`IUserRepository` over an ``AsyncSession``. Usernames and
emails are stored lower-cased, so lookups normalise their argument the same
way and compare for equality.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from tasktracker.core.exceptions import DatabaseError, UserAlreadyExistsError
from tasktracker.domain.entities.user import User
from tasktracker.domain.interfaces.repositories import IUserRepository

logger = get_logger(__name__)


def _mask(value: str) -> str:
    return value[:3] + "***" if value and len(value) > 3 else value


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of :class:`IUserRepository`.

    Args:
        db_session: SQLAlchemy async session for database operations.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        statement = select(User).where(User.id == user_id)
        result = await self.db_session.execute(statement)
        user = result.scalars().first()
        logger.debug("User lookup by ID completed", user_id=str(user_id), found=user is not None)
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username, case-insensitively.

        Raises:
            ValueError: If username is empty or whitespace-only.
        """
        if not username or not username.strip():
            raise ValueError("Username cannot be empty or whitespace-only")
        statement = select(User).where(User.username == username.strip().lower())
        result = await self.db_session.execute(statement)
        user = result.scalars().first()
        logger.debug("User lookup by username completed", username=_mask(username), found=user is not None)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitively.

        Raises:
            ValueError: If email is empty or whitespace-only.
        """
        if not email or not email.strip():
            raise ValueError("Email cannot be empty or whitespace-only")
        statement = select(User).where(User.email == email.strip().lower())
        result = await self.db_session.execute(statement)
        user = result.scalars().first()
        logger.debug("User lookup by email completed", email=_mask(email), found=user is not None)
        return user

    async def save(self, user: User) -> User:
        """Insert or update ``user`` and commit.

        Raises:
            UserAlreadyExistsError: The unique index on email or username fired.
            DatabaseError: Any other database failure.
        """
        if await self.db_session.get(User, user.id) is not None:
            user.updated_at = datetime.now(timezone.utc)
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning("Duplicate user rejected by database", username=_mask(user.username))
            raise UserAlreadyExistsError("Email or username already registered") from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Failed to save user", error=str(e))
            raise DatabaseError() from e
        await self.db_session.refresh(user)
        logger.debug("User saved", user_id=str(user.id))
        return user

    async def touch_last_login(self, user: User, when: datetime) -> User:
        user.last_login_at = when
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error("Failed to record last login", user_id=str(user.id), error=str(e))
            raise DatabaseError() from e
        return user
