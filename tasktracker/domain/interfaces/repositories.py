"""Repository interfaces for abstracting data persistence in the domain layer.

The domain layer talks to storage only through these ports. Concrete
adapters live in ``tasktracker.infrastructure.repositories``.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional

from tasktracker.domain.entities import Session, User
from tasktracker.domain.value_objects.user_profile import SessionMetadata


class IUserRepository(ABC):
    """Contract for user persistence operations."""

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Retrieves a user by their unique identifier.

        Returns:
            The `User`, or `None` if no user is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Retrieves a user by their username (case-insensitively)."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by their email address (case-insensitively)."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, user: User) -> User:
        """Creates or updates a user.

        Raises:
            UserAlreadyExistsError: If the store rejects a duplicate email or
                username that slipped past the caller's own checks.
        """
        raise NotImplementedError

    @abstractmethod
    async def touch_last_login(self, user: User, when: datetime) -> User:
        """Records ``when`` as the user's last-login time and returns the updated user."""
        raise NotImplementedError


class ISessionRepository(ABC):
    """Contract for the persisted refresh-token session table."""

    @abstractmethod
    async def create(
        self,
        user_id: uuid.UUID,
        refresh_token: str,
        ttl: timedelta,
        metadata: Optional[SessionMetadata] = None,
    ) -> Session:
        """Opens a new active session holding ``refresh_token`` until ``now + ttl``."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_refresh_token(
        self, refresh_token: str, user_id: uuid.UUID
    ) -> Optional[Session]:
        """Returns the session holding exactly this token for this user, if any.

        The row is returned whatever its active flag or expiry; validity is the
        caller's decision.
        """
        raise NotImplementedError

    @abstractmethod
    async def rotate(
        self, session: Session, new_refresh_token: str, new_ttl: timedelta
    ) -> Optional[Session]:
        """Swaps the session's refresh token in place.

        The swap only happens if the stored row still holds
        ``session.refresh_token`` and is still active. On success the expiry
        becomes ``now + new_ttl``, ``last_used_at`` becomes now and the
        updated session is returned. If another request rotated or revoked the
        row first, nothing is written and ``None`` is returned.
        """
        raise NotImplementedError

    @abstractmethod
    async def invalidate_all(self, user_id: uuid.UUID) -> int:
        """Marks every active session of the user inactive.

        Already-inactive rows are left alone. Returns the number of sessions
        that changed state, so calling it twice returns 0 the second time.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_expired_before(self, timestamp: datetime) -> int:
        """Deletes every session whose expiry is earlier than ``timestamp``.

        Returns:
            The number of rows removed.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_active(self, user_id: uuid.UUID) -> List[Session]:
        """Returns the user's active sessions, newest first."""
        raise NotImplementedError
