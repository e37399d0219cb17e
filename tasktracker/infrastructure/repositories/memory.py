"""In-memory repositories for development and tests.

Selected with ``USE_MEMORY_STORE=true``. All state lives in one
:class:`InMemoryStore`; each method runs to completion without awaiting, and
a lock guards the maps, so the compare-and-swap in :meth:`rotate` is atomic.
Rows are copied on the way in and out so callers never hold a reference to
stored state.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, TypeVar

from structlog import get_logger

from tasktracker.core.exceptions import DatabaseError, UserAlreadyExistsError
from tasktracker.domain.entities import Session, User
from tasktracker.domain.interfaces.repositories import ISessionRepository, IUserRepository
from tasktracker.domain.value_objects.user_profile import SessionMetadata

logger = get_logger(__name__)

RowT = TypeVar("RowT", User, Session)


def _clone(row: RowT) -> RowT:
    return type(row)(**row.model_dump())


class InMemoryStore:
    """Shared backing maps for the in-memory repositories."""

    def __init__(self) -> None:
        self.users: Dict[uuid.UUID, User] = {}
        self.sessions: Dict[uuid.UUID, Session] = {}
        self.lock = threading.RLock()

    def reset(self) -> None:
        with self.lock:
            self.users.clear()
            self.sessions.clear()


class InMemoryUserRepository(IUserRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def _find(self, field: str, value: str) -> Optional[User]:
        value = value.strip().lower()
        with self.store.lock:
            for user in self.store.users.values():
                if getattr(user, field) == value:
                    return _clone(user)
        return None

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with self.store.lock:
            user = self.store.users.get(user_id)
            return _clone(user) if user else None

    async def get_by_username(self, username: str) -> Optional[User]:
        return self._find("username", username)

    async def get_by_email(self, email: str) -> Optional[User]:
        return self._find("email", email)

    async def save(self, user: User) -> User:
        user.username = user.username.strip().lower()
        user.email = user.email.strip().lower()
        with self.store.lock:
            for other in self.store.users.values():
                if other.id == user.id:
                    continue
                if other.email == user.email or other.username == user.username:
                    raise UserAlreadyExistsError("Email or username already registered")
            if user.id in self.store.users:
                user.updated_at = datetime.now(timezone.utc)
            self.store.users[user.id] = _clone(user)
        return user

    async def touch_last_login(self, user: User, when: datetime) -> User:
        with self.store.lock:
            stored = self.store.users.get(user.id)
            if stored is not None:
                stored.last_login_at = when
        user.last_login_at = when
        return user


class InMemorySessionRepository(ISessionRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

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
        with self.store.lock:
            if any(s.refresh_token == refresh_token for s in self.store.sessions.values()):
                logger.error("Session store write failed", operation="create", reason="duplicate_refresh_token")
                raise DatabaseError("Refresh token is already bound to a session")
            self.store.sessions[session.id] = _clone(session)
        logger.info("Session created", session_id=str(session.id), user_id=str(user_id))
        return session

    async def find_by_refresh_token(
        self, refresh_token: str, user_id: uuid.UUID
    ) -> Optional[Session]:
        with self.store.lock:
            for session in self.store.sessions.values():
                if session.refresh_token == refresh_token and session.user_id == user_id:
                    return _clone(session)
        return None

    async def rotate(
        self, session: Session, new_refresh_token: str, new_ttl: timedelta
    ) -> Optional[Session]:
        now = datetime.now(timezone.utc)
        with self.store.lock:
            stored = self.store.sessions.get(session.id)
            if (
                stored is None
                or not stored.is_active
                or stored.refresh_token != session.refresh_token
            ):
                logger.warning("Session rotation lost a race", session_id=str(session.id))
                return None
            stored.refresh_token = new_refresh_token
            stored.expires_at = now + new_ttl
            stored.last_used_at = now
            rotated = _clone(stored)
        logger.info("Session rotated", session_id=str(session.id), user_id=str(session.user_id))
        return rotated

    async def invalidate_all(self, user_id: uuid.UUID) -> int:
        count = 0
        with self.store.lock:
            for session in self.store.sessions.values():
                if session.user_id == user_id and session.is_active:
                    session.is_active = False
                    count += 1
        logger.info("Sessions invalidated", user_id=str(user_id), count=count)
        return count

    async def delete(self, session: Session) -> None:
        with self.store.lock:
            self.store.sessions.pop(session.id, None)

    async def delete_expired_before(self, timestamp: datetime) -> int:
        with self.store.lock:
            expired = [
                sid for sid, s in self.store.sessions.items() if s.expires_at < timestamp
            ]
            for sid in expired:
                del self.store.sessions[sid]
        logger.info("Expired sessions purged", count=len(expired), cutoff=timestamp.isoformat())
        return len(expired)

    async def list_active(self, user_id: uuid.UUID) -> List[Session]:
        with self.store.lock:
            sessions = [
                _clone(s)
                for s in self.store.sessions.values()
                if s.user_id == user_id and s.is_valid()
            ]
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)
