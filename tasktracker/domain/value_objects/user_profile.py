"""Read-only projections of users and sessions handed across the API boundary."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from tasktracker.domain.entities import Session, User


@dataclass(frozen=True)
class UserProfile:
    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    profile_picture: Optional[str]
    is_active: bool
    email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime]

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            profile_picture=user.profile_picture,
            is_active=user.is_active,
            email_verified=user.email_verified,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


@dataclass(frozen=True)
class SessionMetadata:
    """Client details recorded on a session at login."""

    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


@dataclass(frozen=True)
class SessionSummary:
    """A session as shown to its owner. The refresh token itself is never exposed."""

    id: uuid.UUID
    created_at: datetime
    last_used_at: Optional[datetime]
    expires_at: datetime
    user_agent: Optional[str]
    ip_address: Optional[str]

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummary":
        return cls(
            id=session.id,
            created_at=session.created_at,
            last_used_at=session.last_used_at,
            expires_at=session.expires_at,
            user_agent=session.user_agent,
            ip_address=session.ip_address,
        )
