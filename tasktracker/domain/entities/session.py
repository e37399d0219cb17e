import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String
from sqlmodel import Column, Field, Index, SQLModel

from tasktracker.domain.entities.user import utcnow


class Session(SQLModel, table=True):
    """A persisted refresh-token session.

    One row per login. A refresh rotates the token value in place, so the row
    id stays the same for the whole life of the login. Logout flips
    ``is_active`` off instead of deleting the row.

    Attributes:
        id: Stable identifier of the login session.
        user_id: Owner of the session.
        refresh_token: The refresh token currently accepted for this session;
            unique across all rows.
        expires_at: When the current refresh token stops being accepted.
        created_at: When the session was opened (login time).
        last_used_at: Last successful refresh.
        user_agent / ip_address: Client metadata captured at login.
        is_active: False once the session has been revoked.
    """

    __tablename__ = "user_sessions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, nullable=False)
    refresh_token: str = Field(
        sa_column=Column(String(1024), unique=True, nullable=False),
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    last_used_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    user_agent: Optional[str] = Field(default=None, max_length=500)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    is_active: bool = Field(default=True)

    __table_args__ = (
        Index("ix_user_sessions_expires_at", "expires_at"),
        Index("ix_user_sessions_user_id_is_active", "user_id", "is_active"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        # SQLite and some drivers hand back naive datetimes; rows are always written in UTC.
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """A session is valid while it is active and its refresh token is unexpired."""
        return self.is_active and not self.is_expired(now)
