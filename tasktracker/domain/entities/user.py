import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import EmailStr, field_validator
from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Represents a registered account.

    Attributes:
        id: The unique identifier for the user.
        username: A unique, case-insensitive username; carried as the token subject.
        email: A unique, case-insensitive email address used to log in.
        first_name / last_name: Display name parts.
        hashed_password: The bcrypt hash of the user's password.
        profile_picture: Optional URL of an avatar image.
        is_active: Inactive users cannot log in, refresh or call ``/me``.
        email_verified: Whether the email address has been confirmed.
        created_at / updated_at: Row bookkeeping timestamps.
        last_login_at: Last time the account authenticated or was seen by ``/me``.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the user.",
    )
    username: str = Field(
        sa_column=Column(String(50), unique=True, index=True, nullable=False),
        min_length=3,
        max_length=50,
        description="Unique, case-insensitive username.",
    )
    email: EmailStr = Field(
        sa_column=Column(String(100), unique=True, index=True, nullable=False),
        description="Unique, case-insensitive email address.",
    )
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    hashed_password: str = Field(max_length=255, description="Bcrypt-hashed password.")
    profile_picture: Optional[str] = Field(default=None, max_length=512)
    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    last_login_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        """Allow letters, digits, underscores and hyphens; store lower-cased."""
        if not value.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Username may only contain letters, digits, '_' and '-'")
        return value.strip().lower()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: EmailStr) -> str:
        return value.strip().lower()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
