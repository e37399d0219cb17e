from __future__ import annotations

"""Response Pydantic models for user and session data."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tasktracker.domain.value_objects.user_profile import SessionSummary, UserProfile


class UserOut(BaseModel):
    """Serialised :class:`~tasktracker.domain.value_objects.user_profile.UserProfile`."""

    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    profile_picture: Optional[str] = None
    is_active: bool = True
    email_verified: bool = False
    created_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserOut":
        return cls.model_validate(profile)


class SessionOut(BaseModel):
    id: uuid.UUID
    created_at: datetime
    last_used_at: Optional[datetime] = None
    expires_at: datetime
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_summary(cls, summary: SessionSummary) -> "SessionOut":
        return cls.model_validate(summary)
