"""Typed views over the claims carried by signed tokens."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TokenKind(str, Enum):
    """Value of the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> "TokenKind":
        if raw == cls.ACCESS.value:
            return cls.ACCESS
        if raw == cls.REFRESH.value:
            return cls.REFRESH
        return cls.UNKNOWN


class TokenStatus(str, Enum):
    """Result of :meth:`TokenCodec.validate`.

    ``EXPIRED`` is reported separately from the structural failures so callers
    can tell a stale but genuine token from a forged or garbled one.
    """

    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"
    INVALID_ARGUMENT = "invalid_argument"

    @property
    def is_valid(self) -> bool:
        return self is TokenStatus.VALID


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    user_id: uuid.UUID
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    jti: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
