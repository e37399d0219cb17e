"""Refresh-token instance identifier (the ``jti`` claim)."""

import base64
import secrets
import string
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class TokenId:
    """Value object for a JWT token identifier.

    256 bits of randomness encoded as 43 URL-safe base64 characters. Two
    refresh tokens issued for the same user in the same second still differ
    because of it.
    """

    value: str

    TOKEN_ID_LENGTH: ClassVar[int] = 43
    VALID_CHARS: ClassVar[str] = string.ascii_letters + string.digits + "-_"

    def __post_init__(self):
        if not self.value:
            raise ValueError("Token ID cannot be empty")
        if len(self.value) != self.TOKEN_ID_LENGTH:
            raise ValueError(f"Token ID must be exactly {self.TOKEN_ID_LENGTH} characters")
        if not all(c in self.VALID_CHARS for c in self.value):
            raise ValueError("Token ID contains invalid characters")

    @classmethod
    def generate(cls) -> "TokenId":
        raw_bytes = secrets.token_bytes(32)
        return cls(base64.urlsafe_b64encode(raw_bytes).rstrip(b"=").decode("ascii"))

    def mask_for_logging(self) -> str:
        """Return masked token ID for safe logging."""
        return self.value[:4] + "*" * (len(self.value) - 4)

    def __str__(self) -> str:
        return self.value
