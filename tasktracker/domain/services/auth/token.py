from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from structlog import get_logger

from tasktracker.domain.entities.user import User
from tasktracker.domain.services.auth.token_codec import TokenCodec
from tasktracker.domain.value_objects.token_claims import TokenKind
from tasktracker.domain.value_objects.token_id import TokenId

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Builds access and refresh tokens for a user.

    Every token gets an ``exp`` claim derived from the configured lifetime.
    Issuing a refresh token does not persist anything; the caller is
    responsible for creating or rotating the matching session row.

    Attributes:
        codec (TokenCodec): Signs the claims.
        access_ttl (timedelta): Lifetime of access tokens.
        refresh_ttl (timedelta): Lifetime of refresh tokens.
    """

    def __init__(
        self,
        codec: TokenCodec,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        clock: Optional[Clock] = None,
    ):
        self.codec = codec
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock or _utcnow

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_ttl.total_seconds())

    @property
    def refresh_ttl_seconds(self) -> int:
        return int(self.refresh_ttl.total_seconds())

    def issue_access_token(self, user: User) -> str:
        """Create an access token carrying the user's id, email and display name.

        Args:
            user (User): User for whom to create the token.

        Returns:
            str: The signed token.
        """
        issued_at = self._clock()
        payload = {
            "sub": user.username,
            "user_id": str(user.id),
            "email": user.email,
            "full_name": user.full_name,
            "type": TokenKind.ACCESS.value,
            "iat": issued_at,
            "exp": issued_at + self.access_ttl,
        }
        token = self.codec.encode(payload)
        logger.debug("Access token issued", user_id=str(user.id))
        return token

    def issue_refresh_token(self, user: User) -> str:
        """Create a refresh token with a fresh ``jti``.

        Args:
            user (User): User for whom to create the token.

        Returns:
            str: The signed token. Two calls never return the same value.
        """
        issued_at = self._clock()
        token_id = TokenId.generate()
        payload = {
            "sub": user.username,
            "user_id": str(user.id),
            "type": TokenKind.REFRESH.value,
            "jti": str(token_id),
            "iat": issued_at,
            "exp": issued_at + self.refresh_ttl,
        }
        token = self.codec.encode(payload)
        logger.debug("Refresh token issued", user_id=str(user.id), jti=token_id.mask_for_logging())
        return token
