"""Authentication Gateway domain service.

Orchestrates registration, login, refresh-token rotation, logout, the
current-user lookup and the optional-auth probe on top of the token services,
the session repository, the user repository and the credential verifier.

Refresh-token sessions move through three states::

    Active(valid) --time--> Active(expired) --revoke/logout--> Inactive

``Inactive`` is terminal. A new login creates a fresh row and a refresh
rotates the existing active row in place; an inactive row is never revived.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import structlog
from fastapi.security.utils import get_authorization_scheme_param

from tasktracker.core.exceptions import (
    AccountInactiveError,
    DatabaseError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenTypeError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    TokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from tasktracker.core.logging import mask_secret
from tasktracker.domain.entities.user import User
from tasktracker.domain.interfaces.repositories import ISessionRepository, IUserRepository
from tasktracker.domain.interfaces.services import ICredentialVerifier
from tasktracker.domain.services.auth.token import TokenIssuer
from tasktracker.domain.services.auth.token_codec import TokenCodec
from tasktracker.domain.value_objects.auth_outcome import (
    Authenticated,
    BadRequest,
    Error,
    NotFound,
    OptionalAuthOutcome,
    Unauthenticated,
)
from tasktracker.domain.value_objects.auth_results import LoginResult, RegistrationResult, TokenPair
from tasktracker.domain.value_objects.token_claims import TokenKind
from tasktracker.domain.value_objects.user_profile import (
    SessionMetadata,
    SessionSummary,
    UserProfile,
)

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "bearer"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value.

    The scheme is matched case-insensitively, the same way
    ``OAuth2PasswordBearer`` reads it. Anything that is not a non-empty Bearer
    credential yields ``None``.
    """
    scheme, token = get_authorization_scheme_param(authorization)
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


class AuthenticationGateway:
    """Entry point for every authentication use case.

    Args:
        user_repository: Lookup and persistence of users.
        session_repository: The refresh-token session table.
        token_issuer: Builds access/refresh tokens.
        token_codec: Verifies presented tokens.
        credential_verifier: Hashes and checks passwords off the event loop.
        last_login_debounce: Minimum gap between two last-login writes made by
            :meth:`optional_auth`.
        clock: Source of "now"; injectable for tests.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session_repository: ISessionRepository,
        token_issuer: TokenIssuer,
        token_codec: TokenCodec,
        credential_verifier: ICredentialVerifier,
        last_login_debounce: timedelta = timedelta(minutes=5),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.user_repository = user_repository
        self.session_repository = session_repository
        self.token_issuer = token_issuer
        self.token_codec = token_codec
        self.credential_verifier = credential_verifier
        self.last_login_debounce = last_login_debounce
        self._clock = clock or _utcnow

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    async def register(
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        raw_password: str,
    ) -> RegistrationResult:
        """Create an account. No session or token is issued.

        Raises:
            ValidationError: The username, email, a name part or the password is blank.
            UserAlreadyExistsError: The email, checked first, or the username is taken.
        """
        email = (email or "").strip().lower()
        username = (username or "").strip().lower()
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        for field, value in (
            ("Username", username),
            ("Email", email),
            ("First name", first_name),
            ("Last name", last_name),
        ):
            if not value:
                raise ValidationError(f"{field} must not be empty")
        if not raw_password:
            raise ValidationError("Password must not be empty")

        if await self.user_repository.get_by_email(email) is not None:
            logger.info("Registration rejected", reason="email_taken")
            raise UserAlreadyExistsError("Email already registered")
        if await self.user_repository.get_by_username(username) is not None:
            logger.info("Registration rejected", reason="username_taken")
            raise UserAlreadyExistsError("Username already taken")

        hashed_password = await self.credential_verifier.hash(raw_password)
        user = User(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed_password,
        )
        user = await self.user_repository.save(user)
        logger.info("User registered", user_id=str(user.id))
        return RegistrationResult(user_id=user.id)

    async def login(
        self, email: str, raw_password: str, metadata: Optional[SessionMetadata] = None
    ) -> LoginResult:
        """Authenticate with email and password and open a new session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password; the two
                cases are indistinguishable to the caller.
            AccountInactiveError: The credentials are right but the account is disabled.
        """
        user = await self.user_repository.get_by_email(email.strip().lower())
        if user is None:
            await self.credential_verifier.dummy_verify()
            logger.info("Login failed", reason="unknown_email")
            raise InvalidCredentialsError()
        if not await self.credential_verifier.verify(raw_password, user.hashed_password):
            logger.info("Login failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info("Login refused", reason="inactive", user_id=str(user.id))
            raise AccountInactiveError()

        access_token = self.token_issuer.issue_access_token(user)
        refresh_token = self.token_issuer.issue_refresh_token(user)
        session = await self.session_repository.create(
            user.id, refresh_token, self.token_issuer.refresh_ttl, metadata
        )
        user = await self.user_repository.touch_last_login(user, self._clock())

        logger.info("User logged in", user_id=str(user.id), session_id=str(session.id))
        return LoginResult(
            tokens=self._token_pair(access_token, refresh_token),
            user=UserProfile.from_user(user),
        )

    # ------------------------------------------------------------------
    # Refresh-token rotation
    # ------------------------------------------------------------------

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair and rotate its session.

        The checks run in a fixed order and each failure has its own error,
        so the boundary can tell a forged token from a replayed one.

        Raises:
            InvalidRefreshTokenError: Signature or structure is invalid.
            InvalidTokenTypeError: The token is not a refresh token.
            UserNotFoundError: The subject no longer exists.
            AccountInactiveError: The subject's account is disabled.
            RefreshTokenNotFoundError: No session holds this exact token, or
                a concurrent refresh rotated it first.
            RefreshTokenExpiredError: The session is inactive or expired; it
                is deleted.
        """
        try:
            claims = self.token_codec.decode(refresh_token)
        except TokenError as e:
            logger.info("Refresh token rejected", reason=e.code)
            raise InvalidRefreshTokenError() from e
        if claims.kind is not TokenKind.REFRESH:
            raise InvalidTokenTypeError()

        user = await self.user_repository.get_by_username(claims.subject)
        if user is None:
            raise UserNotFoundError()
        if not user.is_active:
            raise AccountInactiveError()

        session = await self.session_repository.find_by_refresh_token(refresh_token, user.id)
        if session is None:
            logger.warning(
                "Refresh token has no session",
                user_id=str(user.id),
                refresh_token=mask_secret(refresh_token),
            )
            raise RefreshTokenNotFoundError()
        if not session.is_valid(self._clock()):
            await self.session_repository.delete(session)
            logger.info("Stale session removed on refresh", session_id=str(session.id))
            raise RefreshTokenExpiredError()

        access_token = self.token_issuer.issue_access_token(user)
        new_refresh_token = self.token_issuer.issue_refresh_token(user)
        rotated = await self.session_repository.rotate(
            session, new_refresh_token, self.token_issuer.refresh_ttl
        )
        if rotated is None:
            raise RefreshTokenNotFoundError()

        logger.info("Tokens refreshed", user_id=str(user.id), session_id=str(session.id))
        return self._token_pair(access_token, new_refresh_token)

    # ------------------------------------------------------------------
    # Logout
    # ------------------------------------------------------------------

    async def logout(self, authorization: Optional[str]) -> int:
        """Revoke every active session of the token's owner.

        Never raises for a missing, invalid or non-access token: the caller is
        treated as already logged out. Returns the number of sessions revoked.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            logger.info("Logout without a bearer token")
            return 0
        try:
            claims = self.token_codec.decode(token)
        except TokenError as e:
            logger.info("Logout with an unusable token", reason=e.code)
            return 0
        if claims.kind is not TokenKind.ACCESS:
            logger.info("Logout with a non-access token", kind=claims.kind.value)
            return 0

        try:
            revoked = await self.session_repository.invalidate_all(claims.user_id)
        except DatabaseError:
            logger.warning("Session revocation failed during logout", user_id=str(claims.user_id))
            return 0
        logger.info("User logged out", user_id=str(claims.user_id), revoked_sessions=revoked)
        return revoked

    # ------------------------------------------------------------------
    # Current user
    # ------------------------------------------------------------------

    async def current_user(self, user_id: uuid.UUID) -> UserProfile:
        """Load the caller's profile and stamp their last-login time.

        Raises:
            UserNotFoundError: No user with this id.
            AccountInactiveError: The account is disabled.
        """
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found with ID: {user_id}")
        if not user.is_active:
            raise AccountInactiveError("User account is inactive")
        if not user.email_verified:
            logger.warning("Email not verified", user_id=str(user.id))

        user = await self.user_repository.touch_last_login(user, self._clock())
        return UserProfile.from_user(user)

    async def list_sessions(self, user_id: uuid.UUID) -> List[SessionSummary]:
        sessions = await self.session_repository.list_active(user_id)
        return [SessionSummary.from_session(s) for s in sessions]

    # ------------------------------------------------------------------
    # Optional-auth probe
    # ------------------------------------------------------------------

    async def optional_auth(self, authorization: Optional[str]) -> OptionalAuthOutcome:
        """Report who, if anyone, the header authenticates. Never raises."""
        try:
            return await self._probe(authorization)
        except Exception:
            logger.exception("Optional authentication check failed")
            return Error("authentication check failed")

    async def _probe(self, authorization: Optional[str]) -> OptionalAuthOutcome:
        token = extract_bearer_token(authorization)
        if token is None:
            return Unauthenticated("no token")
        try:
            claims = self.token_codec.decode(token)
        except ExpiredTokenError:
            return Unauthenticated("token expired")
        except TokenError:
            return Unauthenticated("invalid token")
        if claims.kind is not TokenKind.ACCESS:
            return BadRequest("wrong token type")

        user = await self.user_repository.get_by_id(claims.user_id)
        if user is None:
            return NotFound("user not found")
        if claims.subject != user.username:
            logger.warning("Token subject mismatch", user_id=str(user.id))
            return Unauthenticated("token validation failed")
        if not user.is_active:
            return Unauthenticated("account inactive")

        now = self._clock()
        if self._last_login_is_stale(user, now):
            user = await self.user_repository.touch_last_login(user, now)
        return Authenticated(UserProfile.from_user(user))

    def _last_login_is_stale(self, user: User, now: datetime) -> bool:
        if user.last_login_at is None:
            return True
        return now - _as_utc(user.last_login_at) > self.last_login_debounce

    def _token_pair(self, access_token: str, refresh_token: str) -> TokenPair:
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.token_issuer.access_ttl_seconds,
            refresh_expires_in=self.token_issuer.refresh_ttl_seconds,
        )
