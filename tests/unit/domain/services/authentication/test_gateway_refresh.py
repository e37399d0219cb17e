import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from tasktracker.core.exceptions import (
    AccountInactiveError,
    ExpiredTokenError,
    InvalidRefreshTokenError,
    InvalidTokenTypeError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    UserNotFoundError,
)
from tasktracker.domain.services.authentication.gateway import AuthenticationGateway
from tasktracker.domain.value_objects.token_claims import TokenKind
from tasktracker.infrastructure.repositories.memory import InMemorySessionRepository
from tests.factories.token import build_claims


class YieldingSessionRepository(InMemorySessionRepository):
    """Hands control back to the loop after the lookup so two refreshes interleave."""

    async def find_by_refresh_token(self, refresh_token, user_id):
        session = await super().find_by_refresh_token(refresh_token, user_id)
        await asyncio.sleep(0)
        return session


class TestRefreshHappyPath:
    @pytest.mark.asyncio
    async def test_refresh_rotates_the_session_in_place(
        self, gateway, registered_user, memory_store, token_codec
    ):
        # Arrange
        login = await gateway.login("alice@x.com", "P@ss1")
        (session_id,) = memory_store.sessions.keys()

        # Act
        pair = await gateway.refresh(login.tokens.refresh_token)

        # Assert
        assert pair.refresh_token != login.tokens.refresh_token
        assert token_codec.kind_of(pair.access_token) is TokenKind.ACCESS
        assert token_codec.kind_of(pair.refresh_token) is TokenKind.REFRESH
        assert list(memory_store.sessions.keys()) == [session_id]
        stored = memory_store.sessions[session_id]
        assert stored.refresh_token == pair.refresh_token
        assert stored.is_active
        assert stored.last_used_at is not None

    @pytest.mark.asyncio
    async def test_rotated_token_chain_keeps_working(self, gateway, registered_user):
        login = await gateway.login("alice@x.com", "P@ss1")
        first = await gateway.refresh(login.tokens.refresh_token)
        second = await gateway.refresh(first.refresh_token)
        assert second.refresh_token not in (first.refresh_token, login.tokens.refresh_token)


class TestRefreshFailures:
    @pytest.mark.asyncio
    async def test_replayed_token_is_not_found(self, gateway, registered_user):
        # Arrange
        login = await gateway.login("alice@x.com", "P@ss1")
        await gateway.refresh(login.tokens.refresh_token)

        # Act / Assert
        with pytest.raises(RefreshTokenNotFoundError):
            await gateway.refresh(login.tokens.refresh_token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["garbage", "a.b.c", ""])
    async def test_invalid_token(self, gateway, token):
        with pytest.raises(InvalidRefreshTokenError):
            await gateway.refresh(token)

    @pytest.mark.asyncio
    async def test_expired_refresh_jwt_is_invalid(self, gateway, token_codec, registered_user):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        token = token_codec.encode(
            build_claims(
                sub="alice",
                user_id=str(registered_user.id),
                type="refresh",
                iat=past - timedelta(days=1),
                exp=past,
            )
        )
        with pytest.raises(InvalidRefreshTokenError):
            await gateway.refresh(token)

    @pytest.mark.asyncio
    async def test_token_is_decoded_once(self, gateway, registered_user, mocker):
        login = await gateway.login("alice@x.com", "P@ss1")
        decode = mocker.spy(gateway.token_codec, "decode")
        validate = mocker.spy(gateway.token_codec, "validate")

        await gateway.refresh(login.tokens.refresh_token)

        decode.assert_called_once_with(login.tokens.refresh_token)
        validate.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_expiring_during_the_check_is_invalid(self, gateway, registered_user, mocker):
        login = await gateway.login("alice@x.com", "P@ss1")
        mocker.patch.object(gateway.token_codec, "decode", side_effect=ExpiredTokenError())

        with pytest.raises(InvalidRefreshTokenError):
            await gateway.refresh(login.tokens.refresh_token)

    @pytest.mark.asyncio
    async def test_access_token_is_wrong_type(self, gateway, registered_user):
        login = await gateway.login("alice@x.com", "P@ss1")
        with pytest.raises(InvalidTokenTypeError):
            await gateway.refresh(login.tokens.access_token)

    @pytest.mark.asyncio
    async def test_deleted_user(self, gateway, registered_user, memory_store):
        login = await gateway.login("alice@x.com", "P@ss1")
        memory_store.users.clear()
        with pytest.raises(UserNotFoundError):
            await gateway.refresh(login.tokens.refresh_token)

    @pytest.mark.asyncio
    async def test_inactive_user(self, gateway, registered_user, user_repository):
        login = await gateway.login("alice@x.com", "P@ss1")
        registered_user.is_active = False
        await user_repository.save(registered_user)
        with pytest.raises(AccountInactiveError):
            await gateway.refresh(login.tokens.refresh_token)

    @pytest.mark.asyncio
    async def test_valid_jwt_without_session_is_not_found(self, gateway, token_issuer, registered_user):
        orphan = token_issuer.issue_refresh_token(registered_user)
        with pytest.raises(RefreshTokenNotFoundError):
            await gateway.refresh(orphan)

    @pytest.mark.asyncio
    async def test_revoked_session_is_expired_and_deleted(self, gateway, registered_user, memory_store):
        login = await gateway.login("alice@x.com", "P@ss1")
        await gateway.logout(f"Bearer {login.tokens.access_token}")

        with pytest.raises(RefreshTokenExpiredError):
            await gateway.refresh(login.tokens.refresh_token)
        assert memory_store.sessions == {}

    @pytest.mark.asyncio
    async def test_session_past_expiry_is_expired_and_deleted(self, gateway, registered_user, memory_store):
        login = await gateway.login("alice@x.com", "P@ss1")
        (stored,) = memory_store.sessions.values()
        stored.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

        with pytest.raises(RefreshTokenExpiredError):
            await gateway.refresh(login.tokens.refresh_token)
        assert memory_store.sessions == {}

    @pytest.mark.asyncio
    async def test_lost_rotation_reports_not_found(self, gateway, registered_user, mocker):
        login = await gateway.login("alice@x.com", "P@ss1")
        mocker.patch.object(gateway.session_repository, "rotate", AsyncMock(return_value=None))

        with pytest.raises(RefreshTokenNotFoundError):
            await gateway.refresh(login.tokens.refresh_token)


class TestConcurrentRefresh:
    @pytest.mark.asyncio
    async def test_only_one_of_two_racing_refreshes_wins(
        self, memory_store, user_repository, token_issuer, token_codec, password_hasher
    ):
        # Arrange
        gateway = AuthenticationGateway(
            user_repository=user_repository,
            session_repository=YieldingSessionRepository(memory_store),
            token_issuer=token_issuer,
            token_codec=token_codec,
            credential_verifier=password_hasher,
        )
        await gateway.register("alice", "alice@x.com", "Alice", "Liddell", "P@ss1")
        login = await gateway.login("alice@x.com", "P@ss1")

        # Act
        results = await asyncio.gather(
            gateway.refresh(login.tokens.refresh_token),
            gateway.refresh(login.tokens.refresh_token),
            return_exceptions=True,
        )

        # Assert
        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], RefreshTokenNotFoundError)
        (stored,) = memory_store.sessions.values()
        assert stored.refresh_token == winners[0].refresh_token
