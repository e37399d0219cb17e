import uuid
from datetime import datetime, timedelta, timezone

import pytest

from tasktracker.core.exceptions import AccountInactiveError, UserNotFoundError
from tasktracker.domain.services.authentication.gateway import extract_bearer_token


class TestExtractBearerToken:
    @pytest.mark.parametrize(
        "header, expected",
        [
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("Bearer   padded  ", "padded"),
            ("bearer abc.def.ghi", "abc.def.ghi"),
            ("BEARER abc.def.ghi", "abc.def.ghi"),
            ("Bearer ", None),
            ("Token abc", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_profile_and_stamps_last_login(self, gateway, registered_user, user_repository):
        # Arrange
        assert registered_user.last_login_at is None

        # Act
        profile = await gateway.current_user(registered_user.id)

        # Assert
        assert profile.username == "alice"
        assert profile.full_name == "Alice Liddell"
        assert profile.last_login_at is not None
        stored = await user_repository.get_by_id(registered_user.id)
        assert stored.last_login_at is not None

    @pytest.mark.asyncio
    async def test_unknown_id(self, gateway):
        missing = uuid.uuid4()
        with pytest.raises(UserNotFoundError, match=str(missing)):
            await gateway.current_user(missing)

    @pytest.mark.asyncio
    async def test_inactive_user(self, gateway, registered_user, user_repository):
        registered_user.is_active = False
        await user_repository.save(registered_user)

        with pytest.raises(AccountInactiveError, match="User account is inactive"):
            await gateway.current_user(registered_user.id)

    @pytest.mark.asyncio
    async def test_unverified_email_is_allowed(self, gateway, registered_user):
        assert registered_user.email_verified is False
        profile = await gateway.current_user(registered_user.id)
        assert profile.email_verified is False


class TestListSessions:
    @pytest.mark.asyncio
    async def test_only_live_sessions_newest_first(self, gateway, registered_user, memory_store):
        # Arrange
        logins = [await gateway.login("alice@x.com", "P@ss1") for _ in range(3)]
        by_token = {s.refresh_token: s for s in memory_store.sessions.values()}
        stored = [by_token[login.tokens.refresh_token] for login in logins]
        stored[0].created_at = datetime.now(timezone.utc) - timedelta(hours=2)
        stored[1].created_at = datetime.now(timezone.utc) - timedelta(hours=1)
        stored[2].is_active = False

        # Act
        summaries = await gateway.list_sessions(registered_user.id)

        # Assert
        assert [s.id for s in summaries] == [stored[1].id, stored[0].id]
        assert logins[0].tokens.refresh_token not in repr(summaries)
