from datetime import datetime, timedelta, timezone

import pytest

from tasktracker.core.dependencies.auth import get_current_user_id
from tasktracker.core.exceptions import UnauthorizedAccessError
from tests.factories.token import build_claims
from tests.factories.user import create_fake_user


def test_access_token_yields_user_id(token_issuer, token_codec):
    user = create_fake_user()
    token = token_issuer.issue_access_token(user)

    assert get_current_user_id(token, token_codec) == user.id


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token_codec, token):
    with pytest.raises(UnauthorizedAccessError, match="Not authenticated"):
        get_current_user_id(token, token_codec)


def test_expired_token(token_codec):
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = token_codec.encode(build_claims(iat=past - timedelta(minutes=5), exp=past))

    with pytest.raises(UnauthorizedAccessError, match="Token has expired"):
        get_current_user_id(token, token_codec)


def test_garbage_token(token_codec):
    with pytest.raises(UnauthorizedAccessError, match="Invalid token"):
        get_current_user_id("not.a.token", token_codec)


def test_refresh_token_is_refused(token_issuer, token_codec):
    token = token_issuer.issue_refresh_token(create_fake_user())

    with pytest.raises(UnauthorizedAccessError, match="Access token required"):
        get_current_user_id(token, token_codec)
