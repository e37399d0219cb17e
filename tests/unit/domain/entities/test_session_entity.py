import uuid
from datetime import datetime, timedelta, timezone

import pytest

from tasktracker.domain.entities.session import Session

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make(expires_at, is_active=True) -> Session:
    return Session(
        user_id=uuid.uuid4(),
        refresh_token="tok",
        expires_at=expires_at,
        is_active=is_active,
    )


@pytest.mark.parametrize(
    "expires_at, is_active, valid",
    [
        (NOW + timedelta(seconds=1), True, True),
        (NOW, True, False),
        (NOW - timedelta(days=1), True, False),
        (NOW + timedelta(days=1), False, False),
    ],
)
def test_is_valid(expires_at, is_active, valid):
    assert make(expires_at, is_active).is_valid(NOW) is valid


def test_naive_expiry_is_treated_as_utc():
    session = make((NOW + timedelta(minutes=1)).replace(tzinfo=None))
    assert session.is_expired(NOW) is False
    assert session.is_expired(NOW + timedelta(minutes=2)) is True


def test_defaults():
    session = make(NOW)
    assert isinstance(session.id, uuid.UUID)
    assert session.created_at is not None
    assert session.last_used_at is None
