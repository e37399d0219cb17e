import os

# Configuration must be in place before the package reads its settings.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-secret-that-is-long-enough-for-hs512-0123456789abcdefgh")
os.environ.setdefault("USE_MEMORY_STORE", "true")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("SESSION_CLEANUP_INTERVAL_SECONDS", "0")
os.environ.setdefault("LOG_JSON", "false")

from datetime import timedelta

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from tasktracker.domain.services.auth.token import TokenIssuer
from tasktracker.domain.services.auth.token_codec import TokenCodec
from tasktracker.domain.services.authentication.gateway import AuthenticationGateway
from tasktracker.infrastructure.dependency_injection.auth_dependencies import get_memory_store
from tasktracker.infrastructure.repositories.memory import (
    InMemorySessionRepository,
    InMemoryStore,
    InMemoryUserRepository,
)
from tasktracker.infrastructure.services.authentication.password_hasher import PasswordHasher
from tests.factories.token import TEST_AUDIENCE, TEST_ISSUER, TEST_SECRET

ACCESS_TTL = timedelta(minutes=15)
REFRESH_TTL = timedelta(days=7)


@pytest.fixture
def token_codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, "HS512", issuer=TEST_ISSUER, audience=TEST_AUDIENCE)


@pytest.fixture
def token_issuer(token_codec) -> TokenIssuer:
    return TokenIssuer(token_codec, access_ttl=ACCESS_TTL, refresh_ttl=REFRESH_TTL)


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_repository(memory_store) -> InMemoryUserRepository:
    return InMemoryUserRepository(memory_store)


@pytest.fixture
def session_repository(memory_store) -> InMemorySessionRepository:
    return InMemorySessionRepository(memory_store)


@pytest.fixture(scope="session")
def password_hasher() -> PasswordHasher:
    return PasswordHasher(work_factor=4)


@pytest.fixture
def gateway(user_repository, session_repository, token_issuer, token_codec, password_hasher):
    return AuthenticationGateway(
        user_repository=user_repository,
        session_repository=session_repository,
        token_issuer=token_issuer,
        token_codec=token_codec,
        credential_verifier=password_hasher,
    )


@pytest_asyncio.fixture
async def registered_user(gateway, user_repository):
    """An active user 'alice' with password 'P@ss1'."""
    await gateway.register("alice", "alice@x.com", "Alice", "Liddell", "P@ss1")
    return await user_repository.get_by_username("alice")


@pytest.fixture
def client():
    from tasktracker.main import app

    get_memory_store().reset()
    with TestClient(app) as test_client:
        yield test_client
    get_memory_store().reset()
