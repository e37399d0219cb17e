"""Dependency injection for the authentication services.

Process-wide singletons (the token codec, the token issuer, the password
hasher and the in-memory store) are built once and cached. Repositories are
built per request on top of either a fresh ``AsyncSession`` or the shared
in-memory store, depending on ``USE_MEMORY_STORE``.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, AsyncIterator

from fastapi import Depends

from tasktracker.core.config.settings import settings
from tasktracker.domain.interfaces.repositories import ISessionRepository, IUserRepository
from tasktracker.domain.interfaces.services import ICredentialVerifier
from tasktracker.domain.services.auth.token import TokenIssuer
from tasktracker.domain.services.auth.token_codec import TokenCodec
from tasktracker.domain.services.authentication.gateway import AuthenticationGateway
from tasktracker.infrastructure.database.async_db import get_async_db
from tasktracker.infrastructure.repositories.memory import (
    InMemorySessionRepository,
    InMemoryStore,
    InMemoryUserRepository,
)
from tasktracker.infrastructure.repositories.session_repository import SessionRepository
from tasktracker.infrastructure.repositories.user_repository import UserRepository
from tasktracker.infrastructure.services.authentication.password_hasher import PasswordHasher

# ---------------------------------------------------------------------------
# Process-wide singletons
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """The signing key is read here, once, and held for the life of the process."""
    return TokenCodec(
        secret_key=settings.JWT_SECRET_KEY.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
    )


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        codec=get_token_codec(),
        access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
        refresh_ttl=timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS),
    )


@lru_cache(maxsize=1)
def get_credential_verifier() -> ICredentialVerifier:
    return PasswordHasher(work_factor=settings.BCRYPT_WORK_FACTOR)


@lru_cache(maxsize=1)
def get_memory_store() -> InMemoryStore:
    return InMemoryStore()


# ---------------------------------------------------------------------------
# Per-request dependencies
# ---------------------------------------------------------------------------


@dataclass
class Repositories:
    users: IUserRepository
    sessions: ISessionRepository


async def get_repositories() -> AsyncIterator[Repositories]:
    """Yields the repositories for one request."""
    if settings.USE_MEMORY_STORE:
        store = get_memory_store()
        yield Repositories(InMemoryUserRepository(store), InMemorySessionRepository(store))
        return
    async with get_async_db() as db:
        yield Repositories(UserRepository(db), SessionRepository(db))


RepositoriesDep = Annotated[Repositories, Depends(get_repositories)]
TokenCodecDep = Annotated[TokenCodec, Depends(get_token_codec)]
TokenIssuerDep = Annotated[TokenIssuer, Depends(get_token_issuer)]
CredentialVerifierDep = Annotated[ICredentialVerifier, Depends(get_credential_verifier)]


def get_authentication_gateway(
    repositories: RepositoriesDep,
    token_codec: TokenCodecDep,
    token_issuer: TokenIssuerDep,
    credential_verifier: CredentialVerifierDep,
) -> AuthenticationGateway:
    return AuthenticationGateway(
        user_repository=repositories.users,
        session_repository=repositories.sessions,
        token_issuer=token_issuer,
        token_codec=token_codec,
        credential_verifier=credential_verifier,
        last_login_debounce=timedelta(seconds=settings.LAST_LOGIN_DEBOUNCE_SECONDS),
    )


AuthGateway = Annotated[AuthenticationGateway, Depends(get_authentication_gateway)]
