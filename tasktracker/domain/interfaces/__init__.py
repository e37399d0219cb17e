"""Domain interfaces for dependency inversion.

The domain services depend only on these contracts; the SQL and in-memory
adapters under ``tasktracker.infrastructure`` implement them.
"""

from .repositories import ISessionRepository, IUserRepository
from .services import ICredentialVerifier

__all__ = ["IUserRepository", "ISessionRepository", "ICredentialVerifier"]
