"""Concrete repository adapters: SQLAlchemy-backed and in-memory."""

from .memory import InMemorySessionRepository, InMemoryStore, InMemoryUserRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository

__all__ = [
    "InMemorySessionRepository",
    "InMemoryStore",
    "InMemoryUserRepository",
    "SessionRepository",
    "UserRepository",
]
