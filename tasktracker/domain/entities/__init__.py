"""Export the persisted domain entities.

User and Session are plain SQLModel rows with no ORM relationships; services
reach them only through the repository interfaces.
"""

from .session import Session
from .user import User

__all__ = ["User", "Session"]
