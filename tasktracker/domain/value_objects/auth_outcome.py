"""Outcomes of the optional-authentication probe.

The probe never raises. Every path ends in one of the classes below, each
carrying a machine-checkable :class:`OutcomeStatus` and a human-readable
reason. ``OptionalAuthOutcome`` is the closed union of them; the HTTP layer
maps each class to a status code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from tasktracker.domain.value_objects.user_profile import UserProfile


class OutcomeStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Authenticated:
    profile: UserProfile
    reason: str = "authenticated"
    status: ClassVar[OutcomeStatus] = OutcomeStatus.AUTHENTICATED


@dataclass(frozen=True)
class Unauthenticated:
    reason: str
    status: ClassVar[OutcomeStatus] = OutcomeStatus.UNAUTHENTICATED


@dataclass(frozen=True)
class BadRequest:
    reason: str
    status: ClassVar[OutcomeStatus] = OutcomeStatus.BAD_REQUEST


@dataclass(frozen=True)
class NotFound:
    reason: str
    status: ClassVar[OutcomeStatus] = OutcomeStatus.NOT_FOUND


@dataclass(frozen=True)
class Error:
    reason: str
    status: ClassVar[OutcomeStatus] = OutcomeStatus.ERROR


OptionalAuthOutcome = Union[Authenticated, Unauthenticated, BadRequest, NotFound, Error]

