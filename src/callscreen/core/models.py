"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage or platform-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, Tuple


class MatchKind(IntEnum):
    """How a stored number pattern is compared against an incoming number.

    Values are persisted in the contact_number.type column.
    """

    EQUALS = 0
    CONTAINS = 1
    STARTS_WITH = 2
    ENDS_WITH = 3


class ContactType(IntEnum):
    """List a contact belongs to. Value 1 is reserved for a black list."""

    UNCLASSIFIED = 0
    WHITE_LIST = 2


class Decision(str, Enum):
    ALLOW = "allow"
    TERMINATE = "terminate"


@dataclass(frozen=True)
class ContactNumber:
    """A single number pattern owned by a contact."""

    id: int
    number: str
    match_kind: MatchKind
    contact_id: int


@dataclass(frozen=True)
class Contact:
    """A stored contact; numbers are only populated when explicitly loaded."""

    id: int
    name: str
    type: ContactType
    numbers: Tuple[ContactNumber, ...] = ()


@dataclass(frozen=True)
class JournalRecord:
    """Persisted representation of a terminated call."""

    id: int
    time: datetime
    caller: str
    number: Optional[str]
    text: Optional[str]


@dataclass(frozen=True)
class DirectoryEntry:
    """Result of a personal directory lookup."""

    name: str
    number: str


@dataclass(frozen=True)
class CallEvent:
    """Minimal incoming call event delivered by the telephony event source."""

    raw_number: Optional[str]
    is_ringing: bool = True


@dataclass(frozen=True)
class ScreeningResult:
    """Outcome of screening one call event."""

    decision: Decision
    reason: str
    number: Optional[str] = None
    caller: Optional[str] = None
