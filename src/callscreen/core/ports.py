"""Ports (interfaces) used by the screening core.

Ports define the minimal contracts for storage, directory and call-control
adapters so that the core can be reused with different platforms.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from callscreen.core.models import Contact, ContactNumber, DirectoryEntry, JournalRecord


class RuleStorePort(Protocol):
    """Storage operations required by the screening core."""

    def find_numbers_by_number(self, number: str) -> List[ContactNumber]:
        ...

    def find_contacts_by_number(self, number: str, include_numbers: bool) -> List[Contact]:
        ...

    def get_setting(self, name: str) -> Optional[str]:
        ...

    def set_setting(self, name: str, value: str) -> bool:
        ...

    def add_journal_record(self, caller: str, number: Optional[str], text: Optional[str]) -> JournalRecord:
        ...


class DirectoryPort(Protocol):
    """Read-only personal contacts directory."""

    def lookup(self, number: str) -> Optional[DirectoryEntry]:
        ...


class CallControlPort(Protocol):
    """Ends the currently ringing call."""

    def terminate_current_call(self) -> bool:
        ...


class PermissionChecker(Protocol):
    """Returns the platform's current grant for a permission name."""

    def __call__(self, permission: str) -> bool:
        ...
