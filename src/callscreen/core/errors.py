"""Error taxonomy for the screening core.

None of these escape the screening policy; they are recovered into an ALLOW
decision plus a log entry.
"""

from __future__ import annotations

from typing import Optional


class CallScreenError(Exception):
    """Base exception for callscreen."""


class CapabilityDenied(CallScreenError):
    """A required platform permission is not granted."""

    def __init__(self, permission: str, message: Optional[str] = None) -> None:
        self.permission = permission
        super().__init__(message or f"Permission not granted: {permission}")


class StoreUnavailable(CallScreenError):
    """The persistent store could not be initialized or a query failed."""


class MalformedInput(CallScreenError):
    """The incoming number normalizes to an empty string."""


class TerminationFailed(CallScreenError):
    """The call-termination collaborator reported a failure."""
