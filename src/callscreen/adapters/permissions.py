"""Permission checker backed by a configured set of granted names."""

from __future__ import annotations

from typing import Iterable


class StaticPermissions:
    """PermissionChecker that grants exactly the configured permissions."""

    def __init__(self, granted: Iterable[str]) -> None:
        self._granted = frozenset(granted)

    def __call__(self, permission: str) -> bool:
        return permission in self._granted
