"""Permission names and the process-scoped grant cache.

Grants are cached on first check and never invalidated, so a permission
revoked while the process runs keeps its cached grant until clear() is called.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict

from callscreen.core.ports import PermissionChecker

LOGGER = logging.getLogger(__name__)

READ_PHONE_STATE = "READ_PHONE_STATE"
CALL_PHONE = "CALL_PHONE"
READ_CONTACTS = "READ_CONTACTS"
WRITE_EXTERNAL_STORAGE = "WRITE_EXTERNAL_STORAGE"

ALL_PERMISSIONS = frozenset({READ_PHONE_STATE, CALL_PHONE, READ_CONTACTS, WRITE_EXTERNAL_STORAGE})


class PermissionCache:
    """Caches the checker's answer per permission name."""

    def __init__(self, checker: PermissionChecker) -> None:
        self._checker = checker
        self._results: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def is_granted(self, permission: str) -> bool:
        with self._lock:
            cached = self._results.get(permission)
        if cached is not None:
            return cached

        try:
            granted = bool(self._checker(permission))
        except Exception:
            # Not cached, the next check asks the platform again.
            LOGGER.exception("Permission check failed for %s", permission)
            return False

        with self._lock:
            self._results.setdefault(permission, granted)
            return self._results[permission]

    def clear(self) -> None:
        with self._lock:
            self._results.clear()
