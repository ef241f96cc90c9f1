"""Initialize-once shared store handle.

Construction may legitimately fail (a missing permission, an unreadable
database). A failure is remembered so callers get None immediately instead of
retrying on every incoming call.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

from callscreen.core.errors import CallScreenError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class StoreProvider(Generic[T]):
    """Runs the factory at most once and hands out the shared instance."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._instance: Optional[T] = None
        self._initialized = False
        self._error: Optional[CallScreenError] = None

    @property
    def error(self) -> Optional[CallScreenError]:
        """The failure raised by the factory, if initialization failed."""

        return self._error

    def get(self) -> Optional[T]:
        if self._initialized:
            return self._instance

        with self._lock:
            if not self._initialized:
                try:
                    self._instance = self._factory()
                except CallScreenError as exc:
                    self._error = exc
                    LOGGER.warning("Store is unavailable: %s", exc)
                self._initialized = True
        return self._instance

    def reset(self) -> None:
        with self._lock:
            self._instance = None
            self._error = None
            self._initialized = False
