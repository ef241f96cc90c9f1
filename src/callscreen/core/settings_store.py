"""Persisted settings with a write-through process cache."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from callscreen.core.errors import StoreUnavailable
from callscreen.core.ports import RuleStorePort
from callscreen.core.provider import StoreProvider

LOGGER = logging.getLogger(__name__)

ENABLE_WHITELIST = "ENABLE_WHITELIST"

TRUE = "TRUE"
FALSE = "FALSE"


class SettingsStore:
    """Key/value settings backed by the rule store.

    Reads are cached lazily; writes go to the store first and update the cache
    only when the store confirms the write.
    """

    def __init__(self, store_provider: StoreProvider[RuleStorePort]) -> None:
        self._store_provider = store_provider
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            value = self._cache.get(name)
        if value is not None:
            return value

        store = self._store_provider.get()
        if store is None:
            return None
        try:
            value = store.get_setting(name)
        except StoreUnavailable:
            LOGGER.exception("Failed to read setting %s", name)
            return None

        if value is not None:
            with self._lock:
                self._cache[name] = value
        return value

    def set(self, name: str, value: str) -> bool:
        store = self._store_provider.get()
        if store is None:
            return False
        try:
            saved = store.set_setting(name, value)
        except StoreUnavailable:
            LOGGER.exception("Failed to write setting %s", name)
            return False

        if saved:
            with self._lock:
                self._cache[name] = value
        return saved

    def get_boolean(self, name: str) -> bool:
        return self.get(name) == TRUE

    def set_boolean(self, name: str, value: bool) -> bool:
        return self.set(name, TRUE if value else FALSE)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
