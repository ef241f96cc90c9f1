from __future__ import annotations

from typing import Optional

from callscreen.core.errors import StoreUnavailable
from callscreen.core.provider import StoreProvider
from callscreen.core.settings_store import ENABLE_WHITELIST, SettingsStore


class FakeSettingsBackend:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.reads = 0
        self.fail_writes = False
        self.fail_reads = False

    def get_setting(self, name: str) -> Optional[str]:
        self.reads += 1
        if self.fail_reads:
            raise StoreUnavailable("read failed")
        return self.values.get(name)

    def set_setting(self, name: str, value: str) -> bool:
        if self.fail_writes:
            raise StoreUnavailable("write failed")
        self.values[name] = value
        return True


def _settings(backend: FakeSettingsBackend) -> SettingsStore:
    return SettingsStore(StoreProvider(lambda: backend))


def test_get_boolean_defaults_to_false() -> None:
    settings = _settings(FakeSettingsBackend())
    assert not settings.get_boolean(ENABLE_WHITELIST)


def test_only_canonical_true_string_is_true() -> None:
    backend = FakeSettingsBackend()
    settings = _settings(backend)

    backend.values[ENABLE_WHITELIST] = "true"
    assert not settings.get_boolean(ENABLE_WHITELIST)

    settings.clear()
    backend.values[ENABLE_WHITELIST] = "TRUE"
    assert settings.get_boolean(ENABLE_WHITELIST)


def test_set_boolean_uses_canonical_encoding() -> None:
    backend = FakeSettingsBackend()
    settings = _settings(backend)

    assert settings.set_boolean(ENABLE_WHITELIST, True)
    assert backend.values[ENABLE_WHITELIST] == "TRUE"
    assert settings.set_boolean(ENABLE_WHITELIST, False)
    assert backend.values[ENABLE_WHITELIST] == "FALSE"
    assert not settings.get_boolean(ENABLE_WHITELIST)


def test_reads_are_cached_after_first_hit() -> None:
    backend = FakeSettingsBackend()
    backend.values["name"] = "value"
    settings = _settings(backend)

    assert settings.get("name") == "value"
    assert settings.get("name") == "value"
    assert backend.reads == 1


def test_missing_values_are_not_cached() -> None:
    backend = FakeSettingsBackend()
    settings = _settings(backend)

    assert settings.get("name") is None
    backend.values["name"] = "later"
    assert settings.get("name") == "later"


def test_failed_write_leaves_cache_untouched() -> None:
    backend = FakeSettingsBackend()
    settings = _settings(backend)
    assert settings.set(ENABLE_WHITELIST, "FALSE")

    backend.fail_writes = True
    assert not settings.set(ENABLE_WHITELIST, "TRUE")
    assert settings.get(ENABLE_WHITELIST) == "FALSE"


def test_read_failure_returns_none() -> None:
    backend = FakeSettingsBackend()
    backend.fail_reads = True
    settings = _settings(backend)

    assert settings.get(ENABLE_WHITELIST) is None
    assert not settings.get_boolean(ENABLE_WHITELIST)


def test_unavailable_store() -> None:
    def factory():
        raise StoreUnavailable("no database")

    settings = SettingsStore(StoreProvider(factory))
    assert settings.get(ENABLE_WHITELIST) is None
    assert not settings.set(ENABLE_WHITELIST, "TRUE")
