from __future__ import annotations

import threading

from callscreen.adapters.permissions import StaticPermissions
from callscreen.core import permissions
from callscreen.core.errors import CapabilityDenied
from callscreen.core.permissions import PermissionCache
from callscreen.core.provider import StoreProvider


def test_provider_builds_instance_once() -> None:
    calls: list[int] = []

    def factory() -> object:
        calls.append(1)
        return object()

    provider = StoreProvider(factory)
    first = provider.get()
    assert first is not None
    assert provider.get() is first
    assert len(calls) == 1


def test_provider_remembers_failure_without_retrying() -> None:
    calls: list[int] = []

    def factory() -> object:
        calls.append(1)
        raise CapabilityDenied(permissions.WRITE_EXTERNAL_STORAGE)

    provider = StoreProvider(factory)
    assert provider.get() is None
    assert provider.get() is None
    assert len(calls) == 1
    assert isinstance(provider.error, CapabilityDenied)

    provider.reset()
    assert provider.get() is None
    assert len(calls) == 2


def test_provider_is_safe_under_concurrent_first_use() -> None:
    calls: list[int] = []
    barrier = threading.Barrier(8)

    def factory() -> object:
        calls.append(1)
        return object()

    provider = StoreProvider(factory)
    results: list[object] = []

    def worker() -> None:
        barrier.wait()
        results.append(provider.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len({id(item) for item in results}) == 1


def test_permission_cache_keeps_first_answer() -> None:
    granted = {permissions.CALL_PHONE}
    cache = PermissionCache(lambda name: name in granted)

    assert cache.is_granted(permissions.CALL_PHONE)
    assert not cache.is_granted(permissions.READ_CONTACTS)

    # Revocation is not observed until the cache is cleared.
    granted.clear()
    assert cache.is_granted(permissions.CALL_PHONE)
    cache.clear()
    assert not cache.is_granted(permissions.CALL_PHONE)


def test_permission_checker_failure_counts_as_denied() -> None:
    answers = iter([RuntimeError("platform error"), True])

    def checker(name: str) -> bool:
        answer = next(answers)
        if isinstance(answer, Exception):
            raise answer
        return answer

    cache = PermissionCache(checker)
    assert not cache.is_granted(permissions.READ_CONTACTS)
    assert cache.is_granted(permissions.READ_CONTACTS)


def test_static_permissions() -> None:
    checker = StaticPermissions([permissions.READ_CONTACTS])
    assert checker(permissions.READ_CONTACTS)
    assert not checker(permissions.CALL_PHONE)
