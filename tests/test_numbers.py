from __future__ import annotations

import pytest

from callscreen.core.numbers import is_private, normalize


def test_normalize_strips_separators_from_digital_numbers() -> None:
    assert normalize("+1 (555) 123-4567") == "+15551234567"
    assert normalize("  555-0100 ") == "5550100"


def test_normalize_keeps_symbolic_caller_ids() -> None:
    assert normalize("CALLER-ID") == "CALLER-ID"
    assert normalize("  Mobile Bank ") == "Mobile Bank"
    # A plus sign in the middle is not digital.
    assert normalize("1+2 3") == "1+2 3"


def test_normalize_empty_input() -> None:
    assert normalize("") == ""
    assert normalize("   ") == ""
    assert normalize("( ) -") == ""


@pytest.mark.parametrize(
    "raw",
    ["+1 (555) 123-4567", "CALLER-ID", "  42 ", "", "(0) 12", "+ 1 2", "abc 1-2"],
)
def test_normalize_is_idempotent(raw: str) -> None:
    assert normalize(normalize(raw)) == normalize(raw)


def test_is_private() -> None:
    assert is_private(None)
    assert is_private("")
    assert is_private("   ")
    assert is_private("-5")
    assert is_private(" -2 ")
    assert not is_private("12345")
    assert not is_private("+12345")
    assert not is_private("-0")


def test_is_private_treats_symbolic_ids_as_real_callers() -> None:
    assert not is_private("ABC")
    assert not is_private("+1 555 123")
    assert not is_private("1_000")
