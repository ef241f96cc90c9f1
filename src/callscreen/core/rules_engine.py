"""Number rule matching logic (core domain).

The SQLite store evaluates the same predicates in SQL; these helpers keep the
semantics in one readable place and serve in-memory stores and diagnostics.
"""

from __future__ import annotations

from typing import Iterable, List

from callscreen.core.models import ContactNumber, MatchKind


def number_matches(match_kind: MatchKind, pattern: str, number: str) -> bool:
    """Return True if the incoming number satisfies a stored pattern.

    The stored pattern is the prefix, suffix or substring; the incoming number
    is the value being tested.
    """

    if match_kind == MatchKind.EQUALS:
        return number == pattern
    if match_kind == MatchKind.STARTS_WITH:
        return number.startswith(pattern)
    if match_kind == MatchKind.ENDS_WITH:
        return number.endswith(pattern)
    if match_kind == MatchKind.CONTAINS:
        return pattern in number
    return False


def match_numbers(number: str, numbers: Iterable[ContactNumber]) -> List[ContactNumber]:
    """Return all stored numbers that match the incoming number, in input order."""

    return [item for item in numbers if number_matches(item.match_kind, item.number, number)]
