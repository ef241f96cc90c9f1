from __future__ import annotations

from callscreen.core.models import ContactNumber, MatchKind
from callscreen.core.rules_engine import match_numbers, number_matches


def test_number_matches_direction_of_prefix_and_suffix() -> None:
    assert number_matches(MatchKind.STARTS_WITH, "555", "5551234")
    assert not number_matches(MatchKind.STARTS_WITH, "555", "1555")
    assert number_matches(MatchKind.ENDS_WITH, "1234", "5551234")
    assert not number_matches(MatchKind.ENDS_WITH, "5551234", "1234")


def test_number_matches_equals_and_contains() -> None:
    assert number_matches(MatchKind.EQUALS, "5551234", "5551234")
    assert not number_matches(MatchKind.EQUALS, "555123", "5551234")
    assert number_matches(MatchKind.CONTAINS, "99", "12399x")
    assert not number_matches(MatchKind.CONTAINS, "99", "123")


def test_match_numbers_keeps_input_order() -> None:
    numbers = [
        ContactNumber(id=1, number="900", match_kind=MatchKind.STARTS_WITH, contact_id=1),
        ContactNumber(id=2, number="111", match_kind=MatchKind.EQUALS, contact_id=1),
        ContactNumber(id=3, number="00", match_kind=MatchKind.CONTAINS, contact_id=2),
    ]
    matched = match_numbers("9001", numbers)
    assert [item.id for item in matched] == [1, 3]
