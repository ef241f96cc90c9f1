"""Phone number helpers (core domain)."""

from __future__ import annotations

import re
from typing import Optional

# Only detects whether a number is digital rather than symbolic; this is not a
# full phone number grammar.
_DIGITAL_NUMBER_RE = re.compile(r"[+]?[0-9\-() ]+")
_SEPARATORS_RE = re.compile(r"[\-() ]")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

PRIVATE_NUMBER_CALLER = "Private number"


def normalize(raw: str) -> str:
    """Return a number suitable for rule comparison.

    Digital numbers lose their brackets, dashes and spaces. Symbolic caller ids
    (anything with letters or other symbols) are only trimmed.
    """

    number = raw.strip()
    if _DIGITAL_NUMBER_RE.fullmatch(number):
        number = _SEPARATORS_RE.sub("", number)
    return number


def is_private(raw: Optional[str]) -> bool:
    """Return True when the caller id is absent, empty or a negative integer.

    Non-numeric caller ids are treated as real identifiers, not private ones.
    """

    if raw is None:
        return True
    number = raw.strip()
    if not number:
        return True
    if not _INTEGER_RE.fullmatch(number):
        return False
    return int(number) < 0
