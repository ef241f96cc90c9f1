"""Personal directory adapter backed by a CSV contacts export.

The export needs `name` and `number` columns. Numbers are normalized the same
way incoming calls are, so lookups compare like with like.
"""

from __future__ import annotations

import csv
import logging
import os
from typing import Dict, Optional

from callscreen.core.models import DirectoryEntry
from callscreen.core.numbers import normalize

LOGGER = logging.getLogger(__name__)


class CsvDirectory:
    """Read-only DirectoryPort over a CSV file loaded once at construction."""

    def __init__(self, path: Optional[str]) -> None:
        self._entries: Dict[str, DirectoryEntry] = {}
        if path:
            self._load(path)

    def _load(self, path: str) -> None:
        if not os.path.exists(path):
            LOGGER.warning("Directory file not found: %s", path)
            return

        with open(path, "r", encoding="utf-8", newline="") as handle:
            for row in csv.DictReader(handle):
                raw_number = (row.get("number") or "").strip()
                if not raw_number:
                    continue
                number = normalize(raw_number)
                name = (row.get("name") or "").strip() or number
                # First entry wins when the export lists a number twice.
                self._entries.setdefault(number, DirectoryEntry(name=name, number=number))
        LOGGER.info("Loaded %s directory entries from %s", len(self._entries), path)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, number: str) -> Optional[DirectoryEntry]:
        return self._entries.get(normalize(number))
