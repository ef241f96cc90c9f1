"""Static configuration for callscreen.

Deployment settings (database location, directory export, granted
permissions, logging) live in a single JSON file for quick edits without
touching Python. Screening settings such as ENABLE_WHITELIST are persisted in
the database instead.
"""

import json
import os

from dotenv import load_dotenv

from callscreen.core.permissions import ALL_PERMISSIONS

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

load_dotenv()

# config.json is optional; every key has a default.
CONFIG_PATH = os.getenv("CALLSCREEN_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
_database = _CONFIG.get("database", {})
DB_PATH = _resolve_path(os.getenv("CALLSCREEN_DB") or _database.get("path", "callscreen.db"))

# CSV export of the personal directory, consulted in whitelist mode.
_directory = _CONFIG.get("directory", {})
DIRECTORY_CSV_PATH = _directory.get("csv_path")
if DIRECTORY_CSV_PATH:
    DIRECTORY_CSV_PATH = _resolve_path(DIRECTORY_CSV_PATH)

# Permissions the platform has granted to the process.
_permissions = _CONFIG.get("permissions", {})
GRANTED_PERMISSIONS = frozenset(_permissions.get("granted", sorted(ALL_PERMISSIONS)))

# Cleanup horizon for terminated call records.
_journal = _CONFIG.get("journal", {})
JOURNAL_TTL_DAYS = int(_journal.get("ttl_days", 30))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
