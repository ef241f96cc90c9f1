"""Application entry point for the callscreen diagnostics CLI."""

from __future__ import annotations

import argparse
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Optional, Tuple

from art import tprint
from rich.console import Console
from rich.table import Table

from callscreen import settings
from callscreen.adapters.call_control import DryRunCallControl
from callscreen.adapters.csv_directory import CsvDirectory
from callscreen.adapters.permissions import StaticPermissions
from callscreen.adapters.sqlite_store import SQLiteRuleStore, open_store
from callscreen.core.models import CallEvent
from callscreen.core.numbers import normalize
from callscreen.core.permissions import PermissionCache
from callscreen.core.provider import StoreProvider
from callscreen.core.screening import CallScreener
from callscreen.core.settings_store import SettingsStore

NAME = "CALLSCREEN"
FONT = "small"

_PHONE_NUMBER_RE = re.compile(r"(\+?\d{3,})(\d{4})")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _NumberMaskingFormatter(logging.Formatter):
    """Masks all but the last four digits of phone numbers in log lines."""

    def __init__(self, mask_numbers: bool, fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._mask_numbers = mask_numbers

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self._mask_numbers:
            return message
        return _PHONE_NUMBER_RE.sub(lambda match: f"***{match.group(2)}", message)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _NumberMaskingFormatter(bool(config.get("mask_numbers", True)), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/callscreen.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def build_screener(
    db_path: str,
    granted_permissions,
    directory_csv_path: Optional[str] = None,
) -> Tuple[CallScreener, StoreProvider[SQLiteRuleStore], DryRunCallControl]:
    """Wire the screening core to the SQLite, CSV and dry-run adapters."""

    permission_cache = PermissionCache(StaticPermissions(granted_permissions))
    store_provider: StoreProvider[SQLiteRuleStore] = StoreProvider(
        lambda: open_store(db_path, permission_cache)
    )
    call_control = DryRunCallControl()
    screener = CallScreener(
        store_provider=store_provider,
        settings=SettingsStore(store_provider),
        permission_cache=permission_cache,
        directory=CsvDirectory(directory_csv_path),
        call_control=call_control,
    )
    return screener, store_provider, call_control


def _require_store(store_provider: StoreProvider[SQLiteRuleStore]) -> SQLiteRuleStore:
    store = store_provider.get()
    if store is None:
        raise RuntimeError(f"Rule store is unavailable: {store_provider.error}")
    return store


def _init(store_provider: StoreProvider[SQLiteRuleStore], console: Console) -> None:
    store = _require_store(store_provider)
    removed = store.cleanup_journal(settings.JOURNAL_TTL_DAYS)
    logging.getLogger(__name__).info("Journal cleanup removed %s records", removed)
    console.print(f"Database ready at {settings.DB_PATH}")


def _screen(screener: CallScreener, args: argparse.Namespace, console: Console) -> None:
    raw_number = None if args.private else args.number
    result = screener.screen(CallEvent(raw_number=raw_number, is_ringing=not args.not_ringing))
    console.print(
        f"{result.decision.value.upper()} ({result.reason})"
        f" number={result.number or '-'} caller={result.caller or '-'}"
    )


def _lookup(store_provider: StoreProvider[SQLiteRuleStore], number: str, console: Console) -> None:
    store = _require_store(store_provider)
    contacts = store.find_contacts_by_number(normalize(number), include_numbers=True)
    if not contacts:
        console.print("No rules match this number.")
        return

    table = Table(title=f"Rules matching {normalize(number)}")
    table.add_column("id", justify="right")
    table.add_column("name")
    table.add_column("list")
    table.add_column("numbers")
    for contact in contacts:
        numbers = ", ".join(f"{item.number} ({item.match_kind.name.lower()})" for item in contact.numbers)
        table.add_row(str(contact.id), contact.name, contact.type.name.lower(), numbers)
    console.print(table)


def _journal(store_provider: StoreProvider[SQLiteRuleStore], limit: int, console: Console) -> None:
    store = _require_store(store_provider)
    records = store.list_journal(limit)
    if not records:
        console.print("No terminated calls recorded.")
        return

    table = Table(title="Terminated calls")
    table.add_column("time")
    table.add_column("caller")
    table.add_column("number")
    table.add_column("reason")
    for record in records:
        table.add_row(
            record.time.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            record.caller,
            record.number or "",
            record.text or "",
        )
    console.print(table)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="callscreen")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init", help="Create the database and purge old journal records")

    screen_parser = subparsers.add_parser("screen", help="Dry-run the screening decision for a number")
    screen_parser.add_argument("number", nargs="?", default="")
    screen_parser.add_argument("--private", action="store_true", help="Simulate a private caller")
    screen_parser.add_argument("--not-ringing", action="store_true", help="Simulate a non-ringing call state")

    lookup_parser = subparsers.add_parser("lookup", help="Show stored rules matching a number")
    lookup_parser.add_argument("number")

    journal_parser = subparsers.add_parser("journal", help="Show recently terminated calls")
    journal_parser.add_argument("--limit", type=int, default=20)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return

    _print_banner()
    _configure_logging()
    console = Console()

    screener, store_provider, _ = build_screener(
        settings.DB_PATH,
        settings.GRANTED_PERMISSIONS,
        settings.DIRECTORY_CSV_PATH,
    )

    if args.command == "init":
        _init(store_provider, console)
    elif args.command == "screen":
        _screen(screener, args, console)
    elif args.command == "lookup":
        _lookup(store_provider, args.number, console)
    elif args.command == "journal":
        _journal(store_provider, args.limit, console)


if __name__ == "__main__":
    main()
