"""SQLite rule store adapter.

Implements the core RuleStorePort using a simple SQLite database.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator, List, Optional, Tuple

from callscreen.core import permissions
from callscreen.core.errors import CapabilityDenied, StoreUnavailable
from callscreen.core.models import Contact, ContactNumber, ContactType, JournalRecord, MatchKind
from callscreen.core.numbers import normalize
from callscreen.core.permissions import PermissionCache

LOGGER = logging.getLogger(__name__)

# The stored number is the pattern; the bound :number is the incoming call.
# Comparison is exact and case-sensitive.
_SELECT_NUMBERS_BY_NUMBER = f"""
    SELECT id, number, type, contact_id
    FROM contact_number
    WHERE (type = {MatchKind.EQUALS.value} AND number = :number)
       OR (type = {MatchKind.STARTS_WITH.value}
           AND substr(:number, 1, length(number)) = number)
       OR (type = {MatchKind.ENDS_WITH.value}
           AND length(:number) >= length(number)
           AND substr(:number, length(:number) - length(number) + 1) = number)
       OR (type = {MatchKind.CONTAINS.value} AND instr(:number, number) > 0)
    ORDER BY id
"""


class SQLiteRuleStore:
    """Thin SQLite wrapper that satisfies the RuleStorePort contract.

    Every public method raises StoreUnavailable when SQLite fails, so callers
    never mistake a storage fault for "no rule matched".
    """

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        # Foreign keys are per connection; the cascade delete depends on it.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
            try:
                with conn:
                    yield conn
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"SQLite store at {self._db_path} failed: {exc}") from exc

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - contact: named rule owners with their list type
        - contact_number: number patterns with a match kind, owned by a contact
        - settings: name/value pairs
        - journal: append-only log of terminated calls
        """

        with self._transaction() as conn:
            # Fields:
            # - id: auto-assigned primary key
            # - name: display name
            # - type: ContactType value (0 unclassified, 2 white list)
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS contact (
                    id INTEGER PRIMARY KEY NOT NULL,
                    name TEXT NOT NULL,
                    type INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            # Fields:
            # - number: normalized pattern
            # - type: MatchKind value
            # - contact_id: owner, rows go away with the contact
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS contact_number (
                    id INTEGER PRIMARY KEY NOT NULL,
                    number TEXT NOT NULL,
                    type INTEGER NOT NULL,
                    contact_id INTEGER NOT NULL,
                    FOREIGN KEY(contact_id) REFERENCES contact(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS contact_number_contact_id ON contact_number(contact_id)"
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    id INTEGER PRIMARY KEY NOT NULL,
                    name TEXT NOT NULL UNIQUE,
                    value TEXT
                )
                """
            )
            # Fields:
            # - time: UTC timestamp of the terminated call
            # - caller: contact name, "Private number" or the number itself
            # - number: normalized number, NULL for private callers
            # - text: screening reason
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS journal (
                    id INTEGER PRIMARY KEY NOT NULL,
                    time TIMESTAMP NOT NULL,
                    caller TEXT NOT NULL,
                    number TEXT,
                    text TEXT
                )
                """
            )

    # Numbers

    def find_numbers_by_number(self, number: str) -> List[ContactNumber]:
        """Return every stored number pattern matched by the incoming number."""

        with self._transaction() as conn:
            rows = conn.execute(_SELECT_NUMBERS_BY_NUMBER, {"number": number}).fetchall()
        return [_number_from_row(row) for row in rows]

    def add_number(
        self, contact_id: int, number: str, match_kind: MatchKind = MatchKind.EQUALS
    ) -> ContactNumber:
        """Store a normalized number pattern for an existing contact."""

        normalized = normalize(number)
        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO contact_number (number, type, contact_id) VALUES (?, ?, ?)",
                (normalized, int(match_kind), contact_id),
            )
            number_id = cur.lastrowid
        return ContactNumber(
            id=number_id, number=normalized, match_kind=MatchKind(match_kind), contact_id=contact_id
        )

    def delete_number(self, number_id: int) -> bool:
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM contact_number WHERE id = ?", (number_id,))
            return cur.rowcount > 0

    # Contacts

    def get_contact_by_id(self, contact_id: int, include_numbers: bool = True) -> Optional[Contact]:
        """Return a contact with its numbers ordered by number, if it exists."""

        with self._transaction() as conn:
            return self._load_contact(conn, contact_id, include_numbers)

    def find_contacts_by_number(self, number: str, include_numbers: bool) -> List[Contact]:
        """Return the owning contact of every matching number.

        A contact matched through two of its numbers is returned twice.
        """

        with self._transaction() as conn:
            rows = conn.execute(_SELECT_NUMBERS_BY_NUMBER, {"number": number}).fetchall()
            contacts: List[Contact] = []
            for row in rows:
                contact = self._load_contact(conn, row["contact_id"], include_numbers)
                if contact is not None:
                    contacts.append(contact)
        return contacts

    def add_contact(
        self,
        name: str,
        contact_type: ContactType = ContactType.UNCLASSIFIED,
        numbers: Iterable[Tuple[str, MatchKind]] = (),
    ) -> Contact:
        """Create a contact together with its number patterns in one transaction."""

        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO contact (name, type) VALUES (?, ?)",
                (name, int(contact_type)),
            )
            contact_id = cur.lastrowid
            for number, match_kind in numbers:
                conn.execute(
                    "INSERT INTO contact_number (number, type, contact_id) VALUES (?, ?, ?)",
                    (normalize(number), int(match_kind), contact_id),
                )
            contact = self._load_contact(conn, contact_id, include_numbers=True)
        LOGGER.info("Added contact %s with %s number(s)", contact.name, len(contact.numbers))
        return contact

    def set_contact_type(self, contact_id: int, contact_type: ContactType) -> bool:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE contact SET type = ? WHERE id = ?",
                (int(contact_type), contact_id),
            )
            return cur.rowcount > 0

    def delete_contact(self, contact_id: int) -> bool:
        """Delete a contact; its numbers are removed by the cascade."""

        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM contact WHERE id = ?", (contact_id,))
            return cur.rowcount > 0

    def list_contacts(
        self, contact_type: Optional[ContactType] = None, include_numbers: bool = False
    ) -> List[Contact]:
        with self._transaction() as conn:
            if contact_type is None:
                rows = conn.execute("SELECT id FROM contact ORDER BY name, id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT id FROM contact WHERE type = ? ORDER BY name, id",
                    (int(contact_type),),
                ).fetchall()
            contacts = [self._load_contact(conn, row["id"], include_numbers) for row in rows]
        return [contact for contact in contacts if contact is not None]

    def _load_contact(
        self, conn: sqlite3.Connection, contact_id: int, include_numbers: bool
    ) -> Optional[Contact]:
        row = conn.execute(
            "SELECT id, name, type FROM contact WHERE id = ?",
            (contact_id,),
        ).fetchone()
        if row is None:
            return None

        numbers: Tuple[ContactNumber, ...] = ()
        if include_numbers:
            number_rows = conn.execute(
                """
                SELECT id, number, type, contact_id
                FROM contact_number
                WHERE contact_id = ?
                ORDER BY number ASC
                """,
                (contact_id,),
            ).fetchall()
            numbers = tuple(_number_from_row(number_row) for number_row in number_rows)

        return Contact(
            id=int(row["id"]),
            name=row["name"],
            type=_contact_type(row["type"]),
            numbers=numbers,
        )

    # Settings

    def get_setting(self, name: str) -> Optional[str]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE name = ?",
                (name,),
            ).fetchone()
        return row["value"] if row else None

    def set_setting(self, name: str, value: str) -> bool:
        """Update a setting, inserting it when the update touched no rows."""

        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE settings SET value = ? WHERE name = ?",
                (value, name),
            )
            if cur.rowcount == 0:
                conn.execute(
                    "INSERT INTO settings (name, value) VALUES (?, ?)",
                    (name, value),
                )
        return True

    # Journal

    def add_journal_record(self, caller: str, number: Optional[str], text: Optional[str]) -> JournalRecord:
        """Append a terminated call to the journal."""

        now = datetime.now(timezone.utc)
        with self._transaction() as conn:
            cur = conn.execute(
                "INSERT INTO journal (time, caller, number, text) VALUES (?, ?, ?, ?)",
                (now.isoformat(), caller, number, text),
            )
            record_id = cur.lastrowid
        return JournalRecord(id=record_id, time=now, caller=caller, number=number, text=text)

    def list_journal(self, limit: int = 50) -> List[JournalRecord]:
        """Return the most recent journal records, newest first."""

        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, time, caller, number, text FROM journal ORDER BY time DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            JournalRecord(
                id=int(row["id"]),
                time=datetime.fromisoformat(row["time"]),
                caller=row["caller"],
                number=row["number"],
                text=row["text"],
            )
            for row in rows
        ]

    def cleanup_journal(self, ttl_days: int) -> int:
        """Delete old journal records and return the number removed."""

        cutoff = datetime.now(timezone.utc) - timedelta(days=ttl_days)
        with self._transaction() as conn:
            cur = conn.execute(
                "DELETE FROM journal WHERE time < ?",
                (cutoff.isoformat(),),
            )
            return cur.rowcount


def _number_from_row(row: sqlite3.Row) -> ContactNumber:
    return ContactNumber(
        id=int(row["id"]),
        number=row["number"],
        match_kind=MatchKind(row["type"]),
        contact_id=int(row["contact_id"]),
    )


def _contact_type(value: int) -> ContactType:
    try:
        return ContactType(value)
    except ValueError:
        # Reserved list kinds are screened like unclassified contacts.
        return ContactType.UNCLASSIFIED


def open_store(db_path: str, permission_cache: PermissionCache) -> SQLiteRuleStore:
    """Create the store and its schema, refusing without storage permission."""

    if not permission_cache.is_granted(permissions.WRITE_EXTERNAL_STORAGE):
        raise CapabilityDenied(permissions.WRITE_EXTERNAL_STORAGE)
    store = SQLiteRuleStore(db_path)
    store.init_db()
    return store
