"""SQLite-backed record store for insurance forms."""

import json
import sqlite3
import threading
from typing import Protocol

import structlog

from forms_api.forms.schemas import InsuranceForm

logger = structlog.get_logger()


class FormRepository(Protocol):
    """System of record for insurance forms, keyed by identifier."""

    def save(self, form: InsuranceForm) -> InsuranceForm:
        """Persist a form, assigning an id when it has none."""
        ...

    def find_all(self) -> list[InsuranceForm]:
        """Return every stored form in store order."""
        ...

    def find_by_id(self, form_id: int) -> InsuranceForm | None:
        """Return the form with ``form_id``, or None."""
        ...

    def delete_by_id(self, form_id: int) -> None:
        """Remove the form with ``form_id``. Missing ids are ignored."""
        ...

    def count(self) -> int:
        """Return the number of stored forms."""
        ...


class SqliteFormRepository:
    """Record store keeping each form as a JSON payload in one table.

    Thread-safe via a lock. The connection uses check_same_thread=False
    since request handlers may run on different worker threads.

    Saving a form that carries an id replaces the stored row, creating it
    when no row with that id exists yet.
    """

    def __init__(self, path: str = ":memory:") -> None:
        """Initialize repository (call initialize() before use).

        Args:
            path: SQLite database file, or ":memory:" for a throwaway store.
        """
        self._path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Open the database and create the form table if needed."""
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS insurance_form (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                payload TEXT NOT NULL
            )
            """)
        self._conn.commit()
        logger.info("form_repository_initialized", path=self._path)

    def save(self, form: InsuranceForm) -> InsuranceForm:
        """Insert a new form or replace an existing one.

        Args:
            form: Form to persist. A None id means insert.

        Returns:
            The stored form, carrying its assigned identifier.
        """
        payload = json.dumps(form.fields())

        with self._lock:
            assert self._conn is not None
            if form.id is None:
                cursor = self._conn.execute(
                    "INSERT INTO insurance_form (payload) VALUES (?)",
                    (payload,),
                )
                form_id = cursor.lastrowid
                assert form_id is not None
            else:
                form_id = form.id
                self._conn.execute(
                    """
                    INSERT INTO insurance_form (id, payload) VALUES (?, ?)
                    ON CONFLICT(id) DO UPDATE SET payload = excluded.payload
                    """,
                    (form_id, payload),
                )
            self._conn.commit()

        return form.with_id(form_id)

    def find_all(self) -> list[InsuranceForm]:
        """Return all forms ordered by identifier."""
        with self._lock:
            assert self._conn is not None
            rows = self._conn.execute(
                "SELECT id, payload FROM insurance_form ORDER BY id"
            ).fetchall()

        return [_row_to_form(row) for row in rows]

    def find_by_id(self, form_id: int) -> InsuranceForm | None:
        """Look up a single form.

        Args:
            form_id: Identifier to fetch.

        Returns:
            The form if stored, None otherwise.
        """
        with self._lock:
            assert self._conn is not None
            row = self._conn.execute(
                "SELECT id, payload FROM insurance_form WHERE id = ?",
                (form_id,),
            ).fetchone()

        return _row_to_form(row) if row else None

    def delete_by_id(self, form_id: int) -> None:
        """Delete a form. Deleting an unknown id is a no-op."""
        with self._lock:
            assert self._conn is not None
            self._conn.execute("DELETE FROM insurance_form WHERE id = ?", (form_id,))
            self._conn.commit()

    def count(self) -> int:
        with self._lock:
            assert self._conn is not None
            return self._conn.execute("SELECT COUNT(*) FROM insurance_form").fetchone()[0]

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("form_repository_closed")


def _row_to_form(row: tuple[int, str]) -> InsuranceForm:
    form_id, payload = row
    return InsuranceForm(id=form_id, **json.loads(payload))
