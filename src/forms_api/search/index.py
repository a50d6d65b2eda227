"""FTS5-backed full-text search index for insurance forms."""

import json
import re
import sqlite3
import threading
from collections.abc import Iterable
from typing import Any, Protocol

import structlog

from forms_api.forms.schemas import InsuranceForm

logger = structlog.get_logger()

# FTS5 special characters that need escaping in queries
_FTS5_SPECIAL = re.compile(r"[\"*(){}[\]^~:\-+]")


class FormSearchIndex(Protocol):
    """Secondary, derived index answering free-text queries over forms."""

    def save(self, form: InsuranceForm) -> None:
        """Index or re-index a stored form."""
        ...

    def delete_by_id(self, form_id: int) -> None:
        """Drop a form from the index. Missing ids are ignored."""
        ...

    def search(self, query: str) -> list[InsuranceForm]:
        """Return forms whose indexed text matches ``query``."""
        ...

    def count(self) -> int:
        """Return the number of indexed forms."""
        ...


def _flatten(value: Any) -> list[str]:
    """Collect the searchable text of a JSON value, keys included.

    Args:
        value: Decoded JSON field value.

    Returns:
        Text fragments in document order.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        parts: list[str] = []
        for key, item in value.items():
            parts.append(str(key))
            parts.extend(_flatten(item))
        return parts
    if isinstance(value, list):
        return [part for item in value for part in _flatten(item)]
    return [str(value)]


def _sanitize_query(raw: str) -> str | None:
    """Sanitize user input for FTS5 MATCH safety.

    Strips special characters and quotes every token so FTS5 operators in
    user input are matched as plain words. Returns None if the query is
    empty after sanitization.

    Args:
        raw: Raw user query string.

    Returns:
        Sanitized FTS5 query string, or None if unusable.
    """
    query = _FTS5_SPECIAL.sub(" ", raw)
    tokens = query.split()
    if not tokens:
        return None

    if len(tokens) == 1:
        return f'"{tokens[0]}"*'

    # Multi-word: quote exact tokens, prefix-match on last for typeahead
    parts = [f'"{t}"' for t in tokens[:-1]]
    parts.append(f'"{tokens[-1]}"*')
    return " ".join(parts)


class SearchIndex:
    """In-memory SQLite FTS5 index over insurance forms.

    Holds a JSON copy of each indexed form so search results are served
    from the index alone, without a round-trip to the record store.
    Thread-safe via a lock.
    """

    def __init__(self) -> None:
        """Initialize search index (call initialize() before use)."""
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Create in-memory database and FTS5 virtual table."""
        self._conn = sqlite3.connect(":memory:", check_same_thread=False)
        self._conn.execute("""
            CREATE VIRTUAL TABLE form_fts USING fts5(
                body,
                form_id UNINDEXED,
                document UNINDEXED,
                tokenize='unicode61'
            )
            """)
        self._conn.commit()
        logger.info("search_index_initialized")

    def rebuild(self, forms: Iterable[InsuranceForm]) -> int:
        """Replace the whole index with ``forms``.

        Args:
            forms: Every form currently held by the record store.

        Returns:
            Total number of documents indexed.
        """
        count = 0
        with self._lock:
            assert self._conn is not None
            self._conn.execute("DELETE FROM form_fts")
            for form in forms:
                self._insert_document(form)
                count += 1
            self._conn.commit()

        logger.info("search_index_rebuilt", document_count=count)
        return count

    def _insert_document(self, form: InsuranceForm) -> None:
        """Insert a single form into the FTS5 table.

        Args:
            form: Persisted form; must carry an id.
        """
        assert self._conn is not None
        if form.id is None:
            raise ValueError("Cannot index a form without an id")

        fields = form.fields()
        self._conn.execute(
            "INSERT INTO form_fts (body, form_id, document) VALUES (?, ?, ?)",
            (" ".join(_flatten(fields)), form.id, json.dumps(fields)),
        )

    def save(self, form: InsuranceForm) -> None:
        """Index or re-index a single form (handles create + update)."""
        if form.id is None:
            raise ValueError("Cannot index a form without an id")

        with self._lock:
            assert self._conn is not None
            self._conn.execute("DELETE FROM form_fts WHERE form_id = ?", (form.id,))
            self._insert_document(form)
            self._conn.commit()

        logger.debug("search_document_saved", form_id=form.id)

    def delete_by_id(self, form_id: int) -> None:
        """Remove a form from the index.

        Args:
            form_id: Identifier of the form to drop.
        """
        with self._lock:
            assert self._conn is not None
            self._conn.execute("DELETE FROM form_fts WHERE form_id = ?", (form_id,))
            self._conn.commit()

        logger.debug("search_document_deleted", form_id=form_id)

    def search(self, query: str) -> list[InsuranceForm]:
        """Execute a full-text search with BM25 ranking.

        Args:
            query: Raw user search query.

        Returns:
            Matching forms, best match first. Empty if nothing matches or
            the query has no searchable words.
        """
        sanitized = _sanitize_query(query)
        if sanitized is None:
            return []

        with self._lock:
            assert self._conn is not None
            try:
                rows = self._conn.execute(
                    "SELECT form_id, document FROM form_fts "
                    "WHERE form_fts MATCH ? "
                    "ORDER BY bm25(form_fts), form_id",
                    (sanitized,),
                ).fetchall()
            except sqlite3.OperationalError:
                logger.warning("search_query_failed", query=query)
                return []

        return [
            InsuranceForm(id=int(form_id), **json.loads(document))
            for form_id, document in rows
        ]

    def count(self) -> int:
        with self._lock:
            assert self._conn is not None
            return self._conn.execute("SELECT COUNT(*) FROM form_fts").fetchone()[0]

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("search_index_closed")
