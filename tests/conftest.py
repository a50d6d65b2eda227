"""Pytest configuration and fixtures."""

import sqlite3
import sys
from collections.abc import Iterator
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from forms_api.app import create_app
from forms_api.config import Settings
from forms_api.forms.repository import SqliteFormRepository
from forms_api.forms.schemas import InsuranceForm
from forms_api.search.index import SearchIndex


class RecordingRepository:
    """Record store fake that remembers which operations were called."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._forms: dict[int, InsuranceForm] = {}
        self._next_id = 1

    def save(self, form: InsuranceForm) -> InsuranceForm:
        self.calls.append("save")
        form_id = form.id
        if form_id is None:
            form_id = self._next_id
            self._next_id += 1
        stored = form.with_id(form_id)
        self._forms[form_id] = stored
        return stored

    def find_all(self) -> list[InsuranceForm]:
        self.calls.append("find_all")
        return [self._forms[k] for k in sorted(self._forms)]

    def find_by_id(self, form_id: int) -> InsuranceForm | None:
        self.calls.append("find_by_id")
        return self._forms.get(form_id)

    def delete_by_id(self, form_id: int) -> None:
        self.calls.append("delete_by_id")
        self._forms.pop(form_id, None)

    def count(self) -> int:
        return len(self._forms)


class RecordingSearchIndex:
    """Search index fake that remembers which operations were called."""

    def __init__(self, fail_on_save: bool = False) -> None:
        self.calls: list[str] = []
        self.fail_on_save = fail_on_save
        self.fail_on_count = False

    def save(self, form: InsuranceForm) -> None:
        self.calls.append("save")
        if self.fail_on_save:
            raise RuntimeError("search index unavailable")

    def delete_by_id(self, form_id: int) -> None:
        self.calls.append("delete_by_id")

    def search(self, query: str) -> list[InsuranceForm]:
        self.calls.append("search")
        return []

    def count(self) -> int:
        if self.fail_on_count:
            raise sqlite3.OperationalError("database disk image is malformed")
        return 0


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        host="127.0.0.1",
        port=8080,
        debug=True,
        application_name="formsApp",
        database_path=":memory:",
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Create test client with the lifespan running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def repository() -> Iterator[SqliteFormRepository]:
    """Create an initialized in-memory record store."""
    repo = SqliteFormRepository()
    repo.initialize()
    yield repo
    repo.close()


@pytest.fixture
def search_index() -> Iterator[SearchIndex]:
    """Create an initialized search index."""
    index = SearchIndex()
    index.initialize()
    yield index
    index.close()


@pytest.fixture
def recording_repository() -> RecordingRepository:
    """Create a record store fake."""
    return RecordingRepository()


@pytest.fixture
def recording_index() -> RecordingSearchIndex:
    """Create a search index fake."""
    return RecordingSearchIndex()


@pytest.fixture
def recording_client(
    settings: Settings,
    recording_repository: RecordingRepository,
    recording_index: RecordingSearchIndex,
) -> Iterator[TestClient]:
    """Create test client wired to the recording fakes.

    Server errors come back as 500 responses instead of being re-raised.
    """
    app = create_app(
        settings, repository=recording_repository, search_index=recording_index
    )
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
