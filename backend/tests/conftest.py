"""
Pytest configuration and fixtures for testing the Jigsaw API.

This module provides:
- Test client fixture for the FastAPI app
- A fresh SQLite node store per test, wired in through dependency_overrides
- Helpers to seed rows directly into the nodes table
"""
import os
import sqlite3
import tempfile
from typing import Callable, Iterable, Tuple

import pytest
from fastapi.testclient import TestClient

# Point config at a throwaway database before anything imports it
_TEST_DB_DIR = tempfile.mkdtemp(prefix="jigsaw-tests-")
os.environ["DATABASE_BACKEND"] = "sqlite"
os.environ["SQLITE_DB_PATH"] = os.path.join(_TEST_DB_DIR, "default.db")
os.environ["CLIENT_DIST_DIR"] = ""
os.environ["ENABLE_HTTPS_REDIRECT"] = "false"

# Import app after env vars are set
from main import app  # noqa: E402
from db_sqlite import init_sqlite_db  # noqa: E402
from node_store import get_node_repository  # noqa: E402
from node_store.sqlite import SQLiteNodeRepository  # noqa: E402


@pytest.fixture
def test_app():
    """The app from main.py; dependencies are overridden per test below."""
    return app


@pytest.fixture
def client(test_app):
    """
    Create a test client for the FastAPI app.

    raise_server_exceptions=False so that exceptions are caught by the
    exception handlers and returned as responses (matching production).
    """
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture
def node_db_path(tmp_path) -> str:
    """Path to an empty, initialised SQLite node store."""
    path = str(tmp_path / "nodes.db")
    init_sqlite_db(path)
    return path


@pytest.fixture(autouse=True)
def override_node_repository(test_app, node_db_path):
    """
    Route every request to the per-test SQLite file.

    Mirrors get_node_repository: one repository per request, rolled back on
    error and closed afterwards.
    """
    def get_test_repository():
        with SQLiteNodeRepository(node_db_path) as repo:
            yield repo

    test_app.dependency_overrides[get_node_repository] = get_test_repository

    yield

    test_app.dependency_overrides.pop(get_node_repository, None)


@pytest.fixture
def repo(node_db_path):
    """A repository on the per-test store, for direct service-level tests."""
    repository = SQLiteNodeRepository(node_db_path)
    yield repository
    repository.close()


@pytest.fixture
def seed_rows(node_db_path) -> Callable[[Iterable[Tuple[str, str, str]]], None]:
    """
    Insert raw (id, parent_id, node_id) rows, committed.

    Rows must be listed parents-first because of the node_id foreign key.
    """
    def _seed(rows):
        conn = sqlite3.connect(node_db_path)
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            conn.executemany("INSERT INTO nodes (id, parent_id, node_id) VALUES (?, ?, ?)", list(rows))
            conn.commit()
        finally:
            conn.close()

    return _seed


@pytest.fixture
def stored_count(node_db_path) -> Callable[[], int]:
    """Count rows in the per-test store through a separate connection."""
    def _count() -> int:
        conn = sqlite3.connect(node_db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM nodes").fetchone()[0]
        finally:
            conn.close()

    return _count
