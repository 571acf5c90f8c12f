"""
Shared test configuration.

Every test gets its own SQLite file under ``tmp_path`` with the schema
already created, so tests never see each other's rows.
"""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from user_groups_api.app.core.config import settings  # noqa: E402
from user_groups_api.app.core.db import init_db  # noqa: E402
from user_groups_api.app.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the application at a fresh database file."""

    db_path = tmp_path / "test.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    monkeypatch.setattr(settings, "transaction_timeout", 5.0)
    init_db()
    return db_path


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def raw_db(database: Path) -> Iterator[sqlite3.Connection]:
    """A plain connection for arranging and inspecting rows behind the services."""

    conn = sqlite3.connect(database)
    conn.row_factory = sqlite3.Row
    conn.isolation_level = None
    try:
        yield conn
    finally:
        conn.close()
