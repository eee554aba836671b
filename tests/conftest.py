"""Shared pytest fixtures for the Dinnerboard test suite."""

from __future__ import annotations

from datetime import datetime
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dinnerboard.config import get_settings
from dinnerboard.db.repository import Database
from dinnerboard.server.app import create_app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_dinnerboard.db"
    monkeypatch.setenv("DINNERBOARD_DATABASE_PATH", str(db_path))
    for key in ("DINNERBOARD_API_TOKEN", "DINNERBOARD_WEBHOOK_SECRET"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def database(tmp_path) -> Generator[Database, None, None]:
    """Open a throwaway database for repository and planning tests."""

    with Database(tmp_path / "planning.db") as handle:
        yield handle


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()
    application.state.database.close()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def now() -> datetime:
    """Fixed clock inside the 2024-06-03..2024-06-09 window."""

    return datetime(2024, 6, 3, 9, 30)
