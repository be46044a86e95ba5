# tests/conftest.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskmaster.core.config import Settings
from taskmaster.main import create_app

from .helpers import API_KEY


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings on a throwaway SQLite file; DATABASE_URL is forced off."""
    return Settings(
        DATABASE_URL=None,
        SQLITE_PATH=str(tmp_path / "tasks.db"),
        VERCEL=False,
        AI_API_KEY=API_KEY,
        CONFIGURE_LOGGING=False,
        INIT_DB_ON_REQUEST_PATHS=[],
        ENFORCE_TASK_LIFECYCLE=False,
        ENFORCE_TIME_LOG_SEQUENCE=False,
    )


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def master(client) -> dict:
    res = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert res.status_code == 200
    return res.json()
