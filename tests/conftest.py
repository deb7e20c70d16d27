# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.main import app, set_store
from tasklist.store import TaskStore


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[TaskStore]:
    """Real SQLite-backed store on a per-test file."""
    s = TaskStore(f"sqlite:///{tmp_path / 'tasks.sqlite3'}")
    yield s
    s.close()


@pytest.fixture()
def api(store: TaskStore) -> Iterator[TestClient]:
    """HTTP client bound to the app with ``store`` installed before startup."""
    set_store(store)
    try:
        with TestClient(app) as client:
            yield client
    finally:
        set_store(None)


@pytest.fixture()
def call(api: TestClient):
    """POST one envelope to /call and return (status, body)."""

    def _call(op: str, args: object = None) -> tuple[int, dict]:
        envelope: dict = {"op": op}
        if args is not None:
            envelope["args"] = args
        response = api.post("/call", json=envelope)
        return response.status_code, response.json()

    return _call
