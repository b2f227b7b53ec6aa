from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

import todo_store
from database import create_tables, make_engine, make_session_factory
from todo_server import app, get_claude, get_db, get_http_session

from .fakes import FakeClaudeClient, FakeHTTPSession

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    """SQLite database with the todos table provisioned."""
    eng = make_engine(f"sqlite:///{tmp_path / 'todos.sqlite3'}")
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def bare_engine(tmp_path: Path) -> Iterator[Engine]:
    """SQLite database where nobody has created the todos table."""
    eng = make_engine(f"sqlite:///{tmp_path / 'empty.sqlite3'}")
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine: Engine) -> Iterator[Session]:
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def fake_claude() -> FakeClaudeClient:
    return FakeClaudeClient()


@pytest.fixture()
def fake_http() -> FakeHTTPSession:
    return FakeHTTPSession()


@pytest.fixture()
def clock(monkeypatch: pytest.MonkeyPatch):
    """Strictly increasing timestamps, one second apart, for the store."""
    state = {"now": datetime(2025, 10, 27, 9, 0, tzinfo=timezone.utc)}

    def tick() -> datetime:
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(todo_store, "utcnow", tick)
    return state


def _client_for(engine: Engine, claude, http) -> TestClient:
    factory = make_session_factory(engine)

    def _get_db() -> Iterator[Session]:
        session = factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_claude] = lambda: claude
    app.dependency_overrides[get_http_session] = lambda: http
    return TestClient(app)


@pytest.fixture()
def client(engine: Engine, fake_claude: FakeClaudeClient, fake_http: FakeHTTPSession) -> Iterator[TestClient]:
    yield _client_for(engine, fake_claude, fake_http)
    app.dependency_overrides.clear()


@pytest.fixture()
def unprovisioned_client(
    bare_engine: Engine, fake_claude: FakeClaudeClient, fake_http: FakeHTTPSession
) -> Iterator[TestClient]:
    yield _client_for(bare_engine, fake_claude, fake_http)
    app.dependency_overrides.clear()
