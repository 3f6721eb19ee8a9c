from __future__ import annotations

import pytest

from adapters.json_store import JsonProjectStore
from adapters.sqlite_store import SqliteProjectStore
from core.domain.events import KeyCode, KeyEvent
from core.domain.models import (
    ApiKeyAuth,
    BasicAuth,
    BearerAuth,
    Environment,
    NoAuth,
    Project,
    Request,
)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    # AppSettings reads `.env` from the working directory.
    monkeypatch.chdir(tmp_path)
    for name in ("RURL_DATA_DIR", "RURL_STORAGE_BACKEND", "RURL_TICK_INTERVAL_MS", "RURL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteProjectStore(tmp_path / "rurl.db")
    yield store
    store.close()


@pytest.fixture
def json_store(tmp_path):
    return JsonProjectStore(tmp_path / "projects")


@pytest.fixture(params=["sqlite", "json"])
def store(request, tmp_path):
    if request.param == "json":
        yield JsonProjectStore(tmp_path / "projects")
        return
    sqlite = SqliteProjectStore(tmp_path / "rurl.db")
    yield sqlite
    sqlite.close()


@pytest.fixture
def sample_project() -> Project:
    return Project(
        id="p-1",
        name="API Tests",
        created_at=1_700_000_000,
        updated_at=1_700_000_100,
        requests=[
            Request(
                name="Get Users",
                method="GET",
                url="https://api.example.com/users",
                headers=[("Accept", "application/json"), ("X-Trace", "1"), ("Accept", "text/plain")],
                query_params=[("page", "2"), ("limit", "50")],
                auth=BearerAuth(token="abc123"),
                created_at=1_700_000_000,
                updated_at=1_700_000_001,
            ),
            Request(
                name="Create User",
                method="POST",
                url="https://api.example.com/users/{id}",
                path_params=[("id", "42")],
                auth=BasicAuth(username="admin", password="s3cret"),
                body='{"name": "Ada"}',
                created_at=1_700_000_002,
                updated_at=1_700_000_003,
            ),
            Request(
                name="Search",
                method="GET",
                auth=ApiKeyAuth(key="api_key", value="xyz", in_header=False),
                created_at=1_700_000_004,
                updated_at=1_700_000_005,
            ),
            Request(name="Bare", auth=NoAuth(), created_at=1_700_000_006, updated_at=1_700_000_007),
        ],
        environments=[
            Environment(name="dev", variables={"host": "localhost", "port": "8080"}),
            Environment(name="prod", variables={"host": "api.example.com"}),
        ],
    )


def keys(*items: str | KeyCode) -> list[KeyEvent]:
    """Build key events: strings become one CHAR event per character."""

    events: list[KeyEvent] = []
    for item in items:
        if isinstance(item, KeyCode):
            events.append(KeyEvent(item))
        else:
            events.extend(KeyEvent.of(char) for char in item)
    return events
