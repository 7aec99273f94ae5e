"""Pytest configuration and fixtures for the task board.

HTTP tests use an app built by create_app() with attachment storage in a
temporary directory; the lifespan is run explicitly because ASGITransport
does not send lifespan events. WebSocket tests use fastapi's TestClient.
"""

from collections.abc import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from app.application.services.board_store import BoardStore
from app.application.use_cases.mutations import MutationProcessor
from app.core.config import get_settings
from app.core.limiter import limiter
from app.main import create_app

COLUMNS = ["To Do", "In Progress", "Done"]


@pytest.fixture
def app(tmp_path, monkeypatch) -> Iterator[FastAPI]:
    """Fresh application with its own board and storage directory."""
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "uploads"))
    monkeypatch.setenv("BOARD_COLUMNS", ",".join(COLUMNS))
    monkeypatch.setenv("INITIAL_COLUMN", COLUMNS[0])
    get_settings.cache_clear()
    limiter.reset()
    yield create_app()
    get_settings.cache_clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), lifespan running."""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def sync_client(app: FastAPI) -> Iterator[TestClient]:
    """Blocking client for WebSocket sessions (runs the lifespan)."""
    with TestClient(app) as tc:
        yield tc


@pytest.fixture
def store() -> BoardStore:
    return BoardStore(COLUMNS, COLUMNS[0])


@pytest.fixture
def processor(store: BoardStore) -> MutationProcessor:
    return MutationProcessor(store)
