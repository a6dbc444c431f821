from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport

from taskapi.config import Settings
from taskapi.main import create_app
from taskapi.services import TaskStore


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.db"


@pytest.fixture()
def store(db_path: Path) -> TaskStore:
    return TaskStore(db_path, timeout=5.0)


@pytest.fixture()
def settings(db_path: Path) -> Settings:
    """
    Settings built directly instead of from the environment,
    so tests never depend on TASKAPI_* variables of the host.
    """
    return Settings(
        db_path=db_path,
        db_timeout=5.0,
        api_prefix="",
        cors_origins=["*"],
        host="127.0.0.1",
        port=8000,
        reload=False,
        log_level="DEBUG",
        log_file=None,
    )


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
