"""
Root conftest for the pytest test suite.

Every test that touches the store gets its own SQLite file under tmp_path,
registered with Tortoise and wrapped in a fresh StoreBootstrap, so lazy
initialization starts from an empty store each time.

Key Fixtures:
- `anyio_backend`: Specifies the asyncio backend.
- `db_path`: Path of the per-test SQLite file (not created yet).
- `store`: A StoreBootstrap bound to `db_path`, with Tortoise initialized.
- `ready_store`: `store` after its first acquisition (schema applied).
- `app_for_testing`: The FastAPI app with its production lifespan disabled and
  the store dependency pointing at `store`.
- `client`: A starlette TestClient for `app_for_testing`.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tortoise import Tortoise

from sales_reports.core.config import tortoise_config
from sales_reports.features.store.bootstrap import StoreBootstrap, get_store

# Import the app
from sales_reports.main import app as actual_app


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """
    Specifies the asyncio backend for pytest-asyncio.
    """
    return "asyncio"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "reports.sqlite"


@pytest_asyncio.fixture(scope="function")
async def store(db_path: Path) -> AsyncGenerator[StoreBootstrap, None]:
    """
    Initializes Tortoise against a fresh store file and yields its bootstrap.
    """
    await Tortoise.init(config=tortoise_config(str(db_path)))

    yield StoreBootstrap(db_path=str(db_path))

    await Tortoise.close_connections()


@pytest_asyncio.fixture(scope="function")
async def ready_store(store: StoreBootstrap) -> StoreBootstrap:
    await store.acquire()
    return store


@pytest.fixture(scope="function")
def app_for_testing(store: StoreBootstrap) -> Generator[FastAPI, Any, None]:
    """
    Provides the FastAPI application for testing, with its production
    lifespan manager disabled and the store dependency overridden, so the
    `store` fixture owns the database.
    """
    original_lifespan = actual_app.router.lifespan_context

    @asynccontextmanager
    async def dummy_lifespan(app: FastAPI):
        yield

    actual_app.router.lifespan_context = dummy_lifespan
    actual_app.dependency_overrides[get_store] = lambda: store

    yield actual_app

    # Restore the original lifespan context after the test
    actual_app.dependency_overrides.pop(get_store, None)
    actual_app.router.lifespan_context = original_lifespan


@pytest.fixture(scope="function")
def client(app_for_testing: FastAPI) -> Generator[TestClient, Any, None]:
    """
    Provides a starlette TestClient that does not follow redirects.
    """
    with TestClient(app_for_testing, follow_redirects=False) as tc:
        yield tc
