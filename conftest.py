"""
Root conftest for the pytest test suite.

This file contains the main fixtures that are used across the entire test suite.

Key Fixtures:
- `db`: Creates a fresh in-memory SQLite schema for the Tortoise sales store
  and tears it down afterwards. Requested only by tests that touch the database.
- `sale_documents`: A handful of sale documents shaped like the ones in Firestore.
- `app_for_testing`: Provides the FastAPI application instance with its production
  lifespan disabled so no real store (or credential file) is needed.
- `make_client`: Builds a TestClient whose app serves from a given sales store.
- `client`: A TestClient serving `sale_documents` from an in-memory store.
"""

import datetime
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncGenerator, Callable, Generator, List

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tortoise import Tortoise

from sales_reports.features.sales.store import InMemorySalesStore, SalesStore

# Import the app
from sales_reports.main import app as actual_app


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for one test function.

    Creates a fresh in-memory database and schema and tears it down afterwards.
    """
    test_db_config = {
        "connections": {"default": "sqlite://:memory:"},
        "apps": {
            "models": {
                "models": [
                    "sales_reports.features.sales.models",
                    "aerich.models",
                ],
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }
    await Tortoise.init(config=test_db_config)
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


@pytest.fixture
def sale_documents() -> List[dict]:
    """Three sales, newest first, as the store returns them."""
    return [
        {
            "timestamp": datetime.datetime(2025, 3, 14, 18, 30, tzinfo=datetime.timezone.utc),
            "employee_email": "ana.lopez@technorth.mx",
            "subtotal": 86445.28,
            "total": 96818.71,
        },
        {
            "timestamp": datetime.datetime(2025, 3, 2, 9, 5, tzinfo=datetime.timezone.utc),
            "employee_email": "carlos@technorth.mx",
            "subtotal": Decimal("862.07"),
            "total": Decimal("1000.00"),
        },
        {
            "timestamp": datetime.datetime(2025, 2, 27, 12, 0, tzinfo=datetime.timezone.utc),
            "employee_email": "ana.lopez@technorth.mx",
            "subtotal": 10.34,
            "total": 12,
        },
    ]


@pytest.fixture(scope="function")
def app_for_testing() -> Generator[FastAPI, Any, None]:
    """
    Provides a FastAPI application instance for testing, with its
    production lifespan manager disabled so tests choose the sales store.
    """
    original_lifespan = actual_app.router.lifespan_context
    original_store = actual_app.state.sales_store

    @asynccontextmanager
    async def dummy_lifespan(app: FastAPI):
        yield

    actual_app.router.lifespan_context = dummy_lifespan

    yield actual_app

    # Restore the original lifespan context and store after the test
    actual_app.router.lifespan_context = original_lifespan
    actual_app.state.sales_store = original_store
    actual_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_client(app_for_testing: FastAPI) -> Generator[Callable[[SalesStore], TestClient], Any, None]:
    """
    Returns a factory building a TestClient that serves reports from `store`.
    """
    clients = []

    def _make(store: SalesStore) -> TestClient:
        app_for_testing.state.sales_store = store
        tc = TestClient(app_for_testing)
        tc.__enter__()
        clients.append(tc)
        return tc

    yield _make

    for tc in clients:
        tc.__exit__(None, None, None)


@pytest.fixture(scope="function")
def client(make_client, sale_documents) -> TestClient:
    """
    Provides a TestClient whose reports are built from `sale_documents`.
    """
    return make_client(InMemorySalesStore(sale_documents))
