"""
Order API Test Configuration (conftest.py)
==========================================

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at a temporary SQLite file
    ├── database: Real pool over that file with the schema created
    ├── test_client: HTTPX AsyncClient bound to an app serving `database`
    ├── pool_guard: Pool double that fails the test if a connection is taken
    └── sample_order: A valid POST /orders body
"""

import os
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

# Set before any order_api import reads the environment.
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from order_api.config import Settings
from order_api.database import Base, Database
from order_api.models import order  # noqa: F401  (registers the orders table)

CUSTOMER_DDL = (
    "CREATE TABLE customer ("
    "customer_id VARCHAR(16) PRIMARY KEY, "
    "cust_name VARCHAR(64) NOT NULL, "
    "city VARCHAR(64), "
    "grade INTEGER)"
)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}",
        db_pool_size=5,
        db_pool_timeout=1.0,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A real pool over a fresh SQLite file holding `orders` and `customer`."""
    db = Database(test_settings)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(CUSTOMER_DDL))
    yield db
    await db.dispose()


def build_client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX AsyncClient talking to an app that serves the `database` fixture.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/orders")
    """
    from order_api.main import create_app

    app = create_app(settings=test_settings, database=database)
    async with build_client(app) as client:
        yield client


@pytest.fixture
def pool_guard():
    """Pool double whose connection() fails loudly if it is ever entered."""
    db = MagicMock(spec=Database)
    db.connection = MagicMock(side_effect=AssertionError("connection pool was touched"))
    return db


def pool_yielding(conn) -> MagicMock:
    """Pool double handing out `conn` from connection()."""
    db = MagicMock(spec=Database)

    @asynccontextmanager
    async def connection():
        yield conn

    db.connection = MagicMock(side_effect=connection)
    return db


@pytest.fixture
def sample_order():
    return {
        "ord_no": 1001,
        "purch_amt": 150.5,
        "ord_date": "2024-01-01",
        "customer_id": "C001",
    }
