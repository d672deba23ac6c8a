"""Shared fixtures: in-memory SQLite database and an ASGI test client."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from tiny_inventory.main import create_app
from tiny_inventory.schemas import ProductCreate, ProductOut, StoreCreate, StoreOut
from tiny_inventory.services import products as product_service
from tiny_inventory.services import stores as store_service
from tiny_inventory.settings import Settings
from tiny_inventory.storage.postgres import close_db, create_tables, drop_tables, init_db

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def db() -> AsyncGenerator[None, None]:
    """Fresh schema for every test."""
    await init_db(TEST_DATABASE_URL)
    await create_tables()
    yield
    await drop_tables()
    await close_db()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL, rate_limit_enabled=False)


@pytest.fixture
async def client(db: None, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create test client backed by the test database."""
    app = create_app(settings)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def make_store(db: None):
    """Create a store through the service layer."""

    async def _make(name: str = "Downtown Electronics", address: str = "123 Main St") -> StoreOut:
        return await store_service.create_store(StoreCreate(name=name, address=address))

    return _make


@pytest.fixture
def make_product(db: None):
    """Create a product through the service layer."""

    async def _make(store: StoreOut, name: str, **overrides: Any) -> ProductOut:
        values: dict[str, Any] = {
            "name": name,
            "category": "Electronics",
            "price": Decimal("10.00"),
            "quantity": 20,
            "store_id": store.id,
        }
        values.update(overrides)
        return await product_service.create_product(ProductCreate(**values))

    return _make
