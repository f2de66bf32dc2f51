"""Shared pytest fixtures for the tienda stores."""

from contextlib import asynccontextmanager
from decimal import Decimal

import pytest

from tienda.core.config import Settings
from tienda.db.database import Database
from tienda.schemas.cart_schema import CartLineCreate
from tienda.schemas.product_schema import ProductCreate
from tienda.services.cart_service import CartService
from tienda.services.product_service import ProductService


@pytest.fixture
def database_url(tmp_path):
    """SQLite file database, fresh for every test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'tienda_test.db'}"


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, SEED_SAMPLE_PRODUCTS=False, PRODUCTS_API_URL=None)


@pytest.fixture
def open_stores(database_url):
    """Async context manager yielding (database, product_service, cart_service)."""

    @asynccontextmanager
    async def _open(url=None, destructive_fallback=False):
        database = Database(url or database_url, destructive_fallback=destructive_fallback)
        try:
            await database.init()
            yield database, ProductService(database), CartService(database)
        finally:
            await database.dispose()

    return _open


def make_product(name, price="10", product_id=0, stock=5, category="Juegos de Mesa"):
    return ProductCreate(
        id=product_id,
        name=name,
        description=f"Descripción de {name}",
        price=Decimal(price),
        image_url=name.lower().replace(" ", "_"),
        category=category,
        stock=stock,
    )


def make_line(product_id, price="10", quantity=1, name=None, line_id=0):
    return CartLineCreate(
        id=line_id,
        product_id=product_id,
        name=name or f"Producto {product_id}",
        price=Decimal(price),
        quantity=quantity,
    )


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def line_factory():
    return make_line
