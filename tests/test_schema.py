import asyncio

import pytest
from sqlalchemy import text, update

from tienda.core.exceptions import SchemaMismatchError, StorageUnavailableError
from tienda.db.database import Base, Database
from tienda.db.models.schema_model import SchemaMaster
from tienda.db.schema import compute_identity_hash


async def tamper_identity_hash(url):
    database = Database(url)
    try:
        async with database.engine.begin() as conn:
            await conn.execute(update(SchemaMaster).values(identity_hash="0" * 32))
    finally:
        await database.dispose()


async def create_unversioned_catalog(url):
    database = Database(url)
    try:
        async with database.engine.begin() as conn:
            await conn.execute(text("CREATE TABLE productos (id INTEGER PRIMARY KEY, nombre TEXT)"))
            await conn.execute(text("INSERT INTO productos (id, nombre) VALUES (1, 'Catan')"))
    finally:
        await database.dispose()


def test_fresh_database_stores_the_expected_fingerprint(open_stores):
    async def scenario():
        async with open_stores() as (database, _products, _cart):
            return await database.init()

    assert asyncio.run(scenario()) == compute_identity_hash(Base.metadata)


def test_fingerprint_ignores_the_master_table_and_is_stable():
    first = compute_identity_hash(Base.metadata)
    assert first == compute_identity_hash(Base.metadata)
    assert len(first) == 32


def test_reopening_keeps_data_when_fingerprint_matches(open_stores, product_factory, line_factory):
    async def scenario():
        async with open_stores() as (_, products, cart):
            await products.insert_one(product_factory("Catan"))
            await cart.insert(line_factory(1, price="10", quantity=2))
        async with open_stores() as (_, products, cart):
            return await products.count(), await cart.total()

    count, total = asyncio.run(scenario())
    assert count == 1
    assert total == 20


def test_mismatched_fingerprint_is_fatal(open_stores, database_url):
    async def scenario():
        async with open_stores():
            pass
        await tamper_identity_hash(database_url)
        with pytest.raises(SchemaMismatchError) as excinfo:
            async with open_stores():
                pass
        return excinfo.value

    error = asyncio.run(scenario())
    assert error.found == "0" * 32
    assert error.expected == compute_identity_hash(Base.metadata)


def test_destructive_fallback_recreates_tables(open_stores, database_url, product_factory):
    async def scenario():
        async with open_stores() as (_, products, _cart):
            await products.insert_one(product_factory("Catan"))
        await tamper_identity_hash(database_url)
        async with open_stores(destructive_fallback=True) as (database, products, _cart):
            return await products.count(), await database.init()

    count, identity_hash = asyncio.run(scenario())
    assert count == 0
    assert identity_hash == compute_identity_hash(Base.metadata)


def test_unreachable_storage_raises_storage_unavailable(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'no_existe' / 'tienda.db'}"

    async def scenario():
        database = Database(url)
        try:
            with pytest.raises(StorageUnavailableError):
                await database.init()
        finally:
            await database.dispose()

    asyncio.run(scenario())


def test_existing_tables_without_fingerprint_are_a_mismatch(open_stores, database_url):
    async def scenario():
        await create_unversioned_catalog(database_url)
        with pytest.raises(SchemaMismatchError) as excinfo:
            async with open_stores():
                pass
        return excinfo.value

    error = asyncio.run(scenario())
    assert error.found is None
    assert error.expected == compute_identity_hash(Base.metadata)


def test_existing_tables_without_fingerprint_are_recreated_with_destructive_fallback(
    open_stores, database_url, product_factory
):
    async def scenario():
        await create_unversioned_catalog(database_url)
        async with open_stores(destructive_fallback=True) as (_, products, _cart):
            before = await products.count()
            product_id = await products.insert_one(product_factory("Azul"))
            return before, (await products.get_by_id(product_id)).name

    before, name = asyncio.run(scenario())
    assert before == 0
    assert name == "Azul"
