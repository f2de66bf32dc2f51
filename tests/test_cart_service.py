import asyncio
from decimal import Decimal

import pytest

from tienda.core.exceptions import ConstraintViolationError


def test_total_is_none_for_empty_cart_and_tracks_inserts_and_clear(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            totals = [await cart.total()]
            await cart.insert(line_factory(1, price="10", quantity=3))
            totals.append(await cart.total())
            await cart.insert(line_factory(2, price="5", quantity=2))
            totals.append(await cart.total())
            await cart.clear()
            totals.append(await cart.total())
            return totals

    totals = asyncio.run(scenario())
    assert totals[0] is None
    assert totals[1] == Decimal("30")
    assert totals[2] == Decimal("40")
    assert totals[3] is None


def test_zero_priced_cart_is_distinct_from_empty_cart(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1, price="0", quantity=4))
            return await cart.total()

    total = asyncio.run(scenario())
    assert total is not None
    assert total == 0


def test_set_quantity_without_matching_line_leaves_cart_unchanged(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1, quantity=2))
            before = await cart.count()
            updated = await cart.set_quantity(99, 5)
            return before, updated, await cart.count(), await cart.get_by_product(1)

    before, updated, after, line = asyncio.run(scenario())
    assert updated == 0
    assert before == after == 1
    assert line.quantity == 2


def test_set_quantity_updates_matching_line(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1, price="10", quantity=1))
            updated = await cart.set_quantity(1, 4)
            return updated, await cart.get_by_product(1), await cart.total()

    updated, line, total = asyncio.run(scenario())
    assert updated == 1
    assert line.quantity == 4
    assert line.subtotal == Decimal("40")
    assert total == Decimal("40")


def test_set_quantity_rejects_non_positive_values(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1, quantity=2))
            with pytest.raises(ConstraintViolationError):
                await cart.set_quantity(1, 0)
            return await cart.get_by_product(1)

    assert asyncio.run(scenario()).quantity == 2


def test_insert_with_duplicate_explicit_id_fails_without_overwriting(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1, name="Catan", line_id=5))
            with pytest.raises(ConstraintViolationError):
                await cart.insert(line_factory(2, name="Azul", line_id=5))
            return await cart.list_all()

    lines = asyncio.run(scenario())
    assert [(line.id, line.name) for line in lines] == [(5, "Catan")]


def test_remove_by_product_and_get_by_product(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1))
            await cart.insert(line_factory(2))
            removed = await cart.remove_by_product(1)
            missing = await cart.remove_by_product(1)
            return removed, missing, await cart.get_by_product(1), await cart.get_by_product(2)

    removed, missing, gone, kept = asyncio.run(scenario())
    assert removed == 1
    assert missing == 0
    assert gone is None
    assert kept.product_id == 2


def test_cart_lines_are_snapshots_that_survive_catalog_deletion(open_stores, product_factory):
    async def scenario():
        async with open_stores() as (_, products, cart):
            product_id = await products.insert_one(product_factory("Catan", price="29990", stock=15))
            product = await products.get_by_id(product_id)
            await cart.add_product(product, quantity=2)
            await products.delete_all()
            return product_id, await cart.get_by_product(product_id), await products.count()

    product_id, line, catalog_size = asyncio.run(scenario())
    assert catalog_size == 0
    assert line.product_id == product_id
    assert line.name == "Catan"
    assert line.price == Decimal("29990")
    assert line.stock == 15
    assert line.quantity == 2


def test_add_product_inserts_then_increments_quantity(open_stores, product_factory):
    async def scenario():
        async with open_stores() as (_, products, cart):
            product_id = await products.insert_one(product_factory("Azul", price="20"))
            product = await products.get_by_id(product_id)
            first = await cart.add_product(product)
            second = await cart.add_product(product, quantity=3)
            return first, second, await cart.count(), await cart.total()

    first, second, count, total = asyncio.run(scenario())
    assert first.quantity == 1
    assert second.quantity == 4
    assert first.id == second.id
    assert count == 1
    assert total == Decimal("80")


def test_clear_reports_removed_lines(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            await cart.insert(line_factory(1))
            await cart.insert(line_factory(2))
            return await cart.clear(), await cart.clear(), await cart.list_all()

    first, second, lines = asyncio.run(scenario())
    assert first == 2
    assert second == 0
    assert lines == []
