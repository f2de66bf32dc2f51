import asyncio
import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tienda.api.v1.endpoints.cart import cart_total_events
from tienda.core.config import Settings
from tienda.db.database import Database
from tienda.db.init_data import SAMPLE_PRODUCTS
from tienda.main import create_app


@pytest.fixture
def client(database_url):
    settings = Settings(_env_file=None, SEED_SAMPLE_PRODUCTS=True, PRODUCTS_API_URL=None)
    app = create_app(Database(database_url), settings)
    with TestClient(app) as test_client:
        yield test_client


def product_payload(name, price="100", **extra):
    payload = {"name": name, "description": "", "price": price, "image_url": "", "category": "Test", "stock": 1}
    payload.update(extra)
    return payload


def test_root_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Tienda API" in response.json()["message"]


def test_sample_products_are_seeded_and_sorted_by_name(client):
    response = client.get("/api/v1/products")
    assert response.status_code == 200
    names = [p["name"] for p in response.json()]
    assert len(names) == len(SAMPLE_PRODUCTS)
    assert names == sorted(names)
    assert names[0] == "Auriculares Gamer HyperX Cloud II"


def test_product_crud_round(client):
    created = client.post("/api/v1/products", json=product_payload("Dixit", price="19990"))
    assert created.status_code == 201
    product = created.json()
    assert product["id"] > len(SAMPLE_PRODUCTS)
    assert Decimal(product["price"]) == Decimal("19990")

    updated = client.put(f"/api/v1/products/{product['id']}", json=product_payload("Dixit", price="17990", stock=4))
    assert updated.status_code == 200
    assert updated.json()["stock"] == 4

    fetched = client.get(f"/api/v1/products/{product['id']}")
    assert Decimal(fetched.json()["price"]) == Decimal("17990")

    assert client.delete(f"/api/v1/products/{product['id']}").status_code == 204
    assert client.get(f"/api/v1/products/{product['id']}").status_code == 404


def test_update_missing_product_returns_404(client):
    response = client.put("/api/v1/products/999", json=product_payload("Fantasma"))
    assert response.status_code == 404


def test_invalid_product_is_rejected_by_validation(client):
    response = client.post("/api/v1/products", json=product_payload("", price="-1"))
    assert response.status_code == 422


def test_batch_with_repeated_id_is_a_conflict_and_writes_nothing(client):
    batch = [product_payload("Uno", id=50), product_payload("Dos", id=50)]
    response = client.post("/api/v1/products/batch", json=batch)
    assert response.status_code == 409
    assert client.get("/api/v1/products/50").status_code == 404


def test_batch_returns_ids_in_input_order(client):
    batch = [product_payload("Uno", id=60), product_payload("Dos"), product_payload("Tres", id=70)]
    response = client.post("/api/v1/products/batch", json=batch)
    assert response.status_code == 201
    ids = response.json()["ids"]
    assert ids[0] == 60
    assert ids[2] == 70
    assert ids[1] not in (60, 70)


def test_delete_all_products_keeps_cart(client):
    client.post("/api/v1/cart/products/1")
    response = client.delete("/api/v1/products")
    assert response.json() == {"deleted": len(SAMPLE_PRODUCTS)}
    assert client.get("/api/v1/products").json() == []
    assert [line["product_id"] for line in client.get("/api/v1/cart").json()] == [1]


def test_adding_the_same_product_twice_increments_quantity(client):
    first = client.post("/api/v1/cart/products/1")
    second = client.post("/api/v1/cart/products/1")
    assert first.status_code == second.status_code == 201
    assert second.json()["quantity"] == 2
    assert Decimal(second.json()["subtotal"]) == Decimal("59980")

    total = client.get("/api/v1/cart/total").json()["total"]
    assert Decimal(total) == Decimal("59980")


def test_adding_unknown_product_returns_404(client):
    assert client.post("/api/v1/cart/products/999").status_code == 404


def test_empty_cart_total_is_null(client):
    assert client.get("/api/v1/cart/total").json() == {"total": None}
    client.post("/api/v1/cart/products/2")
    assert client.delete("/api/v1/cart").status_code == 204
    assert client.get("/api/v1/cart/total").json() == {"total": None}


def test_cart_item_routes(client):
    line = {"product_id": 77, "name": "Suelto", "price": "5", "quantity": 2}
    created = client.post("/api/v1/cart/items", json=line)
    assert created.status_code == 201
    line_id = created.json()["id"]

    duplicate = client.post("/api/v1/cart/items", json={**line, "id": line_id, "product_id": 78})
    assert duplicate.status_code == 409

    assert client.put("/api/v1/cart/items/77", json={"quantity": 5}).json() == {"updated": 1}
    assert client.put("/api/v1/cart/items/99", json={"quantity": 5}).json() == {"updated": 0}
    assert client.put("/api/v1/cart/items/77", json={"quantity": 0}).status_code == 422
    assert client.get("/api/v1/cart/items/77").json()["quantity"] == 5

    assert client.delete("/api/v1/cart/items/77").status_code == 204
    assert client.get("/api/v1/cart/items/77").status_code == 404


def test_cart_total_events_stream_current_then_updated_totals(open_stores, line_factory):
    async def scenario():
        async with open_stores() as (_, _products, cart):
            events = cart_total_events(cart)
            try:
                received = [await events.__anext__()]
                await cart.insert(line_factory(1, price="10", quantity=3))
                received.append(await asyncio.wait_for(events.__anext__(), timeout=1))
            finally:
                await events.aclose()
            return received

    first, second = asyncio.run(scenario())
    assert first.startswith("data: ") and first.endswith("\n\n")
    assert json.loads(first[len("data: "):]) == {"total": None}
    assert Decimal(json.loads(second[len("data: "):])["total"]) == Decimal("30")
