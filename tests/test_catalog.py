"""Catalog sizes and health endpoints."""
from helpers import get_size, money


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200


def test_list_sizes(client):
    response = client.get("/api/products/prod_001/sizes")

    assert response.status_code == 200
    sizes = response.json()
    assert [s["size_ml"] for s in sizes] == [30, 50, 100]
    assert sizes[1]["sku"] == "VM-50"
    assert money(sizes[1]["price"]) == money("165.00")
    assert sizes[1]["available_quantity"] == 40


def test_inactive_sizes_hidden(client, db):
    get_size(db, "prod_001", 30).is_active = False
    db.commit()

    sizes = client.get("/api/products/prod_001/sizes").json()

    assert [s["size_ml"] for s in sizes] == [50, 100]


def test_unknown_product(client):
    response = client.get("/api/products/prod_999/sizes")

    assert response.status_code == 404
    assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"
