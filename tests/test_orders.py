"""API tests for checkout and order reads (storefront/api/routers/orders.py)."""
import re

from helpers import GUEST, OTHER_USER, USER, add_item, get_size, money, order_payload, set_price, set_stock
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.inventory import InventoryTrackingModel
from storefront.data.models.order import OrderItemModel, OrderModel
from storefront.repos.cart_repo import CartRepo


def checkout(client, user_id=USER, **overrides):
    return client.post("/api/orders", params={"user_id": user_id}, json=order_payload(**overrides))


def place_order(client, user_id=USER):
    add_item(client, user_id=user_id)
    response = checkout(client, user_id=user_id)
    assert response.status_code == 201
    return response.json()


class TestCreateOrder:
    def test_checkout_single_line(self, client, fresh):
        add_item(client)

        response = checkout(client)

        assert response.status_code == 201
        order = response.json()
        assert re.fullmatch(r"ORD-\d{6}-\d{3}", order["order_number"])
        assert order["user_id"] == USER
        assert order["order_status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["fulfillment_status"] == "unfulfilled"
        assert money(order["subtotal"]) == money("165.00")
        assert money(order["tax_amount"]) == money("13.20")
        assert money(order["shipping_cost"]) == money("9.99")
        assert money(order["total_amount"]) == money("188.19")
        assert order["currency"] == "USD"
        assert order["customer_email"] == "client@example.com"
        assert "items" not in order

        session = fresh()
        assert get_size(session, "prod_001", 50).reserved_quantity == 1
        assert session.query(CartItemModel).count() == 0

    def test_order_lines_snapshot_cart(self, client):
        add_item(client, quantity=2, unit_price=165.00)
        add_item(client, product_id="prod_002", size_ml=100, quantity=1, unit_price=210.00)

        order = checkout(client, subtotal=540.00, total_amount=540.00).json()
        detail = client.get(f"/api/orders/{order['order_id']}", params={"user_id": USER}).json()

        items = detail["items"]
        assert [i["product_name"] for i in items] == ["Amber Reverie", "Velvet Midnight"]
        velvet = items[1]
        assert velvet["brand_name"] == "Maison Nocturne"
        assert velvet["sku"] == "VM-50"
        assert velvet["quantity"] == 2
        assert money(velvet["line_total"]) == money("330.00")
        assert sum(money(i["line_total"]) for i in items) == money(detail["subtotal"])

    def test_reservations_are_tracked(self, client, fresh):
        add_item(client, product_id="prod_003", quantity=3, unit_price=195.00)

        order = checkout(client, subtotal=585.00, total_amount=585.00).json()

        session = fresh()
        size = get_size(session, "prod_003", 50)
        assert size.reserved_quantity == 3
        assert size.stock_quantity == 5
        tracking = session.query(InventoryTrackingModel).one()
        assert tracking.change_type == "reservation"
        assert tracking.quantity_change == 3
        assert tracking.quantity_after == 3
        assert tracking.reference_id == order["order_id"]

    def test_guest_cannot_checkout(self, client, fresh):
        add_item(client, session_id=GUEST)

        response = client.post("/api/orders", params={"session_id": GUEST}, json=order_payload())

        assert response.status_code == 400
        assert response.json()["error_code"] == "AUTH_REQUIRED_FOR_CHECKOUT"
        assert fresh().query(OrderModel).count() == 0

    def test_empty_cart(self, client, fresh):
        response = checkout(client)

        assert response.status_code == 400
        assert response.json()["error_code"] == "CART_EMPTY"
        assert fresh().query(OrderModel).count() == 0

    def test_invalid_payload(self, client):
        add_item(client)

        response = checkout(client, customer_email="not-an-email", total_amount=0)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestCheckoutRollback:
    def assert_nothing_written(self, session, cart_lines=1):
        assert session.query(OrderModel).count() == 0
        assert session.query(OrderItemModel).count() == 0
        assert session.query(InventoryTrackingModel).count() == 0
        assert session.query(CartItemModel).count() == cart_lines

    def test_failure_after_reservation_rolls_back(self, client, fresh, monkeypatch):
        add_item(client, quantity=2)

        def broken(self, user_id):
            raise RuntimeError("database went away")

        monkeypatch.setattr(CartRepo, "delete_user_cart_items", broken)

        response = checkout(client)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "INTERNAL_SERVER_ERROR"

        session = fresh()
        self.assert_nothing_written(session)
        assert get_size(session, "prod_001", 50).reserved_quantity == 0

    def test_stock_dropped_since_add(self, client, db, fresh):
        add_item(client, product_id="prod_003", quantity=3, unit_price=195.00)
        set_stock(db, "prod_003", 50, 2)

        response = checkout(client)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
        self.assert_nothing_written(fresh())

    def test_second_line_short_rolls_back_first(self, client, db, fresh):
        add_item(client, quantity=1)
        add_item(client, product_id="prod_003", quantity=3, unit_price=195.00)
        set_stock(db, "prod_003", 50, 1)

        response = checkout(client)

        assert response.status_code == 400
        session = fresh()
        self.assert_nothing_written(session, cart_lines=2)
        assert get_size(session, "prod_001", 50).reserved_quantity == 0

    def test_price_changed(self, client, db, fresh):
        add_item(client)
        set_price(db, "prod_001", 50, "170.00")

        response = checkout(client)

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "PRICE_CHANGED"
        assert body["details"]["current_price"] == "170.00"
        self.assert_nothing_written(fresh())

    def test_size_deactivated(self, client, db, fresh):
        add_item(client)
        size = get_size(db, "prod_001", 50)
        size.is_active = False
        db.commit()

        response = checkout(client)

        assert response.status_code == 400
        assert response.json()["error_code"] == "PRODUCT_SIZE_NOT_AVAILABLE"
        self.assert_nothing_written(fresh())


class TestReadOrders:
    def test_get_order(self, client):
        order = place_order(client)

        response = client.get(f"/api/orders/{order['order_id']}", params={"user_id": USER})

        assert response.status_code == 200
        data = response.json()
        assert data["order_number"] == order["order_number"]
        assert len(data["items"]) == 1

    def test_get_other_users_order(self, client):
        order = place_order(client)

        response = client.get(f"/api/orders/{order['order_id']}", params={"user_id": OTHER_USER})

        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCESS_DENIED"

    def test_get_missing_order(self, client):
        response = client.get("/api/orders/missing", params={"user_id": USER})

        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"

    def test_list_paginates(self, client):
        for _ in range(3):
            place_order(client)
        place_order(client, user_id=OTHER_USER)

        first = client.get("/api/orders", params={"user_id": USER, "per_page": 2}).json()
        second = client.get("/api/orders", params={"user_id": USER, "per_page": 2, "page": 2}).json()

        assert len(first["data"]) == 2
        assert first["pagination"] == {
            "total": 3,
            "page": 1,
            "per_page": 2,
            "total_pages": 2,
            "has_next": True,
            "has_prev": False,
        }
        assert len(second["data"]) == 1
        assert second["pagination"]["has_next"] is False
        assert second["pagination"]["has_prev"] is True
        assert all(o["user_id"] == USER for o in first["data"] + second["data"])
        assert all(len(o["items"]) == 1 for o in first["data"])

    def test_list_filters_by_status(self, client):
        order = place_order(client)
        place_order(client)
        client.post(f"/api/orders/{order['order_id']}/cancel", params={"user_id": USER})

        data = client.get("/api/orders", params={"user_id": USER, "order_status": "cancelled"}).json()

        assert [o["order_id"] for o in data["data"]] == [order["order_id"]]

    def test_list_caps_per_page(self, client):
        data = client.get("/api/orders", params={"user_id": USER, "per_page": 500}).json()

        assert data["pagination"]["per_page"] == 50
        assert data["pagination"]["total"] == 0

    def test_list_requires_user(self, client):
        response = client.get("/api/orders", params={"session_id": GUEST})

        assert response.status_code == 400
        assert response.json()["error_code"] == "AUTH_REQUIRED"

    def test_track_by_number_and_email(self, client):
        order = place_order(client)

        response = client.get(
            "/api/orders/track",
            params={"order_number": order["order_number"], "email": "CLIENT@example.com"},
        )

        assert response.status_code == 200
        assert response.json()["order_id"] == order["order_id"]

    def test_track_email_mismatch(self, client):
        order = place_order(client)

        response = client.get(
            "/api/orders/track",
            params={"order_number": order["order_number"], "email": "someone@example.com"},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"

    def test_track_requires_number(self, client):
        response = client.get("/api/orders/track")

        assert response.status_code == 400
        assert response.json()["error_code"] == "ORDER_NUMBER_REQUIRED"


class TestCancelOrder:
    def test_cancel_releases_reservations(self, client, fresh):
        add_item(client, quantity=2)
        order = checkout(client).json()

        response = client.post(f"/api/orders/{order['order_id']}/cancel", params={"user_id": USER})

        assert response.status_code == 200
        assert response.json()["order_status"] == "cancelled"

        session = fresh()
        assert get_size(session, "prod_001", 50).reserved_quantity == 0
        changes = [
            t.quantity_change
            for t in session.query(InventoryTrackingModel).order_by(InventoryTrackingModel.created_at)
        ]
        assert sorted(changes) == [-2, 2]

    def test_cancel_twice(self, client, fresh):
        order = place_order(client)
        client.post(f"/api/orders/{order['order_id']}/cancel", params={"user_id": USER})

        response = client.post(f"/api/orders/{order['order_id']}/cancel", params={"user_id": USER})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ORDER_STATE"
        assert get_size(fresh(), "prod_001", 50).reserved_quantity == 0

    def test_cancel_other_users_order(self, client, fresh):
        order = place_order(client)

        response = client.post(f"/api/orders/{order['order_id']}/cancel", params={"user_id": OTHER_USER})

        assert response.status_code == 403
        assert get_size(fresh(), "prod_001", 50).reserved_quantity == 1

    def test_cancel_requires_user(self, client):
        order = place_order(client)

        response = client.post(f"/api/orders/{order['order_id']}/cancel")

        assert response.status_code == 400
        assert response.json()["error_code"] == "AUTH_REQUIRED"
