"""Shared helpers for API and service tests."""
from decimal import Decimal

from storefront.data.models.catalog import ProductModel, ProductSizeModel

USER = "user_001"
OTHER_USER = "user_002"
GUEST = "sess_guest_001"


def get_size(session, product_id: str, size_ml: int) -> ProductSizeModel:
    return (
        session.query(ProductSizeModel)
        .filter_by(product_id=product_id, size_ml=size_ml)
        .one()
    )


def set_stock(session, product_id: str, size_ml: int, stock: int):
    size = get_size(session, product_id, size_ml)
    size.stock_quantity = stock
    session.commit()


def set_price(session, product_id: str, size_ml: int, price: str):
    size = get_size(session, product_id, size_ml)
    size.price = Decimal(price)
    session.commit()


def set_availability(session, product_id: str, status: str):
    product = session.get(ProductModel, product_id)
    product.availability_status = status
    session.commit()


def money(value) -> Decimal:
    return Decimal(str(value))


def add_item(client, product_id="prod_001", size_ml=50, quantity=1, unit_price=165.00, **identity):
    params = identity or {"user_id": USER}
    return client.post(
        "/api/cart/items",
        params=params,
        json={
            "product_id": product_id,
            "size_ml": size_ml,
            "quantity": quantity,
            "unit_price": unit_price,
        },
    )


def order_payload(**overrides):
    payload = {
        "subtotal": 165.00,
        "tax_amount": 13.20,
        "shipping_cost": 9.99,
        "discount_amount": 0,
        "total_amount": 188.19,
        "currency": "USD",
        "shipping_address_id": "addr_001",
        "billing_address_id": "addr_001",
        "shipping_method_id": "ship_standard",
        "payment_method_id": None,
        "gift_message": None,
        "special_instructions": None,
        "customer_email": "Client@Example.com",
        "customer_phone": None,
    }
    payload.update(overrides)
    return payload
