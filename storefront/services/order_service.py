# storefront/services/order_service.py
import math
import random
import time
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderItemModel, OrderModel
from storefront.domain.identity import Identity, UserIdentity
from storefront.domain.schemas import OrderCreate
from storefront.exceptions import (
    AccessDenied,
    AuthenticationRequired,
    CheckoutRequiresAccount,
    EmptyCart,
    InvalidOrderState,
    OrderNotFound,
    PriceChanged,
    ProductSizeNotAvailable,
    ValidationError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.gift_card_service import GiftCardService
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.notification_service import NotificationService
from storefront.services.promotion_service import PromotionService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PER_PAGE = 50


def generate_order_number() -> str:
    # ORD-<ostatnie 6 cyfr epoch ms>-<000..999>, kolizje praktycznie niemozliwe
    timestamp = str(int(time.time() * 1000))
    return f"ORD-{timestamp[-6:]}-{random.randint(0, 999):03d}"


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Zamiana koszyka w zamowienie dzieje sie w jednej transakcji.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.ledger = InventoryLedger(db)
        self.promotions = PromotionService(db)
        self.gift_cards = GiftCardService(db)
        self.notification_service = NotificationService()

    def create_order(self, identity: Identity | None, payload: OrderCreate) -> OrderModel:
        """
        Use Case: Tworzenie zamowienia z koszyka.

        1. Generuje numer zamowienia
        2. Laduje linie koszyka i sprawdza je z aktualnym katalogiem
        3. Zapisuje zamowienie (pending / pending / unfulfilled)
        4. Dla kazdej linii: pozycja zamowienia + rezerwacja stanu
        5. Promocja / karta podarunkowa (opcjonalnie)
        6. Czysci koszyk, commit
        Blad w dowolnym kroku = rollback calosci, koszyk zostaje.
        """
        if not isinstance(identity, UserIdentity):
            raise CheckoutRequiresAccount()

        if payload.gift_card_code and payload.gift_card_amount is None:
            raise ValidationError("gift_card_amount is required with gift_card_code")
        if payload.gift_card_amount is not None and payload.gift_card_amount > payload.total_amount:
            raise ValidationError("gift_card_amount cannot exceed total_amount")

        user_id = identity.user_id

        try:
            order_number = generate_order_number()

            lines = self.carts.get_user_cart_items(user_id)
            if not lines:
                raise EmptyCart(user_id)

            snapshots = [self._snapshot(line) for line in lines]

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    order_number=order_number,
                    order_status="pending",
                    payment_status="pending",
                    fulfillment_status="unfulfilled",
                    subtotal=payload.subtotal,
                    tax_amount=payload.tax_amount,
                    shipping_cost=payload.shipping_cost,
                    discount_amount=payload.discount_amount,
                    total_amount=payload.total_amount,
                    currency=payload.currency.upper(),
                    shipping_address_id=payload.shipping_address_id,
                    billing_address_id=payload.billing_address_id,
                    shipping_method_id=payload.shipping_method_id,
                    payment_method_id=payload.payment_method_id,
                    gift_message=payload.gift_message,
                    special_instructions=payload.special_instructions,
                    customer_email=str(payload.customer_email).lower(),
                    customer_phone=payload.customer_phone,
                    promotion_code=payload.promotion_code.upper() if payload.promotion_code else None,
                )
            )

            for snapshot in snapshots:
                self.repo.add_order_item(OrderItemModel(order_id=order.order_id, **snapshot))
                self.ledger.reserve(
                    snapshot["product_id"],
                    snapshot["size_ml"],
                    snapshot["quantity"],
                    reference_id=order.order_id,
                )

            if payload.promotion_code:
                self.promotions.apply_to_order(payload.promotion_code, order.order_id, user_id, payload.subtotal)

            if payload.gift_card_code:
                self.gift_cards.debit(payload.gift_card_code, order.order_id, payload.gift_card_amount)

            cleared = self.carts.delete_user_cart_items(user_id)
            self.repo.commit()

        except Exception as e:
            self.repo.rollback()
            logger.warning(f"Checkout usera {user_id} wycofany: {e!r}")
            raise

        logger.info(
            f"Zamowienie {order.order_number} ({order.order_id}) utworzone z {len(snapshots)} linii, "
            f"wyczyszczono {cleared} linii koszyka"
        )

        self.notification_service.order_placed(user_id, order.order_id, order.order_number)
        return order

    def _snapshot(self, line: CartItemModel) -> Dict[str, Any]:
        """Kopia linii koszyka + metadane produktu, po sprawdzeniu z katalogiem."""
        size = self.catalog.get_active_size(line.product_id, line.size_ml)
        if not size:
            raise ProductSizeNotAvailable(line.product_id, line.size_ml)

        if size.current_price != line.unit_price:
            raise PriceChanged(line.product_id, line.size_ml, line.unit_price, size.current_price)

        product = size.product
        return {
            "product_id": line.product_id,
            "product_name": product.product_name,
            "brand_name": product.brand.brand_name,
            "size_ml": line.size_ml,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "line_total": line.unit_price * line.quantity,
            "gift_wrap": line.gift_wrap,
            "sample_included": line.sample_included,
            "sku": size.sku,
        }

    def get_order(self, identity: Identity | None, order_id: str) -> OrderModel:
        """
        Use Case: Pobranie zamowienia z pozycjami (Query).
        """
        order = self.repo.get_order_with_items(order_id)

        if not order:
            raise OrderNotFound(order_id=order_id)

        if isinstance(identity, UserIdentity) and order.user_id != identity.user_id:
            raise AccessDenied(order_id=order_id)

        return order

    def list_orders(
        self,
        identity: Identity | None,
        order_status: str | None = None,
        payment_status: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Dict[str, Any]:
        if not isinstance(identity, UserIdentity):
            raise AuthenticationRequired("Listing orders")

        page = max(page, 1)
        limit = min(max(per_page, 1), MAX_PER_PAGE)

        orders, total = self.repo.list_user_orders(
            identity.user_id,
            order_status=order_status,
            payment_status=payment_status,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=(page - 1) * limit,
        )

        total_pages = math.ceil(total / limit)
        return {
            "data": orders,
            "pagination": {
                "total": total,
                "page": page,
                "per_page": limit,
                "total_pages": total_pages,
                "has_next": page < total_pages,
                "has_prev": page > 1,
            },
        }

    def track(self, order_number: str | None, email: str | None = None) -> OrderModel:
        if not order_number:
            raise ValidationError("Order number is required", "ORDER_NUMBER_REQUIRED")

        order = self.repo.find_by_number(order_number, email)
        if not order:
            raise OrderNotFound("Order not found or email does not match", order_number=order_number)
        return order

    def cancel_order(self, identity: Identity | None, order_id: str) -> OrderModel:
        """
        Anulowanie zamowienia pending - zwalnia rezerwacje kazdej pozycji.
        """
        if not isinstance(identity, UserIdentity):
            raise AuthenticationRequired("Cancelling an order")

        order = self.get_order(identity, order_id)

        if order.order_status != "pending":
            raise InvalidOrderState(order_id, order.order_status, "pending")

        try:
            for item in order.items:
                self.ledger.release(item.product_id, item.size_ml, item.quantity, reference_id=order.order_id)
            order.order_status = "cancelled"
            self.repo.commit()
        except Exception as e:
            self.repo.rollback()
            logger.warning(f"Anulowanie zamowienia {order_id} wycofane: {e!r}")
            raise

        logger.info(f"Zamowienie {order.order_number} anulowane, rezerwacje zwolnione")
        self.notification_service.order_cancelled(order.user_id, order.order_id, order.order_number)
        return order
