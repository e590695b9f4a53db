# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.catalog import ProductSizeModel
from storefront.domain.identity import GuestIdentity, Identity, UserIdentity
from storefront.exceptions import (
    AccessDenied,
    CartItemNotFound,
    InsufficientStock,
    ProductOutOfStock,
    ProductSizeNotAvailable,
    ValidationError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def empty_cart() -> Dict[str, Any]:
    return {"cart_id": None, "items": [], "subtotal": Decimal("0.00"), "item_count": 0}


class CartService:
    """
    Use case'y koszyka.
    query (get) tylko odczyt, commands (add, update, remove, clear, merge) modyfikuja stan
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, identity: Identity | None) -> Dict[str, Any]:
        if identity is None:
            return empty_cart()

        cart = self.repo.get_current_cart(identity)
        if not cart:
            return empty_cart()

        return self._cart_view(cart)

    def _cart_view(self, cart: CartModel) -> Dict[str, Any]:
        lines = self.repo.get_cart_lines(cart.cart_id)
        items = [item for item, _ in lines]

        subtotal = sum((i.line_total for i in items), Decimal("0.00"))
        #item_count to suma sztuk, nie liczba linii
        item_count = sum(i.quantity for i in items)

        return {
            "cart_id": cart.cart_id,
            "user_id": cart.user_id,
            "session_id": cart.session_id,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
            "items": [self._line_view(item, size) for item, size in lines],
            "subtotal": subtotal,
            "item_count": item_count,
        }

    def _line_view(self, item: CartItemModel, size: ProductSizeModel | None) -> Dict[str, Any]:
        product = size.product if size else self.catalog.get_product(item.product_id)
        current_price = size.current_price if size else None

        return {
            "cart_item_id": item.cart_item_id,
            "cart_id": item.cart_id,
            "product_id": item.product_id,
            "size_ml": item.size_ml,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "gift_wrap": item.gift_wrap,
            "sample_included": item.sample_included,
            "added_at": item.added_at,
            "line_total": item.line_total,
            "product_name": product.product_name if product else None,
            "brand_name": product.brand.brand_name if product and product.brand else None,
            "availability_status": product.availability_status if product else None,
            "stock_quantity": size.stock_quantity if size else None,
            "current_price": current_price,
            "is_price_changed": current_price is not None and current_price != item.unit_price,
        }

    #commands
    def create_cart(self, identity: Identity) -> Dict[str, Any]:
        return self._cart_view(self._ensure_cart(identity))

    def _ensure_cart(self, identity: Identity) -> CartModel:
        """
        Aktualny koszyk identity, tworzony gdy go nie ma.
        Tworzenie idzie pod lockiem identity, unikalny indeks na wlascicielu lapie reszte.
        """
        cart = self.repo.get_current_cart(identity)
        if cart:
            return cart

        with self.lock_service.hold(LockService.cart_key(identity.key)):
            cart = self.repo.get_current_cart(identity)
            if cart:
                return cart

            try:
                cart = self.repo.create_cart(identity)
                self.repo.commit()
            except IntegrityError:
                self.repo.rollback()
                logger.warning(f"Koszyk dla {identity.key} powstal rownolegle, uzywam istniejacego")
                return self.repo.get_current_cart(identity)

        logger.info(f"Utworzono koszyk {cart.cart_id} dla {identity.key}")
        return cart

    def add_item(
        self,
        identity: Identity,
        product_id: str,
        size_ml: int,
        quantity: int,
        unit_price: Decimal,
        gift_wrap: bool = False,
        sample_included: bool = False,
    ) -> CartItemModel:

        # Walidacje - wszystkie przed jakimkolwiek zapisem
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        size = self.catalog.get_active_size(product_id, size_ml)
        if not size:
            raise ProductSizeNotAvailable(product_id, size_ml)

        if size.product.availability_status != "in_stock":
            raise ProductOutOfStock(product_id)

        if size.stock_quantity < quantity:
            raise InsufficientStock(product_id, size_ml, quantity)

        cart = self._ensure_cart(identity)

        # Redis lock na linie koszyka - dwa rownolegle add tej samej linii nie zrobia duplikatu
        key = LockService.cart_line_key(identity.key, product_id, size_ml)
        with self.lock_service.hold(key):
            try:
                item = self._upsert_line(cart, product_id, size_ml, quantity, unit_price, gift_wrap, sample_included)
                self.repo.commit()
            except IntegrityError:
                # unique (cart, produkt, pojemnosc) - ktos nas wyprzedzil bez locka
                self.repo.rollback()
                logger.warning(f"Konflikt linii {key}, ponawiam jako zwiekszenie ilosci")
                item = self._upsert_line(cart, product_id, size_ml, quantity, unit_price, gift_wrap, sample_included)
                self.repo.commit()

        self.repo.refresh(item)
        return item

    def _upsert_line(self, cart, product_id, size_ml, quantity, unit_price, gift_wrap, sample_included):
        existing_item = self.repo.find_line(cart.cart_id, product_id, size_ml)

        if existing_item:
            logger.info(
                f"Produkt {product_id}/{size_ml}ml juz jest w koszyku, zwiekszam ilosc "
                f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
            existing_item.gift_wrap = gift_wrap
            existing_item.sample_included = sample_included
            item = existing_item
        else:
            logger.info(f"Dodaje {product_id}/{size_ml}ml x{quantity} do koszyka {cart.cart_id}")
            item = self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.cart_id,
                    product_id=product_id,
                    size_ml=size_ml,
                    quantity=quantity,
                    unit_price=unit_price,
                    gift_wrap=gift_wrap,
                    sample_included=sample_included,
                )
            )

        self.repo.touch(cart)
        self.repo.db.flush()
        return item

    def _owned_item(self, identity: Identity | None, cart_item_id: str) -> CartItemModel:
        item = self.repo.get_cart_item(cart_item_id)
        if not item:
            raise CartItemNotFound(cart_item_id)

        # bez identity (anonimowy request) nie ma czego porownac
        if identity is not None and item.cart.owner != identity:
            raise AccessDenied(cart_item_id=cart_item_id)

        return item

    def update_item(
        self,
        identity: Identity | None,
        cart_item_id: str,
        quantity: int | None = None,
        gift_wrap: bool | None = None,
        sample_included: bool | None = None,
    ) -> CartItemModel | None:
        """Zwraca zaktualizowana linie albo None gdy quantity == 0 ja usunelo."""
        if quantity is None and gift_wrap is None and sample_included is None:
            raise ValidationError("Nothing to update")

        item = self._owned_item(identity, cart_item_id)
        cart = item.cart

        # quantity 0 == usun
        if quantity == 0:
            self.repo.delete_cart_item(item)
            self.repo.touch(cart)
            self.repo.commit()
            logger.info(f"Linia {cart_item_id} usunieta (quantity=0)")
            return None

        if quantity is not None and quantity > item.quantity:
            size = self.catalog.get_size(item.product_id, item.size_ml)
            if not size or size.stock_quantity < quantity:
                raise InsufficientStock(item.product_id, item.size_ml, quantity)

        if quantity is not None:
            item.quantity = quantity
        if gift_wrap is not None:
            item.gift_wrap = gift_wrap
        if sample_included is not None:
            item.sample_included = sample_included

        self.repo.touch(cart)
        self.repo.commit()
        self.repo.refresh(item)

        logger.info(f"Linia {cart_item_id} zaktualizowana, quantity={item.quantity}")
        return item

    def remove_item(self, identity: Identity | None, cart_item_id: str) -> None:
        item = self._owned_item(identity, cart_item_id)
        cart = item.cart

        self.repo.delete_cart_item(item)
        self.repo.touch(cart)
        self.repo.commit()

        logger.info(f"Linia {cart_item_id} usunieta z koszyka {cart.cart_id}")

    def clear(self, identity: Identity) -> int:
        cart = self.repo.get_current_cart(identity)
        if not cart:
            return 0

        removed = self.repo.delete_cart_items(cart.cart_id)
        self.repo.touch(cart)
        self.repo.commit()

        logger.info(f"Koszyk {cart.cart_id} wyczyszczony, usunieto {removed} linii")
        return removed

    def merge_guest_cart(self, user_id: str, session_id: str) -> Dict[str, Any]:
        """
        Po zalogowaniu przenosi linie z koszyka goscia do koszyka usera.
        Ta sama (produkt, pojemnosc) - sumujemy ilosci.
        """
        user = UserIdentity(user_id)
        guest_cart = self.repo.get_current_cart(GuestIdentity(session_id))

        if not guest_cart:
            return self.get_cart(user)

        guest_items = self.repo.get_cart_items(guest_cart.cart_id)
        if not guest_items:
            return self.get_cart(user)

        user_cart = self._ensure_cart(user)

        for guest_item in guest_items:
            existing = self.repo.find_line(user_cart.cart_id, guest_item.product_id, guest_item.size_ml)
            if existing:
                existing.quantity += guest_item.quantity
                existing.gift_wrap = existing.gift_wrap or guest_item.gift_wrap
                existing.sample_included = existing.sample_included or guest_item.sample_included
            else:
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=user_cart.cart_id,
                        product_id=guest_item.product_id,
                        size_ml=guest_item.size_ml,
                        quantity=guest_item.quantity,
                        unit_price=guest_item.unit_price,
                        gift_wrap=guest_item.gift_wrap,
                        sample_included=guest_item.sample_included,
                        added_at=guest_item.added_at,
                    )
                )

        self.repo.delete_cart_items(guest_cart.cart_id)
        self.repo.touch(guest_cart)
        self.repo.touch(user_cart)
        self.repo.commit()

        logger.info(
            f"Polaczono koszyk goscia {guest_cart.cart_id} ({len(guest_items)} linii) "
            f"z koszykiem {user_cart.cart_id} usera {user_id}"
        )
        return self._cart_view(user_cart)
