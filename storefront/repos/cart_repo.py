# storefront/repos/cart_repo.py
from sqlalchemy import and_, delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.catalog import ProductSizeModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.identity import GuestIdentity, Identity, UserIdentity
from storefront.utils.timeutils import utcnow


class CartRepo:
    """Repo nie commituje - o granicy transakcji decyduje serwis."""

    def __init__(self, db: Session):
        self.db = db

    def get_current_cart(self, identity: Identity) -> CartModel | None:
        #aktualny koszyk = ostatnio modyfikowany
        stmt = select(CartModel)
        if isinstance(identity, UserIdentity):
            stmt = stmt.where(CartModel.user_id == identity.user_id)
        else:
            stmt = stmt.where(
                CartModel.session_id == identity.session_id,
                CartModel.user_id.is_(None),
            )
        stmt = stmt.order_by(CartModel.updated_at.desc()).limit(1)
        return self.db.execute(stmt).scalars().first()

    def create_cart(self, identity: Identity) -> CartModel:
        now = utcnow()
        cart = CartModel(
            user_id=identity.user_id if isinstance(identity, UserIdentity) else None,
            session_id=identity.session_id if isinstance(identity, GuestIdentity) else None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(cart)
        self.db.flush()
        return cart

    def touch(self, cart: CartModel) -> None:
        cart.updated_at = utcnow()

    def get_cart_items(self, cart_id: str) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.added_at.desc())
            ).scalars()
        )

    def get_cart_lines(self, cart_id: str) -> list[tuple[CartItemModel, ProductSizeModel | None]]:
        """Linie razem z rozmiarem, produktem i marka - jedno zapytanie dla widoku koszyka."""
        stmt = (
            select(CartItemModel, ProductSizeModel)
            .outerjoin(
                ProductSizeModel,
                and_(
                    ProductSizeModel.product_id == CartItemModel.product_id,
                    ProductSizeModel.size_ml == CartItemModel.size_ml,
                ),
            )
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.added_at.desc())
        )
        return [(item, size) for item, size in self.db.execute(stmt)]

    def get_user_cart_items(self, user_id: str) -> list[CartItemModel]:
        """Linie ze wszystkich koszykow usera (checkout oproznia wszystkie)."""
        return list(
            self.db.execute(
                select(CartItemModel)
                .join(CartModel, CartItemModel.cart_id == CartModel.cart_id)
                .where(CartModel.user_id == user_id)
                .order_by(CartItemModel.added_at)
            ).scalars()
        )

    def get_cart_item(self, cart_item_id: str) -> CartItemModel | None:
        return self.db.get(CartItemModel, cart_item_id)

    def find_line(self, cart_id: str, product_id: str, size_ml: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.size_ml == size_ml,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_cart_items(self, cart_id: str) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return result.rowcount

    def delete_user_cart_items(self, user_id: str) -> int:
        cart_ids = select(CartModel.cart_id).where(CartModel.user_id == user_id)
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id.in_(cart_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, obj) -> None:
        self.db.refresh(obj)
