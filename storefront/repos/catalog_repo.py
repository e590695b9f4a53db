# storefront/repos/catalog_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.catalog import ProductModel, ProductSizeModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_size(self, product_id: str, size_ml: int) -> ProductSizeModel | None:
        return self.db.execute(
            select(ProductSizeModel).where(
                ProductSizeModel.product_id == product_id,
                ProductSizeModel.size_ml == size_ml,
            )
        ).scalar_one_or_none()

    def get_active_size(self, product_id: str, size_ml: int) -> ProductSizeModel | None:
        size = self.get_size(product_id, size_ml)
        if size is None or not size.is_active:
            return None
        return size

    def list_active_sizes(self, product_id: str) -> list[ProductSizeModel]:
        return list(
            self.db.execute(
                select(ProductSizeModel)
                .where(
                    ProductSizeModel.product_id == product_id,
                    ProductSizeModel.is_active.is_(True),
                )
                .order_by(ProductSizeModel.size_ml)
            ).scalars()
        )

    def increment_reserved(self, product_id: str, size_ml: int, quantity: int) -> int:
        # warunkowy update - sprawdzenie i zapis w jednym zapytaniu
        result = self.db.execute(
            update(ProductSizeModel)
            .where(
                ProductSizeModel.product_id == product_id,
                ProductSizeModel.size_ml == size_ml,
                ProductSizeModel.stock_quantity - ProductSizeModel.reserved_quantity >= quantity,
            )
            .values(reserved_quantity=ProductSizeModel.reserved_quantity + quantity)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def decrement_reserved(self, product_id: str, size_ml: int, quantity: int) -> int:
        size = self.get_size(product_id, size_ml)
        if size is None:
            return 0
        release = min(quantity, size.reserved_quantity)
        result = self.db.execute(
            update(ProductSizeModel)
            .where(ProductSizeModel.size_id == size.size_id)
            .values(reserved_quantity=ProductSizeModel.reserved_quantity - release)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
