from sqlalchemy.orm import Session

from storefront.data.models.catalog import ProductSizeModel
from storefront.exceptions import ProductNotFound
from storefront.repos.catalog_repo import CatalogRepo


class CatalogService:
    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def list_sizes(self, product_id: str) -> list[ProductSizeModel]:
        if not self.repo.get_product(product_id):
            raise ProductNotFound(product_id)
        return self.repo.list_active_sizes(product_id)
