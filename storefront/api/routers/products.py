from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ProductSizeOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/{product_id}/sizes", response_model=List[ProductSizeOut])
def list_sizes(product_id: str, db: Session = Depends(get_db)):
    return CatalogService(db).list_sizes(product_id)
