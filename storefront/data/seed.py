# storefront/data/seed.py
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data import models  # noqa: F401
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models.catalog import BrandModel, ProductModel, ProductSizeModel
from storefront.data.models.promotion import PromotionModel
from storefront.utils.logging import get_logger
from storefront.utils.timeutils import utcnow

logger = get_logger(__name__)

BRANDS = [
    {"brand_id": "brand_001", "brand_name": "Maison Nocturne"},
    {"brand_id": "brand_002", "brand_name": "Atelier Oud"},
]

# (product_id, brand_id, nazwa, sku_prefix, [(ml, cena, stan)])
PRODUCTS = [
    ("prod_001", "brand_001", "Velvet Midnight", "VM", [(30, "110.00", 25), (50, "165.00", 40), (100, "240.00", 15)]),
    ("prod_002", "brand_001", "Amber Reverie", "AR", [(50, "145.00", 30), (100, "210.00", 10)]),
    ("prod_003", "brand_002", "Smoked Saffron", "SS", [(50, "195.00", 5)]),
]


def seed_catalog(db: Session) -> None:
    # nie nadpisujemy - seed tylko do pustej bazy
    if db.get(BrandModel, BRANDS[0]["brand_id"]):
        return

    for brand in BRANDS:
        db.add(BrandModel(**brand))
    db.flush()

    for product_id, brand_id, name, prefix, sizes in PRODUCTS:
        base_price = Decimal(sizes[0][1])
        db.add(
            ProductModel(
                product_id=product_id,
                brand_id=brand_id,
                product_name=name,
                base_price=base_price,
                availability_status="in_stock",
                sku_prefix=prefix,
            )
        )
        for size_ml, price, stock in sizes:
            db.add(
                ProductSizeModel(
                    product_id=product_id,
                    size_ml=size_ml,
                    price=Decimal(price),
                    stock_quantity=stock,
                    reserved_quantity=0,
                    sku=f"{prefix}-{size_ml}",
                )
            )

    now = utcnow()
    db.add(
        PromotionModel(
            promotion_code="WELCOME10",
            promotion_name="Welcome 10%",
            discount_type="percentage",
            discount_value=Decimal("10"),
            maximum_discount=Decimal("50"),
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=365),
        )
    )


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_catalog(db)
        db.commit()
        logger.info("Seed katalogu zakonczony")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
