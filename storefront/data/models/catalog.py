#storefront/data/models/catalog.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class BrandModel(Base):
    __tablename__ = "brands"

    brand_id = Column(String(36), primary_key=True, default=new_id)
    brand_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class ProductModel(Base):
    __tablename__ = "products"

    product_id = Column(String(36), primary_key=True, default=new_id)
    brand_id = Column(String(36), ForeignKey("brands.brand_id"), nullable=False)
    product_name = Column(String(255), nullable=False)

    base_price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)
    availability_status = Column(String(32), nullable=False, default="in_stock")  # in_stock, out_of_stock, discontinued
    sku_prefix = Column(String(64), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    brand = relationship("BrandModel", lazy="joined")
    sizes = relationship("ProductSizeModel", back_populates="product")


class ProductSizeModel(Base):
    __tablename__ = "product_sizes"

    size_id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), ForeignKey("products.product_id"), nullable=False)
    size_ml = Column(Integer, nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)

    stock_quantity = Column(Integer, nullable=False, default=0)
    reserved_quantity = Column(Integer, nullable=False, default=0)

    sku = Column(String(64), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    product = relationship("ProductModel", back_populates="sizes", lazy="joined")

    __table_args__ = (UniqueConstraint("product_id", "size_ml", name="u_product_size"),)

    @property
    def current_price(self):
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def available_quantity(self) -> int:
        return self.stock_quantity - self.reserved_quantity
