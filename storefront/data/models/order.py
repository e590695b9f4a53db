from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class OrderModel(Base):
    __tablename__ = "orders"

    order_id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    order_number = Column(String(32), nullable=False, unique=True)

    order_status = Column(String(32), nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled, refunded
    payment_status = Column(String(32), nullable=False, default="pending")
    fulfillment_status = Column(String(32), nullable=False, default="unfulfilled")

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")

    shipping_address_id = Column(String(36), nullable=False)
    billing_address_id = Column(String(36), nullable=False)
    shipping_method_id = Column(String(36), nullable=False)
    payment_method_id = Column(String(36), nullable=True)

    gift_message = Column(Text, nullable=True)
    special_instructions = Column(Text, nullable=True)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=True)
    promotion_code = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.product_name",
    )


class OrderItemModel(Base):
    """Zamrozona kopia linii koszyka + metadane produktu z chwili zakupu."""

    __tablename__ = "order_items"

    order_item_id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), nullable=False)
    product_name = Column(String(255), nullable=False)
    brand_name = Column(String(255), nullable=False)
    size_ml = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(10, 2), nullable=False)

    gift_wrap = Column(Boolean, nullable=False, default=False)
    sample_included = Column(Boolean, nullable=False, default=False)
    sku = Column(String(64), nullable=False)

    order = relationship("OrderModel", back_populates="items")
