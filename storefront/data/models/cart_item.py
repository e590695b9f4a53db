from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class CartItemModel(Base):
    __tablename__ = "cart_items"

    cart_item_id = Column(String(36), primary_key=True, default=new_id)
    cart_id = Column(String(36), ForeignKey("carts.cart_id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.product_id"), nullable=False)
    size_ml = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)  # cena z momentu dodania

    gift_wrap = Column(Boolean, nullable=False, default=False)
    sample_included = Column(Boolean, nullable=False, default=False)
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "size_ml", name="u_cart_product_size"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity"),
    )

    @property
    def line_total(self):
        return self.unit_price * self.quantity
