from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class PromotionModel(Base):
    __tablename__ = "promotions"

    promotion_id = Column(String(36), primary_key=True, default=new_id)
    promotion_code = Column(String(64), nullable=False, unique=True)
    promotion_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    discount_type = Column(String(32), nullable=False)  # percentage, fixed_amount, free_shipping
    discount_value = Column(Numeric(10, 2), nullable=False)
    minimum_order_amount = Column(Numeric(10, 2), nullable=True)
    maximum_discount = Column(Numeric(10, 2), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    usage_limit = Column(Integer, nullable=True)
    current_usage = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class PromotionUseModel(Base):
    __tablename__ = "promotion_uses"

    promotion_use_id = Column(String(36), primary_key=True, default=new_id)
    promotion_id = Column(String(36), ForeignKey("promotions.promotion_id"), nullable=False)
    order_id = Column(String(36), ForeignKey("orders.order_id"), nullable=False)
    user_id = Column(String(36), nullable=True)
    discount_amount = Column(Numeric(10, 2), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
