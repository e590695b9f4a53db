from sqlalchemy import Column, DateTime, Integer, String

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class InventoryTrackingModel(Base):
    __tablename__ = "inventory_tracking"

    tracking_id = Column(String(36), primary_key=True, default=new_id)
    product_id = Column(String(36), nullable=False, index=True)
    size_ml = Column(Integer, nullable=False)

    change_type = Column(String(32), nullable=False)  # reservation, release
    quantity_change = Column(Integer, nullable=False)
    quantity_after = Column(Integer, nullable=False)  # reserved_quantity po zmianie

    reference_type = Column(String(32), nullable=True)
    reference_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
