from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, Text

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.utils.timeutils import utcnow


class GiftCardModel(Base):
    __tablename__ = "gift_cards"

    gift_card_id = Column(String(36), primary_key=True, default=new_id)
    gift_card_code = Column(String(32), nullable=False, unique=True)

    initial_amount = Column(Numeric(10, 2), nullable=False)
    current_balance = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")

    purchaser_user_id = Column(String(36), nullable=True, index=True)
    purchaser_email = Column(String(255), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    recipient_name = Column(String(255), nullable=True)
    gift_message = Column(Text, nullable=True)

    expiry_date = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class GiftCardTransactionModel(Base):
    __tablename__ = "gift_card_transactions"

    transaction_id = Column(String(36), primary_key=True, default=new_id)
    gift_card_id = Column(String(36), ForeignKey("gift_cards.gift_card_id"), nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("orders.order_id"), nullable=True)

    transaction_type = Column(String(32), nullable=False)  # redemption
    amount = Column(Numeric(10, 2), nullable=False)  # ujemne przy redemption
    balance_after = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
