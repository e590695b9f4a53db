#storefront/data/models/cart.py
from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models._ids import new_id
from storefront.domain.identity import GuestIdentity, Identity, UserIdentity
from storefront.utils.timeutils import utcnow


class CartModel(Base):
    __tablename__ = "carts"

    cart_id = Column(String(36), primary_key=True, default=new_id)

    #dokladnie jedno z dwoch: zalogowany user albo sesja goscia
    user_id = Column(String(36), nullable=True)
    session_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_cart_single_owner",
        ),
        # jeden koszyk na wlasciciela - dwa rownolegle pierwsze add nie zrobia dwoch koszykow
        Index(
            "u_cart_user",
            "user_id",
            unique=True,
            sqlite_where=text("user_id IS NOT NULL"),
            postgresql_where=text("user_id IS NOT NULL"),
        ),
        Index(
            "u_cart_session",
            "session_id",
            unique=True,
            sqlite_where=text("session_id IS NOT NULL"),
            postgresql_where=text("session_id IS NOT NULL"),
        ),
    )

    @property
    def owner(self) -> Identity:
        if self.user_id is not None:
            return UserIdentity(self.user_id)
        return GuestIdentity(self.session_id)
