# storefront/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderItemModel, OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order_with_items(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.order_id == order_id)
        ).scalar_one_or_none()

    def find_by_number(self, order_number: str, email: str | None = None) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.order_number == order_number)
        if email:
            stmt = stmt.where(func.lower(OrderModel.customer_email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list_user_orders(
        self,
        user_id: str,
        order_status: str | None = None,
        payment_status: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[OrderModel], int]:
        conditions = [OrderModel.user_id == user_id]
        if order_status:
            conditions.append(OrderModel.order_status == order_status)
        if payment_status:
            conditions.append(OrderModel.payment_status == payment_status)
        if date_from:
            conditions.append(OrderModel.created_at >= date_from)
        if date_to:
            conditions.append(OrderModel.created_at <= date_to)

        total = self.db.execute(
            select(func.count()).select_from(OrderModel).where(*conditions)
        ).scalar_one()

        orders = list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(*conditions)
                .order_by(OrderModel.created_at.desc())
                .limit(limit)
                .offset(offset)
            ).scalars()
        )
        return orders, total

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
