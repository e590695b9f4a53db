from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.promotion import PromotionModel, PromotionUseModel


class PromotionRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_by_code(self, promotion_code: str) -> PromotionModel | None:
        return self.db.execute(
            select(PromotionModel).where(
                PromotionModel.promotion_code == promotion_code.upper(),
                PromotionModel.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def list_active(self, now: datetime) -> list[PromotionModel]:
        stmt = (
            select(PromotionModel)
            .where(
                PromotionModel.is_active.is_(True),
                PromotionModel.start_date <= now,
                PromotionModel.end_date >= now,
                or_(
                    PromotionModel.usage_limit.is_(None),
                    PromotionModel.current_usage < PromotionModel.usage_limit,
                ),
            )
            .order_by(PromotionModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def record_use(self, use: PromotionUseModel) -> bool:
        """
        Podbija current_usage tylko gdy limit nie jest wyczerpany.
        False - limit wyczerpany, nic nie zapisano.
        """
        result = self.db.execute(
            update(PromotionModel)
            .where(
                PromotionModel.promotion_id == use.promotion_id,
                or_(
                    PromotionModel.usage_limit.is_(None),
                    PromotionModel.current_usage < PromotionModel.usage_limit,
                ),
            )
            .values(current_usage=PromotionModel.current_usage + 1)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            return False

        self.db.add(use)
        self.db.flush()
        return True
