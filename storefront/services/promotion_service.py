# storefront/services/promotion_service.py
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.promotion import PromotionModel, PromotionUseModel
from storefront.exceptions import PromotionInvalid, ValidationError
from storefront.repos.promotion_repo import PromotionRepo
from storefront.utils.logging import get_logger
from storefront.utils.timeutils import as_utc, utcnow

logger = get_logger(__name__)

CENTS = Decimal("0.01")


class PromotionService:
    def __init__(self, db: Session):
        self.repo = PromotionRepo(db)

    def validate(self, promotion_code: str | None, order_total: Decimal) -> Dict[str, Any]:
        """
        Sprawdza kod i liczy rabat. Niewazny kod to nie blad HTTP -
        frontend dostaje is_valid=False i komunikat.
        """
        if not promotion_code:
            raise ValidationError("Promotion code is required", "PROMOTION_CODE_REQUIRED")

        promotion = self.repo.get_active_by_code(promotion_code)
        if not promotion:
            return self._invalid(None, "Invalid promotion code")

        error = self._check_rules(promotion, order_total)
        if error:
            return self._invalid(promotion, error)

        return {
            "is_valid": True,
            "discount_amount": self.discount_for(promotion, order_total),
            "discount_type": promotion.discount_type,
            "promotion": promotion,
            "error_message": None,
        }

    def list_active(self) -> list[PromotionModel]:
        return self.repo.list_active(utcnow())

    def apply_to_order(self, promotion_code: str, order_id: str, user_id: str, order_total: Decimal) -> Decimal:
        """
        Wywolywane w transakcji checkoutu: zapisuje uzycie i podbija current_usage.
        Nic nie commituje.
        """
        promotion = self.repo.get_active_by_code(promotion_code)
        if not promotion:
            raise PromotionInvalid(promotion_code, "Invalid promotion code")

        error = self._check_rules(promotion, order_total)
        if error:
            raise PromotionInvalid(promotion_code, error)

        discount = self.discount_for(promotion, order_total)
        recorded = self.repo.record_use(
            PromotionUseModel(
                promotion_id=promotion.promotion_id,
                order_id=order_id,
                user_id=user_id,
                discount_amount=discount,
            )
        )
        if not recorded:
            raise PromotionInvalid(promotion_code, "Promotion code usage limit reached")

        logger.info(f"Promocja {promotion.promotion_code} uzyta w zamowieniu {order_id}, rabat {discount}")
        return discount

    @staticmethod
    def _check_rules(promotion: PromotionModel, order_total: Decimal) -> str | None:
        now = utcnow()
        if now < as_utc(promotion.start_date) or now > as_utc(promotion.end_date):
            return "Promotion code has expired or is not yet active"

        if promotion.usage_limit is not None and promotion.current_usage >= promotion.usage_limit:
            return "Promotion code usage limit reached"

        if promotion.minimum_order_amount is not None and order_total < promotion.minimum_order_amount:
            return f"Minimum order amount of ${promotion.minimum_order_amount} required"

        return None

    @staticmethod
    def discount_for(promotion: PromotionModel, order_total: Decimal) -> Decimal:
        if promotion.discount_type == "percentage":
            discount = order_total * promotion.discount_value / Decimal(100)
            if promotion.maximum_discount is not None:
                discount = min(discount, promotion.maximum_discount)
        elif promotion.discount_type == "fixed_amount":
            discount = promotion.discount_value
        else:
            # free_shipping - rabat na wysylke liczy osobno frontend
            discount = Decimal("0")

        return Decimal(discount).quantize(CENTS, rounding=ROUND_HALF_UP)

    @staticmethod
    def _invalid(promotion: PromotionModel | None, message: str) -> Dict[str, Any]:
        return {
            "is_valid": False,
            "discount_amount": Decimal("0.00"),
            "discount_type": None,
            "promotion": promotion,
            "error_message": message,
        }
