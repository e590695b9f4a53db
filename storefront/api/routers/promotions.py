from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import PromotionOut, PromotionValidateIn, PromotionValidationOut
from storefront.services.promotion_service import PromotionService

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get("/active", response_model=List[PromotionOut])
def list_active_promotions(db: Session = Depends(get_db)):
    return PromotionService(db).list_active()


@router.post("/validate", response_model=PromotionValidationOut)
def validate_promotion(payload: PromotionValidateIn, db: Session = Depends(get_db)):
    return PromotionService(db).validate(payload.promotion_code, payload.order_total)
