from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_identity
from storefront.data.database import get_db
from storefront.domain.identity import Identity, UserIdentity
from storefront.domain.schemas import (
    GiftCardBalanceOut,
    GiftCardCreate,
    GiftCardOut,
    GiftCardRedeemIn,
    GiftCardRedeemOut,
)
from storefront.services.gift_card_service import GiftCardService

router = APIRouter(prefix="/gift-cards", tags=["gift-cards"])


def get_service(db: Session = Depends(get_db)) -> GiftCardService:
    return GiftCardService(db)


@router.get("", response_model=List[GiftCardOut])
def list_my_gift_cards(
    identity: Identity | None = Depends(get_identity),
    svc: GiftCardService = Depends(get_service),
):
    """Karty kupione przez zalogowanego klienta, najnowsze pierwsze."""
    return svc.list_for_user(identity)


@router.post("", response_model=GiftCardOut, status_code=201)
def create_gift_card(
    payload: GiftCardCreate,
    identity: Identity | None = Depends(get_identity),
    svc: GiftCardService = Depends(get_service),
):
    return svc.create(
        initial_amount=payload.initial_amount,
        purchaser_email=payload.purchaser_email,
        recipient_email=payload.recipient_email,
        recipient_name=payload.recipient_name,
        gift_message=payload.gift_message,
        purchaser_user_id=identity.user_id if isinstance(identity, UserIdentity) else None,
    )


@router.get("/{gift_card_code}/balance", response_model=GiftCardBalanceOut)
def gift_card_balance(gift_card_code: str, svc: GiftCardService = Depends(get_service)):
    return svc.balance(gift_card_code)


@router.post("/{gift_card_code}/redeem", response_model=GiftCardRedeemOut)
def redeem_gift_card(
    gift_card_code: str,
    payload: GiftCardRedeemIn,
    svc: GiftCardService = Depends(get_service),
):
    return svc.redeem(gift_card_code, payload.order_id, payload.amount)
