# storefront/services/gift_card_service.py
import secrets
import string
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.gift_card import GiftCardModel, GiftCardTransactionModel
from storefront.domain.identity import Identity, UserIdentity
from storefront.exceptions import AuthenticationRequired, GiftCardError, GiftCardNotFound, ValidationError
from storefront.repos.gift_card_repo import GiftCardRepo
from storefront.utils.logging import get_logger
from storefront.utils.timeutils import as_utc, utcnow

logger = get_logger(__name__)

MIN_AMOUNT = Decimal("10")
MAX_AMOUNT = Decimal("1000")
VALIDITY = timedelta(days=365)
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_gift_card_code() -> str:
    return "GC-" + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(12))


class GiftCardService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = GiftCardRepo(db)

    def create(
        self,
        initial_amount: Decimal | None,
        purchaser_email: str | None,
        recipient_email: str | None = None,
        recipient_name: str | None = None,
        gift_message: str | None = None,
        purchaser_user_id: str | None = None,
    ) -> GiftCardModel:
        if not initial_amount or not purchaser_email:
            raise ValidationError(
                "Initial amount and purchaser email are required", "REQUIRED_FIELDS_MISSING"
            )

        if initial_amount < MIN_AMOUNT or initial_amount > MAX_AMOUNT:
            raise ValidationError(
                f"Gift card amount must be between ${MIN_AMOUNT} and ${MAX_AMOUNT}", "INVALID_AMOUNT"
            )

        code = generate_gift_card_code()
        while self.repo.code_exists(code):
            code = generate_gift_card_code()

        card = self.repo.create(
            GiftCardModel(
                gift_card_code=code,
                initial_amount=initial_amount,
                current_balance=initial_amount,
                currency="USD",
                purchaser_user_id=purchaser_user_id,
                purchaser_email=purchaser_email,
                recipient_email=recipient_email,
                recipient_name=recipient_name,
                gift_message=gift_message,
                expiry_date=utcnow() + VALIDITY,
                is_active=True,
            )
        )
        self.db.commit()
        self.db.refresh(card)

        logger.info(f"Wystawiono karte {card.gift_card_id} na {initial_amount} USD")
        return card

    def list_for_user(self, identity: Identity | None) -> list[GiftCardModel]:
        if not isinstance(identity, UserIdentity):
            raise AuthenticationRequired("Listing gift cards")
        return self.repo.list_for_user(identity.user_id)

    def balance(self, gift_card_code: str) -> Dict[str, Any]:
        card = self.repo.get_by_code(gift_card_code)
        if not card:
            raise GiftCardNotFound(gift_card_code)

        return {
            "current_balance": card.current_balance,
            "currency": card.currency,
            "is_active": card.is_active and not self._is_expired(card),
            "expiry_date": card.expiry_date,
        }

    def redeem(self, gift_card_code: str, order_id: str | None, amount: Decimal | None) -> Dict[str, Any]:
        """Samodzielne uzycie karty (endpoint) - wlasna transakcja."""
        if not order_id or not amount:
            raise ValidationError("Order ID and amount are required", "REQUIRED_FIELDS_MISSING")

        try:
            remaining = self.debit(gift_card_code, order_id, amount)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return {"redeemed_amount": amount, "remaining_balance": remaining}

    def debit(self, gift_card_code: str, order_id: str | None, amount: Decimal) -> Decimal:
        """
        Obciaza karte w biezacej transakcji (SELECT ... FOR UPDATE).
        Nie commituje - checkout uzywa tego w swojej transakcji.
        """
        if amount <= 0:
            raise ValidationError("Amount must be greater than 0")

        card = self.repo.get_by_code_for_update(gift_card_code)
        if not card:
            raise GiftCardNotFound(gift_card_code)

        if not card.is_active:
            raise GiftCardError("Gift card is not active", "GIFT_CARD_INACTIVE")

        if self._is_expired(card):
            raise GiftCardError("Gift card has expired", "GIFT_CARD_EXPIRED")

        if card.current_balance < amount:
            raise GiftCardError("Insufficient gift card balance", "INSUFFICIENT_BALANCE")

        card.current_balance = card.current_balance - amount
        self.repo.add_transaction(
            GiftCardTransactionModel(
                gift_card_id=card.gift_card_id,
                order_id=order_id,
                transaction_type="redemption",
                amount=-amount,
                balance_after=card.current_balance,
            )
        )

        logger.info(f"Karta {card.gift_card_id}: -{amount}, saldo {card.current_balance}")
        return card.current_balance

    @staticmethod
    def _is_expired(card: GiftCardModel) -> bool:
        return card.expiry_date is not None and as_utc(card.expiry_date) < utcnow()
