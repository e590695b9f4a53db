from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.gift_card import GiftCardModel, GiftCardTransactionModel


class GiftCardRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_code(self, gift_card_code: str) -> GiftCardModel | None:
        return self.db.execute(
            select(GiftCardModel).where(GiftCardModel.gift_card_code == gift_card_code)
        ).scalar_one_or_none()

    def get_by_code_for_update(self, gift_card_code: str) -> GiftCardModel | None:
        # blokada wiersza do konca transakcji (na sqlite ignorowana)
        return self.db.execute(
            select(GiftCardModel)
            .where(GiftCardModel.gift_card_code == gift_card_code)
            .with_for_update()
        ).scalar_one_or_none()

    def code_exists(self, gift_card_code: str) -> bool:
        return self.get_by_code(gift_card_code) is not None

    def create(self, card: GiftCardModel) -> GiftCardModel:
        self.db.add(card)
        self.db.flush()
        return card

    def add_transaction(self, tx: GiftCardTransactionModel) -> GiftCardTransactionModel:
        self.db.add(tx)
        self.db.flush()
        return tx


    def list_for_user(self, user_id: str) -> list[GiftCardModel]:
        return list(
            self.db.execute(
                select(GiftCardModel)
                .where(GiftCardModel.purchaser_user_id == user_id)
                .order_by(GiftCardModel.created_at.desc())
            ).scalars()
        )
