# storefront/services/inventory_ledger.py
from sqlalchemy.orm import Session

from storefront.data.models.inventory import InventoryTrackingModel
from storefront.exceptions import InsufficientStock
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    """
    Licznik reserved_quantity per (produkt, pojemnosc).

    Dziala w transakcji wywolujacego - nic tu nie commituje, wiec rollback
    zamowienia cofa tez rezerwacje i wpisy w inventory_tracking.
    """

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogRepo(db)

    def reserve(
        self,
        product_id: str,
        size_ml: int,
        quantity: int,
        reference_id: str | None = None,
        reference_type: str = "order",
    ) -> int:
        if quantity <= 0:
            raise ValueError("Ilosc do rezerwacji musi byc wieksza niz 0")

        # stock - reserved >= quantity sprawdzane w tym samym UPDATE
        rowcount = self.catalog.increment_reserved(product_id, size_ml, quantity)
        if rowcount == 0:
            logger.warning(
                f"Brak stanu dla {product_id}/{size_ml}ml, proba rezerwacji {quantity}"
            )
            raise InsufficientStock(product_id, size_ml, quantity)

        reserved_after = self.catalog.get_size(product_id, size_ml).reserved_quantity
        self._track("reservation", product_id, size_ml, quantity, reserved_after, reference_type, reference_id)

        logger.info(
            f"Zarezerwowano {quantity} szt. {product_id}/{size_ml}ml, reserved={reserved_after}"
        )
        return reserved_after

    def release(
        self,
        product_id: str,
        size_ml: int,
        quantity: int,
        reference_id: str | None = None,
        reference_type: str = "order",
    ) -> int:
        """Odwrotnosc reserve(), nie schodzi ponizej zera."""
        if quantity <= 0:
            raise ValueError("Ilosc do zwolnienia musi byc wieksza niz 0")

        size = self.catalog.get_size(product_id, size_ml)
        if size is None:
            logger.warning(f"Zwolnienie rezerwacji dla nieistniejacego {product_id}/{size_ml}ml")
            return 0

        released = min(quantity, size.reserved_quantity)
        self.catalog.decrement_reserved(product_id, size_ml, quantity)

        reserved_after = self.catalog.get_size(product_id, size_ml).reserved_quantity
        self._track("release", product_id, size_ml, -released, reserved_after, reference_type, reference_id)

        logger.info(
            f"Zwolniono {released} szt. {product_id}/{size_ml}ml, reserved={reserved_after}"
        )
        return reserved_after

    def _track(self, change_type, product_id, size_ml, change, after, reference_type, reference_id):
        self.db.add(
            InventoryTrackingModel(
                product_id=product_id,
                size_ml=size_ml,
                change_type=change_type,
                quantity_change=change,
                quantity_after=after,
                reference_type=reference_type,
                reference_id=reference_id,
            )
        )
