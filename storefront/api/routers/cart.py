#storefront/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_identity, get_lock_service, require_identity
from storefront.data.database import get_db
from storefront.domain.identity import GuestIdentity, Identity, UserIdentity
from storefront.domain.schemas import (
    CartCreateIn,
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    CartMergeIn,
    CartOut,
    MessageOut,
)
from storefront.exceptions import IdentityRequired, ValidationError
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, lock_service=lock_service)


@router.get("", response_model=CartOut)
def get_cart(
    identity: Identity | None = Depends(get_identity),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(identity)


@router.post("", response_model=CartOut, status_code=201)
def create_cart(
    payload: CartCreateIn | None = None,
    identity: Identity | None = Depends(get_identity),
    svc: CartService = Depends(get_service),
):
    if identity is None and payload and payload.session_id:
        identity = GuestIdentity(payload.session_id)
    if identity is None:
        raise IdentityRequired()
    return svc.create_cart(identity)


@router.post("/items", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    identity: Identity = Depends(require_identity),
    svc: CartService = Depends(get_service),
):
    return svc.add_item(
        identity,
        product_id=payload.product_id,
        size_ml=payload.size_ml,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        gift_wrap=payload.gift_wrap,
        sample_included=payload.sample_included,
    )


@router.put("/items/{cart_item_id}", response_model=CartItemOut | MessageOut)
def update_item(
    cart_item_id: str,
    payload: CartItemUpdate,
    identity: Identity | None = Depends(get_identity),
    svc: CartService = Depends(get_service),
):
    item = svc.update_item(
        identity,
        cart_item_id,
        quantity=payload.quantity,
        gift_wrap=payload.gift_wrap,
        sample_included=payload.sample_included,
    )
    if item is None:
        return MessageOut(message="Item removed from cart")
    return CartItemOut.model_validate(item)


@router.delete("/items/{cart_item_id}", response_model=MessageOut)
def remove_item(
    cart_item_id: str,
    identity: Identity | None = Depends(get_identity),
    svc: CartService = Depends(get_service),
):
    svc.remove_item(identity, cart_item_id)
    return MessageOut(message="Item removed from cart successfully")


@router.delete("/clear", response_model=MessageOut)
def clear_cart(
    identity: Identity = Depends(require_identity),
    svc: CartService = Depends(get_service),
):
    svc.clear(identity)
    return MessageOut(message="Cart cleared successfully")


@router.post("/merge", response_model=CartOut)
def merge_cart(
    payload: CartMergeIn,
    identity: Identity = Depends(require_identity),
    svc: CartService = Depends(get_service),
):
    """Po zalogowaniu: koszyk goscia (session_id z body) trafia do koszyka usera."""
    if not isinstance(identity, UserIdentity):
        raise ValidationError("Merging a cart requires user_id", "AUTH_REQUIRED_FOR_MERGE")
    return svc.merge_guest_cart(identity.user_id, payload.session_id)
