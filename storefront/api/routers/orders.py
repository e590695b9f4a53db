# storefront/api/routers/orders.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_identity
from storefront.data.database import get_db
from storefront.domain.identity import Identity
from storefront.domain.schemas import OrderCreate, OrderDetailOut, OrderListOut, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: Identity | None = Depends(get_identity),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamowienie z aktualnego koszyka zalogowanego klienta.
    Odpowiedz bez pozycji - po nie GET /orders/{order_id}.
    """
    return svc.create_order(identity, payload)


@router.get("", response_model=OrderListOut)
def list_orders(
    order_status: str | None = None,
    payment_status: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1),
    identity: Identity | None = Depends(get_identity),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(
        identity,
        order_status=order_status,
        payment_status=payment_status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        per_page=per_page,
    )


# przed /{order_id}, inaczej "track" zlapie sie jako id
@router.get("/track", response_model=OrderOut)
def track_order(
    order_number: str | None = None,
    email: str | None = None,
    svc: OrderService = Depends(get_service),
):
    return svc.track(order_number, email)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: str,
    identity: Identity | None = Depends(get_identity),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(identity, order_id)


@router.post("/{order_id}/cancel", response_model=OrderDetailOut)
def cancel_order(
    order_id: str,
    identity: Identity | None = Depends(get_identity),
    svc: OrderService = Depends(get_service),
):
    return svc.cancel_order(identity, order_id)
