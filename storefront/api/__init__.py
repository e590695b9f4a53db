# storefront/api/__init__.py
from fastapi import APIRouter

from storefront.api.routers import cart, gift_cards, health, orders, products, promotions

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router)
api_router.include_router(products.router)
api_router.include_router(cart.router)
api_router.include_router(orders.router)
api_router.include_router(promotions.router)
api_router.include_router(gift_cards.router)
