#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w Base.metadata

from storefront.data.models.catalog import BrandModel, ProductModel, ProductSizeModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.inventory import InventoryTrackingModel
from storefront.data.models.promotion import PromotionModel, PromotionUseModel
from storefront.data.models.gift_card import GiftCardModel, GiftCardTransactionModel

__all__ = [
    "BrandModel",
    "ProductModel",
    "ProductSizeModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "InventoryTrackingModel",
    "PromotionModel",
    "PromotionUseModel",
    "GiftCardModel",
    "GiftCardTransactionModel",
]
