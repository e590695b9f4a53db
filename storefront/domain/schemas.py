# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- koszyk

class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1)
    size_ml: int = Field(..., gt=0, description="Pojemnosc flakonu w ml")
    quantity: int = Field(1, gt=0)
    unit_price: Decimal = Field(..., gt=0, description="Cena widziana przez klienta w chwili dodania")
    gift_wrap: bool = False
    sample_included: bool = False


class CartItemUpdate(BaseModel):
    """quantity == 0 usuwa linie."""

    quantity: Optional[int] = Field(None, ge=0)
    gift_wrap: Optional[bool] = None
    sample_included: Optional[bool] = None


class CartCreateIn(BaseModel):
    session_id: Optional[str] = None


class CartMergeIn(BaseModel):
    session_id: str = Field(..., min_length=1)


class CartItemOut(BaseModel):
    cart_item_id: str
    cart_id: str
    product_id: str
    size_ml: int
    quantity: int
    unit_price: Decimal
    gift_wrap: bool
    sample_included: bool
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(CartItemOut):
    """Linia koszyka z aktualnymi danymi katalogu."""

    line_total: Decimal
    product_name: Optional[str] = None
    brand_name: Optional[str] = None
    availability_status: Optional[str] = None
    stock_quantity: Optional[int] = None
    current_price: Optional[Decimal] = None
    is_price_changed: bool = False


class CartOut(BaseModel):
    cart_id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[CartLineOut] = []
    subtotal: Decimal = Decimal("0.00")
    item_count: int = 0


# ---------------------------------------------------------------- katalog

class ProductSizeOut(BaseModel):
    product_id: str
    size_ml: int
    price: Decimal
    sale_price: Optional[Decimal] = None
    stock_quantity: int
    reserved_quantity: int
    available_quantity: int
    sku: str

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- zamowienia

class OrderCreate(BaseModel):
    """Sumy liczy frontend (podatek i wysylka to zewnetrzne serwisy)."""

    subtotal: Decimal = Field(..., ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    shipping_cost: Decimal = Field(Decimal("0"), ge=0)
    discount_amount: Decimal = Field(Decimal("0"), ge=0)
    total_amount: Decimal = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    shipping_address_id: str = Field(..., min_length=1)
    billing_address_id: str = Field(..., min_length=1)
    shipping_method_id: str = Field(..., min_length=1)
    payment_method_id: Optional[str] = None

    gift_message: Optional[str] = Field(None, max_length=500)
    special_instructions: Optional[str] = Field(None, max_length=500)
    customer_email: EmailStr
    customer_phone: Optional[str] = None

    promotion_code: Optional[str] = None
    gift_card_code: Optional[str] = None
    gift_card_amount: Optional[Decimal] = Field(None, gt=0)


class OrderItemOut(BaseModel):
    order_item_id: str
    product_id: str
    product_name: str
    brand_name: str
    size_ml: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    gift_wrap: bool
    sample_included: bool
    sku: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    order_id: str
    user_id: str
    order_number: str
    order_status: str
    payment_status: str
    fulfillment_status: str
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str
    shipping_address_id: str
    billing_address_id: str
    shipping_method_id: str
    payment_method_id: Optional[str] = None
    gift_message: Optional[str] = None
    special_instructions: Optional[str] = None
    customer_email: str
    customer_phone: Optional[str] = None
    promotion_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderOut):
    items: List[OrderItemOut] = []


class Pagination(BaseModel):
    total: int
    page: int
    per_page: int
    total_pages: int
    has_next: bool
    has_prev: bool


class OrderListOut(BaseModel):
    data: List[OrderDetailOut]
    pagination: Pagination


# ---------------------------------------------------------------- promocje

class PromotionValidateIn(BaseModel):
    promotion_code: Optional[str] = None
    order_total: Decimal = Field(Decimal("0"), ge=0)


class PromotionOut(BaseModel):
    promotion_id: str
    promotion_code: str
    promotion_name: str
    discount_type: str
    discount_value: Decimal
    minimum_order_amount: Optional[Decimal] = None
    maximum_discount: Optional[Decimal] = None
    start_date: datetime
    end_date: datetime
    usage_limit: Optional[int] = None
    current_usage: int

    model_config = ConfigDict(from_attributes=True)


class PromotionValidationOut(BaseModel):
    is_valid: bool
    discount_amount: Decimal
    discount_type: Optional[str] = None
    promotion: Optional[PromotionOut] = None
    error_message: Optional[str] = None


# ---------------------------------------------------------------- karty podarunkowe

class GiftCardCreate(BaseModel):
    initial_amount: Optional[Decimal] = None
    purchaser_email: Optional[EmailStr] = None
    recipient_email: Optional[EmailStr] = None
    recipient_name: Optional[str] = None
    gift_message: Optional[str] = Field(None, max_length=500)


class GiftCardOut(BaseModel):
    gift_card_id: str
    gift_card_code: str
    initial_amount: Decimal
    current_balance: Decimal
    currency: str
    purchaser_email: str
    recipient_email: Optional[str] = None
    recipient_name: Optional[str] = None
    expiry_date: Optional[datetime] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GiftCardBalanceOut(BaseModel):
    current_balance: Decimal
    currency: str
    is_active: bool
    expiry_date: Optional[datetime] = None


class GiftCardRedeemIn(BaseModel):
    order_id: Optional[str] = None
    amount: Optional[Decimal] = None


class GiftCardRedeemOut(BaseModel):
    redeemed_amount: Decimal
    remaining_balance: Decimal
