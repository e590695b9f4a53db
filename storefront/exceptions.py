"""
Storefront exception hierarchy.

Every error the API reports carries a stable machine-readable ``error_code``
and the HTTP status it maps to. Services raise these, the exception handlers
in ``storefront.main`` turn them into the standard error body.
"""


class StorefrontError(Exception):
    """
    Base exception for all storefront errors.

    Attributes:
        message: Human-readable error message
        error_code: Stable code the frontend maps to a toast / inline message
        status_code: HTTP status returned to the caller
        details: Optional dict with additional context (ids, quantities)
    """

    status_code = 400
    error_code = "BAD_REQUEST"

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ValidationError(StorefrontError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class IdentityRequired(ValidationError):
    def __init__(self):
        super().__init__("Either user_id or session_id is required", "IDENTITY_REQUIRED")


class NotFound(StorefrontError):
    status_code = 404
    error_code = "NOT_FOUND"


class CartItemNotFound(NotFound):
    def __init__(self, cart_item_id: str):
        super().__init__(
            "Cart item not found",
            "CART_ITEM_NOT_FOUND",
            details={"cart_item_id": cart_item_id},
        )
        self.cart_item_id = cart_item_id


class OrderNotFound(NotFound):
    def __init__(self, message: str = "Order not found", **details):
        super().__init__(message, "ORDER_NOT_FOUND", details=details)


class GiftCardNotFound(NotFound):
    def __init__(self, gift_card_code: str):
        super().__init__(
            "Gift card not found",
            "GIFT_CARD_NOT_FOUND",
            details={"gift_card_code": gift_card_code},
        )


class ProductNotFound(NotFound):
    def __init__(self, product_id: str):
        super().__init__("Product not found", "PRODUCT_NOT_FOUND", details={"product_id": product_id})


class AccessDenied(StorefrontError):
    status_code = 403
    error_code = "ACCESS_DENIED"

    def __init__(self, message: str = "Access denied", **details):
        super().__init__(message, details=details)


class BusinessRuleViolation(StorefrontError):
    """Raised for domain rules (stock, availability, balances); always 400."""

    status_code = 400


class ProductSizeNotAvailable(BusinessRuleViolation):
    def __init__(self, product_id: str, size_ml: int):
        super().__init__(
            "Product size not available",
            "PRODUCT_SIZE_NOT_AVAILABLE",
            details={"product_id": product_id, "size_ml": size_ml},
        )


class ProductOutOfStock(BusinessRuleViolation):
    def __init__(self, product_id: str):
        super().__init__("Product not in stock", "PRODUCT_OUT_OF_STOCK", details={"product_id": product_id})


class InsufficientStock(BusinessRuleViolation):
    def __init__(self, product_id: str, size_ml: int, requested: int):
        super().__init__(
            "Insufficient stock",
            "INSUFFICIENT_STOCK",
            details={"product_id": product_id, "size_ml": size_ml, "requested": requested},
        )
        self.product_id = product_id
        self.size_ml = size_ml
        self.requested = requested


class PriceChanged(BusinessRuleViolation):
    def __init__(self, product_id: str, size_ml: int, unit_price, current_price):
        super().__init__(
            "Price changed since the item was added to the cart",
            "PRICE_CHANGED",
            details={
                "product_id": product_id,
                "size_ml": size_ml,
                "unit_price": str(unit_price),
                "current_price": str(current_price),
            },
        )


class EmptyCart(BusinessRuleViolation):
    def __init__(self, user_id: str):
        super().__init__("Cart is empty", "CART_EMPTY", details={"user_id": user_id})


class CheckoutRequiresAccount(BusinessRuleViolation):
    def __init__(self):
        super().__init__("Checkout requires an authenticated user", "AUTH_REQUIRED_FOR_CHECKOUT")


class AuthenticationRequired(BusinessRuleViolation):
    def __init__(self, action: str):
        super().__init__(f"{action} requires user_id", "AUTH_REQUIRED")


class InvalidOrderState(BusinessRuleViolation):
    def __init__(self, order_id: str, current_state: str, required_state: str):
        super().__init__(
            f"Order {order_id} is {current_state}, expected {required_state}",
            "INVALID_ORDER_STATE",
            details={"order_id": order_id, "current_state": current_state, "required_state": required_state},
        )


class PromotionInvalid(BusinessRuleViolation):
    def __init__(self, promotion_code: str, reason: str):
        super().__init__(reason, "PROMOTION_INVALID", details={"promotion_code": promotion_code})


class GiftCardError(BusinessRuleViolation):
    """Inactive / expired cards and insufficient balance; error_code is passed by the caller."""


class Conflict(StorefrontError):
    status_code = 409
    error_code = "CONFLICT"


class CartBusy(Conflict):
    def __init__(self, lock_key: str):
        super().__init__(
            "Cart is being modified by another request, retry shortly",
            "CART_BUSY",
            details={"lock_key": lock_key},
        )
