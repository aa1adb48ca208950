"""
storefront/core/errors.py - Domain exceptions raised by the commerce core.

Routers translate these to HTTP responses; the core itself never imports FastAPI.
"""
from typing import Optional


class StorefrontError(Exception):
    """Base class for every error the commerce core raises."""


class StockExceeded(StorefrontError):
    """Requested quantity is above the stock captured in the cart item's snapshot."""

    def __init__(self, product_id: str, name: str, stock: int, requested: int):
        self.product_id = product_id
        self.name = name
        self.stock = stock
        self.requested = requested
        super().__init__(f"Only {stock} items available in stock")


class OutOfStock(StorefrontError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is out of stock")


class CorruptPersistedState(StorefrontError):
    """Persisted cart payload could not be decoded into a cart."""


class InvalidDiscount(StorefrontError, ValueError):
    """Discount descriptor rejected at authoring time."""


class InvalidDiscountWindow(InvalidDiscount):
    """End before start, or missing bounds on an active discount."""


class ProductNotFound(StorefrontError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class ReviewNotFound(StorefrontError):
    def __init__(self, product_id: str, review_id: Optional[str] = None):
        self.product_id = product_id
        self.review_id = review_id
        super().__init__(f"Review not found: {review_id} (product {product_id})")
