"""
storefront/services/pricing.py - Effective price and sale status of a product.

Both functions re-evaluate the raw discount window on every call; nothing is cached,
since `now` keeps moving. A malformed window (end before start, or a missing bound on
an active discount) is treated as no discount at all.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from storefront.schemas.product import Discount, ProductSnapshot


class PriceQuote(BaseModel):
    price: float
    final_price: float
    on_sale: bool


def _as_utc(dt: datetime) -> datetime:
    # naive datetimes are taken to be UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def _window_valid(discount: Discount) -> bool:
    if discount.start_at is None or discount.end_at is None:
        return False
    return _as_utc(discount.start_at) <= _as_utc(discount.end_at)


def _is_window_active(discount: Optional[Discount], now: datetime) -> bool:
    if discount is None or not discount.active or not _window_valid(discount):
        return False
    now = _as_utc(now)
    return _as_utc(discount.start_at) <= now <= _as_utc(discount.end_at)


def is_on_sale(product: ProductSnapshot, now: datetime) -> bool:
    return _is_window_active(product.discount, now)


def effective_price(product: ProductSnapshot, now: datetime) -> float:
    """List price with the discount applied if it is active and `now` is inside its window."""
    discount = product.discount
    if not _is_window_active(discount, now):
        return product.price

    if discount.kind == "percentage":
        return max(0.0, product.price * (1 - discount.value / 100))
    return max(0.0, product.price - discount.value)


def quote(product: ProductSnapshot, now: datetime) -> PriceQuote:
    return PriceQuote(
        price=product.price,
        final_price=effective_price(product, now),
        on_sale=is_on_sale(product, now),
    )
