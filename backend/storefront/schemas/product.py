"""
# `storefront/schemas/product.py` — Product Schema Documentation

## Overview
Pydantic models for catalog products, their discount descriptor and the
price view shown to shoppers. Rating fields are derived from the review
collection (see `services/ratings.py`) and are never accepted as input.

---

## Stored Models

### `Discount`
| Field    | Type       | Description |
|----------|------------|-------------|
| kind     | `percentage` / `fixed` | How `value` is applied |
| value    | `float`    | Percent (0-100] or fixed amount (>0) |
| start_at | `datetime` / `null` | Window start (inclusive) |
| end_at   | `datetime` / `null` | Window end (inclusive) |
| active   | `bool`     | Manual on/off switch |

### `ProductSnapshot`
What the catalog hands to pricing and to the cart: id, name, price, stock,
discount, cached rating and review count, plus display fields.

### `ProductRecord`
A snapshot plus its embedded `reviews`; this is what repositories store.

---

## Input Models

### `ProductIn`
Admin create/update body. No rating fields.

### `DiscountIn`
Admin discount body. Window and value are validated by `Catalog.set_discount`,
not here, so a bad window surfaces as `InvalidDiscountWindow`.

---

## Output Models

### `ProductOut`
Snapshot plus `final_price` (effective price right now) and `on_sale`.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.schemas.review import Review

DiscountKind = Literal["percentage", "fixed"]


class Discount(BaseModel):
    kind: DiscountKind = Field(..., description="percentage | fixed")
    value: float = Field(..., ge=0, description="Percent off or fixed amount off")
    start_at: Optional[datetime] = Field(None, description="Window start (inclusive)")
    end_at: Optional[datetime] = Field(None, description="Window end (inclusive)")
    active: bool = Field(False, description="Whether the discount is switched on")


class ProductSnapshot(BaseModel):
    """Product fields relevant to pricing, rating display and the cart."""
    id: str
    name: str
    price: float = Field(..., ge=0, description="List price")
    stock: int = Field(0, ge=0, description="Available stock")
    discount: Optional[Discount] = None
    rating: float = Field(0, ge=0, le=5, description="Cached average rating (derived)")
    review_count: int = Field(0, ge=0, description="Cached review count (derived)")

    category: str = ""
    unit: str = "piece"
    sku: Optional[str] = None
    images: List[str] = []
    is_active: bool = True

    def is_in_stock(self) -> bool:
        return self.stock > 0


class ProductRecord(ProductSnapshot):
    reviews: List[Review] = Field(default_factory=list)

    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot.model_validate(self.model_dump(exclude={"reviews"}))


class ProductIn(BaseModel):
    """Schema for creating/updating a product (admin)."""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    price: float = Field(..., ge=0, description="List price")
    stock: int = Field(..., ge=0, description="Stock")
    category: str = Field(..., min_length=1, description="Category name")
    unit: str = Field("piece", description="kg, g, liter, ml, piece, pack, dozen, bunch")
    sku: Optional[str] = Field(None, description="Generated from the category when missing")
    images: List[str] = Field(default_factory=list)
    is_active: bool = True


class DiscountIn(BaseModel):
    kind: DiscountKind = "percentage"
    value: float
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    active: bool = True


class ProductOut(ProductSnapshot):
    final_price: float = Field(..., description="Effective price right now")
    on_sale: bool = False

    model_config = {"from_attributes": True}
