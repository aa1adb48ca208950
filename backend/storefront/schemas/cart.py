"""
storefront/schemas/cart.py - Pydantic models for Cart.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

CartEventKind = Literal["item_added", "quantity_updated", "item_removed", "cart_cleared", "stock_exceeded"]


class CartItem(BaseModel):
    """Product fields frozen when the item was added, plus the selected quantity."""
    id: str = Field(..., min_length=1, description="ID of the product")
    name: str = Field(..., description="Name of the product")
    price: float = Field(..., ge=0, description="Price per unit at the time of adding to cart")
    stock: int = Field(..., ge=1, description="Stock ceiling at the time of adding to cart")
    quantity: int = Field(..., ge=1, description="Quantity of the product in the cart")
    image: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None

    # any further snapshotted product fields are kept as-is
    model_config = {"extra": "allow", "validate_assignment": True}

    @model_validator(mode="after")
    def _quantity_within_stock(self):
        if self.quantity > self.stock:
            raise ValueError(f"quantity {self.quantity} exceeds stock {self.stock}")
        return self


class CartEvent(BaseModel):
    kind: CartEventKind
    product_id: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[int] = None
    stock: Optional[int] = None


class AddItemBody(BaseModel):
    """Add to cart by product ID."""
    product_id: str = Field(..., min_length=1, description="Product ID (the same 'id' you see in /products).")


class UpdateQuantityBody(BaseModel):
    quantity: int = Field(..., description="New quantity; 0 or less removes the item")


class CartOut(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    total: float = 0
    count: int = 0
    notifications: List[str] = Field(default_factory=list)
