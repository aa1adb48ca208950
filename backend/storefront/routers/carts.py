"""
storefront/routers/carts.py
Cart endpoints, one cart per `X-Session-Id`: get, add by product id, set quantity, remove one, clear.

Behavior
- Add looks the product up in the catalog and freezes name, stock and the effective price
  (discount applied if active right now) into the cart item. Later catalog changes do not
  touch items already in the cart.
- Every response carries the cart's items, total, count and the notification messages the
  operation produced (e.g. "Milk added to cart").
- Going over the frozen stock answers 409 and leaves the cart as it was.
"""
from datetime import datetime, timezone
from typing import Tuple

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.config import settings
from storefront.core.deps import StoreFactory, get_cart_store_factory, get_catalog, get_session_id
from storefront.core.errors import OutOfStock, ProductNotFound, StockExceeded
from storefront.schemas.cart import AddItemBody, CartOut, UpdateQuantityBody
from storefront.services.cart_store import CartStore, snapshot_for_cart
from storefront.services.catalog import Catalog
from storefront.services.notifications import NotificationCollector, fan_out, log_notifier
from storefront.services.pricing import effective_price

router = APIRouter(prefix="/cart", tags=["Cart"])


def _open_cart(
    session_id: str = Depends(get_session_id),
    stores: StoreFactory = Depends(get_cart_store_factory),
) -> Tuple[CartStore, NotificationCollector]:
    collector = NotificationCollector()
    cart = CartStore.open(
        stores(session_id),
        notify=fan_out(collector, log_notifier),
        storage_key=settings.cart_storage_key,
    )
    return cart, collector


def _out(cart: CartStore, collector: NotificationCollector) -> CartOut:
    return CartOut(
        items=cart.items,
        total=cart.total(),
        count=cart.count(),
        notifications=collector.messages(),
    )


def _stock_conflict(e: StockExceeded, collector: NotificationCollector) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": str(e),
            "product_id": e.product_id,
            "stock": e.stock,
            "requested": e.requested,
            "notifications": collector.messages(),
        },
    )


@router.get("", response_model=CartOut)
@router.get("/", response_model=CartOut, include_in_schema=False)
def get_cart(opened: Tuple[CartStore, NotificationCollector] = Depends(_open_cart)):
    return _out(*opened)


@router.post("/items", response_model=CartOut)
def add_to_cart(
    payload: AddItemBody,
    opened: Tuple[CartStore, NotificationCollector] = Depends(_open_cart),
    catalog: Catalog = Depends(get_catalog),
):
    cart, collector = opened
    try:
        product = catalog.get_by_id(payload.product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")

    price = effective_price(product, datetime.now(timezone.utc))
    try:
        cart.add(snapshot_for_cart(product, price=price))
    except OutOfStock:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product is out of stock")
    except StockExceeded as e:
        raise _stock_conflict(e, collector)
    return _out(cart, collector)


@router.put("/items/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: str,
    payload: UpdateQuantityBody,
    opened: Tuple[CartStore, NotificationCollector] = Depends(_open_cart),
):
    """Set an item's quantity; 0 or less removes it."""
    cart, collector = opened
    try:
        cart.update_quantity(product_id, payload.quantity)
    except StockExceeded as e:
        raise _stock_conflict(e, collector)
    return _out(cart, collector)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_cart_item(product_id: str, opened: Tuple[CartStore, NotificationCollector] = Depends(_open_cart)):
    """Remove one line; removing something that is not in the cart is not an error."""
    cart, collector = opened
    cart.remove(product_id)
    return _out(cart, collector)


@router.delete("", response_model=CartOut)
@router.delete("/", response_model=CartOut, include_in_schema=False)
def clear_cart(opened: Tuple[CartStore, NotificationCollector] = Depends(_open_cart)):
    cart, collector = opened
    cart.clear()
    return _out(cart, collector)
