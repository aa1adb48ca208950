"""
storefront/services/cart_store.py
The shopper's cart: one `CartStore` per session, passed to whoever needs it.

Behavior
- Items are product snapshots (price and stock frozen when first added) plus a quantity;
  at most one item per product id, kept in insertion order.
- Quantities stay within `1..stock` of the frozen snapshot; violations raise `StockExceeded`
  and leave the cart untouched.
- Every state change is written to the key-value store after it is committed in memory.
  A failed write is logged and never rolls the change back.
- A missing, unparsable or malformed payload loads as an empty cart and is removed.

Notes
- Notifications go to the injected `notify` callable; the store does not render them.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from storefront.core.errors import CorruptPersistedState, OutOfStock, StockExceeded
from storefront.repositories.kv_store import KeyValueStore
from storefront.schemas.cart import CartEvent, CartItem
from storefront.schemas.product import ProductSnapshot
from storefront.services.notifications import Notifier

logger = logging.getLogger("storefront.cart")

DEFAULT_STORAGE_KEY = "andan_cart"

_ITEMS = TypeAdapter(List[CartItem])
_QUANTITY = TypeAdapter(int)

ProductLike = Union[Mapping[str, Any], BaseModel]


def snapshot_for_cart(product: ProductSnapshot, price: Optional[float] = None) -> Dict[str, Any]:
    """Cart snapshot of a catalog product; `price` overrides the list price (e.g. the effective price)."""
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price if price is None else price,
        "stock": product.stock,
        "image": product.images[0] if product.images else None,
        "category": product.category or None,
        "unit": product.unit or None,
    }


def _as_fields(product: ProductLike) -> Dict[str, Any]:
    if isinstance(product, ProductSnapshot):
        return snapshot_for_cart(product)
    if isinstance(product, BaseModel):
        return product.model_dump()
    return dict(product)


def _decode(payload: str) -> List[CartItem]:
    try:
        items = _ITEMS.validate_json(payload)
    except ValidationError as exc:
        raise CorruptPersistedState(str(exc)) from exc

    seen = set()
    for item in items:
        if item.id in seen:
            raise CorruptPersistedState(f"duplicate cart item id {item.id!r}")
        seen.add(item.id)
    return items


def _encode(items: List[CartItem]) -> str:
    return _ITEMS.dump_json(items).decode()


class CartStore:
    def __init__(
        self,
        store: KeyValueStore,
        notify: Optional[Notifier] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        self._store = store
        self._notify = notify
        self.storage_key = storage_key
        self._items: List[CartItem] = []
        self._loaded = False

    @classmethod
    def open(cls, store: KeyValueStore, notify: Optional[Notifier] = None,
             storage_key: str = DEFAULT_STORAGE_KEY) -> "CartStore":
        cart = cls(store, notify=notify, storage_key=storage_key)
        cart.load()
        return cart

    # ---------- read side ----------
    @property
    def items(self) -> List[CartItem]:
        return [item.model_copy() for item in self._items]

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, product_id: str) -> Optional[CartItem]:
        item = self._find(product_id)
        return item.model_copy() if item else None

    def total(self) -> float:
        return sum(item.price * item.quantity for item in self._items)

    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return self._find(product_id) is not None

    # ---------- mutations ----------
    def add(self, product: ProductLike) -> CartItem:
        fields = _as_fields(product)
        product_id = str(fields["id"])
        stock = int(fields["stock"])

        existing = self._find(product_id)
        if existing is not None:
            # the frozen ceiling still applies if the caller hands in a larger stock
            ceiling = min(stock, existing.stock)
            requested = existing.quantity + 1
            if requested > ceiling:
                self._reject(existing, ceiling, requested)
            existing.quantity = requested
            self.persist()
            self._emit("quantity_updated", existing)
            return existing.model_copy()

        if stock <= 0:
            raise OutOfStock(product_id)
        item = CartItem(**{**fields, "id": product_id, "quantity": 1})
        self._items.append(item)
        self.persist()
        self._emit("item_added", item)
        return item.model_copy()

    def remove(self, product_id: str) -> None:
        item = self._find(product_id)
        if item is None:
            return
        self._items = [it for it in self._items if it.id != product_id]
        self.persist()
        self._emit("item_removed", item)

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartItem]:
        # "3" is accepted, 2.5 raises ValidationError before the cart is touched
        quantity = _QUANTITY.validate_python(quantity)
        if quantity <= 0:
            self.remove(product_id)
            return None

        item = self._find(product_id)
        if item is None:
            return None
        if quantity > item.stock:
            self._reject(item, item.stock, quantity)
        item.quantity = quantity
        self.persist()
        return item.model_copy()

    def clear(self) -> None:
        self._items = []
        self.persist()
        self._emit("cart_cleared")

    # ---------- persistence ----------
    def load(self) -> None:
        """Restore from the store; anything unusable becomes an empty cart."""
        self._items = []
        try:
            payload = self._store.get_item(self.storage_key)
        except Exception as exc:
            logger.warning("Cart store read failed, starting empty: %s", exc)
            payload = None

        if payload is not None:
            try:
                self._items = _decode(payload)
            except CorruptPersistedState as exc:
                logger.warning("Discarding corrupt cart payload under %r: %s", self.storage_key, exc)
                self._discard_payload()
        self._loaded = True

    def persist(self) -> bool:
        if not self._loaded:
            logger.debug("Cart not loaded yet; skipping persist")
            return False
        try:
            self._store.set_item(self.storage_key, _encode(self._items))
        except Exception as exc:
            logger.warning("Cart persist failed (in-memory cart kept): %s", exc)
            return False
        return True

    # ---------- helpers ----------
    def _find(self, product_id: object) -> Optional[CartItem]:
        for item in self._items:
            if item.id == product_id:
                return item
        return None

    def _discard_payload(self) -> None:
        try:
            self._store.remove_item(self.storage_key)
        except Exception as exc:
            logger.warning("Could not remove corrupt cart payload: %s", exc)

    def _reject(self, item: CartItem, stock: int, requested: int) -> None:
        self._emit("stock_exceeded", item, stock=stock)
        raise StockExceeded(item.id, item.name, stock, requested)

    def _emit(self, kind: str, item: Optional[CartItem] = None, stock: Optional[int] = None) -> None:
        if self._notify is None:
            return
        event = CartEvent(kind=kind)
        if item is not None:
            event = CartEvent(
                kind=kind,
                product_id=item.id,
                name=item.name,
                quantity=item.quantity,
                stock=item.stock if stock is None else stock,
            )
        self._notify(event)
