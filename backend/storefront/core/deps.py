"""
# `storefront/core/deps.py` — Dependency Wiring

FastAPI dependencies that build the core's collaborators from `settings`.
Routers only ever receive these through `Depends(...)`; tests replace them with
`app.dependency_overrides`.

| Dependency                 | memory backend                       | firestore backend |
|----------------------------|--------------------------------------|-------------------|
| `get_product_repository`   | `InMemoryProductRepository`          | `FirestoreProductRepository` (`<prefix>products`) |
| `get_cart_store_factory`   | `MemoryKeyValueStore` per session, or a JSON file per session when `CART_STORE_DIR` is set | `FirestoreKeyValueStore` (`<prefix>carts/<session>`) |
"""
import os
import re
from functools import lru_cache
from typing import Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException

from storefront.config import get_db, prefixed, settings
from storefront.repositories.kv_store import (
    FirestoreKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)
from storefront.repositories.products import (
    FirestoreProductRepository,
    InMemoryProductRepository,
    ProductRepository,
)
from storefront.services.catalog import Catalog
from storefront.services.reviews import ReviewService

StoreFactory = Callable[[str], KeyValueStore]

_SESSION_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class _SessionView(KeyValueStore):
    """A session's slice of `MemorySessionStores`; nothing is kept until the first write."""

    def __init__(self, stores: Dict[str, MemoryKeyValueStore], session_id: str):
        self._stores = stores
        self._session_id = session_id

    def get_item(self, key: str) -> Optional[str]:
        store = self._stores.get(self._session_id)
        return store.get_item(key) if store else None

    def set_item(self, key: str, value: str) -> None:
        self._stores.setdefault(self._session_id, MemoryKeyValueStore()).set_item(key, value)

    def remove_item(self, key: str) -> None:
        store = self._stores.get(self._session_id)
        if store is None:
            return
        store.remove_item(key)
        if not store._data:
            del self._stores[self._session_id]


class MemorySessionStores:
    """One in-process key-value store per session id that has written something."""

    def __init__(self):
        self._stores: Dict[str, MemoryKeyValueStore] = {}

    def __call__(self, session_id: str) -> KeyValueStore:
        return _SessionView(self._stores, session_id)

    def __len__(self) -> int:
        return len(self._stores)


@lru_cache()
def get_product_repository() -> ProductRepository:
    if settings.storage_backend == "firestore":
        return FirestoreProductRepository(get_db(), prefixed("products"))
    return InMemoryProductRepository()


@lru_cache()
def get_cart_store_factory() -> StoreFactory:
    if settings.storage_backend == "firestore":
        db = get_db()
        return lambda session_id: FirestoreKeyValueStore(db, prefixed("carts"), session_id)
    if settings.cart_store_dir:
        base = settings.cart_store_dir
        return lambda session_id: JsonFileKeyValueStore(os.path.join(base, f"{session_id}.json"))
    return MemorySessionStores()


def get_catalog(repo: ProductRepository = Depends(get_product_repository)) -> Catalog:
    return Catalog(repo)


def get_review_service(repo: ProductRepository = Depends(get_product_repository)) -> ReviewService:
    return ReviewService(repo)


def get_session_id(x_session_id: str = Header(..., alias="X-Session-Id")) -> str:
    v = (x_session_id or "").strip()
    for ch in ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0"):
        v = v.replace(ch, "")
    if not _SESSION_RE.match(v):
        raise HTTPException(status_code=400, detail="Invalid X-Session-Id")
    return v
