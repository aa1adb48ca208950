"""
storefront/repositories/products.py
Product storage. Every write goes through `upsert`, which runs the caller's mutation
as one atomic read-modify-write per product:

- InMemoryProductRepository holds a per-product lock for the whole cycle.
- FirestoreProductRepository runs it inside a Firestore transaction (optimistic
  concurrency; the SDK retries the function on contention).

Mutations must therefore be free of side effects other than returning the new record.
"""
import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional

from firebase_admin import firestore

from storefront.core.errors import ProductNotFound
from storefront.schemas.product import ProductRecord

Mutation = Callable[[Optional[ProductRecord]], ProductRecord]


class ProductRepository:
    def get(self, product_id: str) -> Optional[ProductRecord]:
        raise NotImplementedError

    def list(self) -> List[ProductRecord]:
        raise NotImplementedError

    def upsert(self, product_id: str, mutate: Mutation) -> ProductRecord:
        raise NotImplementedError

    def update(self, product_id: str, mutate: Callable[[ProductRecord], ProductRecord]) -> ProductRecord:
        """Like `upsert`, but the product must already exist."""
        def _existing_only(current: Optional[ProductRecord]) -> ProductRecord:
            if current is None:
                raise ProductNotFound(product_id)
            return mutate(current)

        return self.upsert(product_id, _existing_only)


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self._products: Dict[str, ProductRecord] = {}
        # product id -> [lock, holders]; an entry lives only while someone holds or waits on it
        self._locks: Dict[str, list] = {}
        self._guard = threading.Lock()

    @contextmanager
    def _locked(self, product_id: str):
        with self._guard:
            entry = self._locks.setdefault(product_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[product_id]

    def get(self, product_id: str) -> Optional[ProductRecord]:
        record = self._products.get(product_id)
        return record.model_copy(deep=True) if record else None

    def list(self) -> List[ProductRecord]:
        return [r.model_copy(deep=True) for r in list(self._products.values())]

    def upsert(self, product_id: str, mutate: Mutation) -> ProductRecord:
        with self._locked(product_id):
            current = self._products.get(product_id)
            updated = mutate(current.model_copy(deep=True) if current else None)
            updated.id = product_id
            self._products[product_id] = updated
            return updated.model_copy(deep=True)


# ---------- Firestore ----------
def _doc_to_record(snap) -> ProductRecord:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return ProductRecord.model_validate(data)


def _record_to_doc(record: ProductRecord) -> dict:
    return record.model_dump(exclude={"id"})


class FirestoreProductRepository(ProductRepository):
    def __init__(self, db, collection: str = "products"):
        self._db = db
        self._collection = collection

    def _ref(self, product_id: str):
        return self._db.collection(self._collection).document(product_id)

    def get(self, product_id: str) -> Optional[ProductRecord]:
        snap = self._ref(product_id).get()
        return _doc_to_record(snap) if snap.exists else None

    def list(self) -> List[ProductRecord]:
        return [_doc_to_record(d) for d in self._db.collection(self._collection).stream()]

    def upsert(self, product_id: str, mutate: Mutation) -> ProductRecord:
        ref = self._ref(product_id)

        @firestore.transactional
        def _apply(transaction) -> ProductRecord:
            snap = ref.get(transaction=transaction)
            current = _doc_to_record(snap) if snap.exists else None
            updated = mutate(current)
            updated.id = product_id
            transaction.set(ref, _record_to_doc(updated))
            return updated

        return _apply(self._db.transaction())
