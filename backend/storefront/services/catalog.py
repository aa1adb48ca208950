"""
storefront/services/catalog.py — Catalog collaborator.

- `get_by_id` hands out product snapshots; nothing downstream holds a live record.
- Product and discount authoring validate here, explicitly, before anything is written:
  SKU generation and discount window checks are plain calls, not storage hooks.
- Saving a product keeps its reviews and re-derives the cached rating in the same write.
"""
import logging
import secrets
import string
from datetime import timezone
from typing import List, Optional

from storefront.core.errors import InvalidDiscount, InvalidDiscountWindow, ProductNotFound
from storefront.repositories.products import ProductRepository
from storefront.schemas.product import Discount, DiscountIn, ProductIn, ProductRecord, ProductSnapshot
from storefront.services.ratings import apply_rating

logger = logging.getLogger("storefront.catalog")

_SKU_ALPHABET = string.ascii_uppercase + string.digits


def generate_sku(category: str) -> str:
    code = "".join(secrets.choice(_SKU_ALPHABET) for _ in range(6))
    return f"{category[:3].upper()}-{code}"


def validate_discount(discount: DiscountIn) -> Discount:
    if discount.active and (discount.start_at is None or discount.end_at is None):
        raise InvalidDiscountWindow("An active discount needs both start_at and end_at")
    if discount.start_at and discount.end_at:
        start = discount.start_at if discount.start_at.tzinfo else discount.start_at.replace(tzinfo=timezone.utc)
        end = discount.end_at if discount.end_at.tzinfo else discount.end_at.replace(tzinfo=timezone.utc)
        if end < start:
            raise InvalidDiscountWindow("end_at cannot be before start_at")

    if discount.kind == "percentage" and not (0 < discount.value <= 100):
        raise InvalidDiscount("percentage must be in (0, 100]")
    if discount.kind == "fixed" and discount.value <= 0:
        raise InvalidDiscount("fixed discount must be positive")

    return Discount(**discount.model_dump())


class Catalog:
    def __init__(self, repository: ProductRepository):
        self._repo = repository

    def get_by_id(self, product_id: str) -> ProductSnapshot:
        record = self._repo.get(product_id)
        if record is None:
            raise ProductNotFound(product_id)
        return record.snapshot()

    def list_products(self, include_inactive: bool = False) -> List[ProductSnapshot]:
        return [r.snapshot() for r in self._repo.list() if include_inactive or r.is_active]

    def save_product(self, product_id: str, data: ProductIn) -> ProductSnapshot:
        fields = data.model_dump()
        if not fields.get("sku"):
            fields["sku"] = generate_sku(data.category)

        def _mutate(current: Optional[ProductRecord]) -> ProductRecord:
            if current is None:
                return ProductRecord(id=product_id, **fields)
            # existing sku is kept unless a new one is given
            if not data.sku and current.sku:
                fields["sku"] = current.sku
            updated = current.model_copy(update=fields)
            return apply_rating(updated)

        record = self._repo.upsert(product_id, _mutate)
        logger.info("Saved product %s (sku=%s)", product_id, record.sku)
        return record.snapshot()

    def set_discount(self, product_id: str, data: DiscountIn) -> ProductSnapshot:
        discount = validate_discount(data)

        def _mutate(current: ProductRecord) -> ProductRecord:
            current.discount = discount
            return current

        return self._repo.update(product_id, _mutate).snapshot()

    def clear_discount(self, product_id: str) -> ProductSnapshot:
        def _mutate(current: ProductRecord) -> ProductRecord:
            current.discount = None
            return current

        return self._repo.update(product_id, _mutate).snapshot()
