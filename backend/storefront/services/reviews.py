"""
storefront/services/reviews.py — Review collaborator.

Every mutation (add, edit, delete) runs as a single per-product write:
read the record, change its review list, recompute rating/review_count, write.
The repository serializes these per product, so two concurrent reviews on the same
product both land and the cached rating reflects both.
"""
import logging
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from storefront.core.errors import ProductNotFound, ReviewNotFound
from storefront.repositories.products import ProductRepository
from storefront.schemas.product import ProductRecord
from storefront.schemas.review import Review, ReviewIn, ReviewUpdate
from storefront.services.ratings import apply_rating

logger = logging.getLogger("storefront.reviews")


def _index_of(record: ProductRecord, review_id: str) -> int:
    for i, review in enumerate(record.reviews):
        if review.id == review_id:
            return i
    raise ReviewNotFound(record.id, review_id)


class ReviewService:
    def __init__(self, repository: ProductRepository):
        self._repo = repository

    def list_reviews(self, product_id: str) -> List[Review]:
        record = self._repo.get(product_id)
        if record is None:
            raise ProductNotFound(product_id)
        return list(record.reviews)

    def add_review(self, product_id: str, data: ReviewIn) -> Review:
        review = Review(
            id=uuid4().hex,
            user_id=data.user_id,
            rating=data.rating,
            comment=data.comment,
            created_at=datetime.now(timezone.utc),
        )

        def _mutate(record: ProductRecord) -> ProductRecord:
            record.reviews.append(review)
            return apply_rating(record)

        record = self._repo.update(product_id, _mutate)
        logger.info("Review %s added to %s (rating=%s, count=%s)",
                    review.id, product_id, record.rating, record.review_count)
        return review

    def edit_review(self, product_id: str, review_id: str, data: ReviewUpdate) -> Review:
        changes = data.model_dump(exclude_none=True)

        def _mutate(record: ProductRecord) -> ProductRecord:
            i = _index_of(record, review_id)
            record.reviews[i] = record.reviews[i].model_copy(
                update={**changes, "updated_at": datetime.now(timezone.utc)}
            )
            return apply_rating(record)

        record = self._repo.update(product_id, _mutate)
        return record.reviews[_index_of(record, review_id)]

    def delete_review(self, product_id: str, review_id: str) -> ProductRecord:
        def _mutate(record: ProductRecord) -> ProductRecord:
            i = _index_of(record, review_id)
            del record.reviews[i]
            return apply_rating(record)

        record = self._repo.update(product_id, _mutate)
        logger.info("Review %s deleted from %s (rating=%s, count=%s)",
                    review_id, product_id, record.rating, record.review_count)
        return record
