"""
storefront/services/ratings.py - Cached rating and review count of a product.

`apply_rating` is called explicitly by the review service right after every review
mutation, inside the same per-product write, so the cached values never lag the
stored reviews.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from storefront.schemas.product import ProductRecord
from storefront.schemas.review import RatingSummary, Review


def recompute(reviews: Iterable[Review]) -> RatingSummary:
    ratings = [int(r.rating) for r in reviews]
    if not ratings:
        return RatingSummary(rating=0, count=0)

    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    rounded = mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return RatingSummary(rating=float(rounded), count=len(ratings))


def apply_rating(record: ProductRecord) -> ProductRecord:
    summary = recompute(record.reviews)
    record.rating = summary.rating
    record.review_count = summary.count
    return record
