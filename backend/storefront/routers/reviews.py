# storefront/routers/reviews.py — Product reviews (each change re-derives the product rating)

from typing import List
from fastapi import APIRouter, Depends, HTTPException

from storefront.core.deps import get_review_service
from storefront.core.errors import ProductNotFound, ReviewNotFound
from storefront.schemas.review import Review, ReviewIn, ReviewUpdate
from storefront.services.reviews import ReviewService

router = APIRouter(prefix="/products", tags=["Reviews"])


@router.get("/{product_id}/reviews", response_model=List[Review], summary="List product reviews (insertion order)")
def list_reviews(product_id: str, service: ReviewService = Depends(get_review_service)):
    try:
        return service.list_reviews(product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@router.post("/{product_id}/reviews", response_model=Review, status_code=201, summary="Add review")
def add_review(product_id: str, body: ReviewIn, service: ReviewService = Depends(get_review_service)):
    try:
        return service.add_review(product_id, body)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@router.put("/{product_id}/reviews/{review_id}", response_model=Review, summary="Edit review")
def edit_review(
    product_id: str,
    review_id: str,
    body: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
):
    try:
        return service.edit_review(product_id, review_id, body)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    except ReviewNotFound:
        raise HTTPException(status_code=404, detail="Review not found")


@router.delete("/{product_id}/reviews/{review_id}", summary="Delete review")
def delete_review(product_id: str, review_id: str, service: ReviewService = Depends(get_review_service)):
    try:
        record = service.delete_review(product_id, review_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    except ReviewNotFound:
        raise HTTPException(status_code=404, detail="Review not found")
    return {"detail": "Review deleted", "rating": record.rating, "review_count": record.review_count}
