# storefront/schemas/review.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Review(BaseModel):
    id: str
    user_id: str = Field(..., description="Author reference")
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=500)
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReviewIn(BaseModel):
    user_id: str = Field(..., min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=500)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, min_length=1, max_length=500)


class RatingSummary(BaseModel):
    rating: float = 0
    count: int = 0
