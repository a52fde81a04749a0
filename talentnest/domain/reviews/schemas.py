"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    bookingId: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewResponse(BaseModel):
    id: int
    bookingId: int
    reviewerId: int
    reviewerName: Optional[str] = None
    revieweeId: int
    rating: int
    comment: Optional[str]
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, review) -> "ReviewResponse":
        return cls(
            id=review.id,
            bookingId=review.booking_id,
            reviewerId=review.reviewer_id,
            reviewerName=review.reviewer.full_name if review.reviewer else None,
            revieweeId=review.reviewee_id,
            rating=review.rating,
            comment=review.comment,
            createdAt=review.created_at,
        )
