"""Reviews router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Review the other participant of a completed booking"""
    return ReviewResponse.from_model(service.create_review(current_user, data))


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    userId: Optional[int] = Query(None),
    serviceId: Optional[int] = Query(None),
    service: ReviewService = Depends(get_review_service),
):
    """Public reviews of a provider or a listing"""
    reviews = service.list_reviews(reviewee_id=userId, service_id=serviceId)
    return [ReviewResponse.from_model(r) for r in reviews]
