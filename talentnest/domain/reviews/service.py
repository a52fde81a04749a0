"""Review service - Ratings left after a completed booking"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Review, User
from ...shared.errors import InvalidStateTransition, NotFoundError, ValidationError
from ...shared.policy import Action, is_allowed
from ...utils.sanitization import sanitize_string
from ..bookings.repository import BookingRepository
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()
        self.bookings = BookingRepository()

    def create_review(self, actor: User, data: ReviewCreate) -> Review:
        """One review per participant per completed booking, about the other participant"""
        booking = self.bookings.get_booking(self.db, data.bookingId)
        if not booking or not is_allowed(actor, Action.WRITE_REVIEW, booking):
            raise NotFoundError("Booking not found")

        if booking.status != "completed":
            raise InvalidStateTransition("booking", booking.status, "reviewed")

        if self.repo.get_review_for_booking(self.db, booking.id, actor.id):
            raise ValidationError("You have already reviewed this booking")

        reviewee = booking.provider if actor.id == booking.client_id else booking.client
        if reviewee.id == actor.id:
            raise ValidationError("You cannot review yourself")

        review = self.repo.create_review(
            self.db,
            reviewee,
            booking_id=booking.id,
            reviewer_id=actor.id,
            rating=data.rating,
            comment=sanitize_string(data.comment) if data.comment else None,
        )
        logger.info(
            f"✅ Review {review.id} for booking {booking.id}: user {actor.id} → user {reviewee.id} "
            f"({data.rating}★)"
        )
        return review

    def list_reviews(
        self, reviewee_id: Optional[int] = None, service_id: Optional[int] = None
    ) -> list[Review]:
        return self.repo.list_reviews(self.db, reviewee_id=reviewee_id, service_id=service_id)
