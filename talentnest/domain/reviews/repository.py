"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...database import commit_or_raise
from ...models import Booking, Review, User


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_review_for_booking(db: Session, booking_id: int, reviewer_id: int) -> Optional[Review]:
        return (
            db.query(Review)
            .filter(Review.booking_id == booking_id, Review.reviewer_id == reviewer_id)
            .first()
        )

    @staticmethod
    def create_review(db: Session, reviewee: User, **review_data) -> Review:
        """Store the review and recompute the reviewee's rating from every stored review"""
        count, total = (
            db.query(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
            .filter(Review.reviewee_id == reviewee.id)
            .one()
        )

        review = Review(reviewee_id=reviewee.id, **review_data)
        db.add(review)

        reviewee.review_count = count + 1
        reviewee.rating = round((total + review.rating) / reviewee.review_count, 2)

        commit_or_raise(db, "save the review")
        db.refresh(review)
        return review

    @staticmethod
    def list_reviews(
        db: Session,
        reviewee_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> list[Review]:
        query = db.query(Review).options(joinedload(Review.reviewer))

        if reviewee_id is not None:
            query = query.filter(Review.reviewee_id == reviewee_id)
        if service_id is not None:
            query = query.join(Booking, Review.booking_id == Booking.id).filter(
                Booking.service_id == service_id
            )

        return query.order_by(Review.created_at.desc(), Review.id.desc()).all()
