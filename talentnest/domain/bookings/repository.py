"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...database import commit_or_raise
from ...models import Booking, Service


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        """Get a booking by ID with both participants loaded"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.client), joinedload(Booking.provider))
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def create_booking(db: Session, service: Service, **booking_data) -> Booking:
        """Create a booking and count the order on the service in the same commit"""
        booking = Booking(service_id=service.id, **booking_data)
        db.add(booking)
        service.orders_count = (service.orders_count or 0) + 1
        commit_or_raise(db, "create the booking")
        db.refresh(booking)
        return booking

    @staticmethod
    def update_booking(db: Session, booking: Booking, **updates) -> Booking:
        """Update a booking with provided fields"""
        for key, value in updates.items():
            if hasattr(booking, key):
                setattr(booking, key, value)

        commit_or_raise(db, "update the booking")
        db.refresh(booking)
        return booking

    @staticmethod
    def get_bookings_for_user(
        db: Session,
        user_id: int,
        as_role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Booking]:
        """Bookings where the user is client and/or provider, newest first"""
        query = db.query(Booking).options(joinedload(Booking.client), joinedload(Booking.provider))

        if as_role == "client":
            query = query.filter(Booking.client_id == user_id)
        elif as_role == "provider":
            query = query.filter(Booking.provider_id == user_id)
        else:
            query = query.filter(or_(Booking.client_id == user_id, Booking.provider_id == user_id))

        if status and status != "all":
            query = query.filter(Booking.status == status)

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
