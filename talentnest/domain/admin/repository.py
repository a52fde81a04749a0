"""Admin repository - Aggregate queries for the admin console"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import Booking, Service, User, VerificationRequest


class AdminRepository:
    """Read-only queries across domains"""

    @staticmethod
    def count_users_by_role(db: Session) -> dict[str, int]:
        rows = db.query(User.role, func.count(User.id)).group_by(User.role).all()
        return {role: count for role, count in rows}

    @staticmethod
    def count_verified_users(db: Session) -> int:
        return db.query(User).filter(User.is_verified.is_(True)).count()

    @staticmethod
    def count_services_by_status(db: Session) -> dict[str, int]:
        rows = db.query(Service.status, func.count(Service.id)).group_by(Service.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def count_active_services(db: Session) -> int:
        return (
            db.query(Service)
            .filter(Service.status == "active", Service.is_active.is_(True))
            .count()
        )

    @staticmethod
    def count_bookings_by_status(db: Session) -> dict[str, int]:
        rows = db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def count_pending_verifications(db: Session) -> int:
        return (
            db.query(VerificationRequest)
            .filter(VerificationRequest.status == "pending")
            .count()
        )

    @staticmethod
    def search_users(
        db: Session,
        role: Optional[str] = None,
        verified: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> list[User]:
        query = db.query(User)

        if role and role != "all":
            query = query.filter(User.role == role)
        if verified is not None:
            query = query.filter(User.is_verified.is_(verified))
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.full_name.ilike(term),
                    User.email.ilike(term),
                    User.matric_number.ilike(term),
                )
            )

        return query.order_by(User.created_at.desc(), User.id.desc()).all()
