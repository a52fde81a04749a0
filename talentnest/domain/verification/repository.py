"""Verification repository - Database operations for verification requests"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...database import commit_or_raise
from ...models import VerificationRequest


class VerificationRepository:
    """Repository for verification request database operations"""

    @staticmethod
    def get_request(db: Session, request_id: int) -> Optional[VerificationRequest]:
        return (
            db.query(VerificationRequest)
            .options(joinedload(VerificationRequest.applicant))
            .filter(VerificationRequest.id == request_id)
            .first()
        )

    @staticmethod
    def get_open_request(db: Session, applicant_id: int) -> Optional[VerificationRequest]:
        """A pending or approved request blocks a new submission"""
        return (
            db.query(VerificationRequest)
            .filter(
                VerificationRequest.applicant_id == applicant_id,
                VerificationRequest.status.in_(["pending", "approved"]),
            )
            .first()
        )

    @staticmethod
    def get_requests_by_applicant(db: Session, applicant_id: int) -> list[VerificationRequest]:
        return (
            db.query(VerificationRequest)
            .filter(VerificationRequest.applicant_id == applicant_id)
            .order_by(VerificationRequest.submitted_at.desc(), VerificationRequest.id.desc())
            .all()
        )

    @staticmethod
    def create_request(db: Session, applicant_id: int, **request_data) -> VerificationRequest:
        """Create a new verification request"""
        request = VerificationRequest(applicant_id=applicant_id, **request_data)
        db.add(request)
        commit_or_raise(db, "submit the verification request")
        db.refresh(request)
        return request

    @staticmethod
    def save(db: Session, request: VerificationRequest, action: str) -> VerificationRequest:
        """Commit pending changes on the request (and anything else in the session)"""
        commit_or_raise(db, action)
        db.refresh(request)
        return request

    @staticmethod
    def search_requests(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[VerificationRequest]:
        """Admin queue filter; newest submissions first"""
        query = db.query(VerificationRequest).options(joinedload(VerificationRequest.applicant))

        if status and status != "all":
            query = query.filter(VerificationRequest.status == status)

        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    VerificationRequest.applicant_name.ilike(term),
                    VerificationRequest.business_name.ilike(term),
                    VerificationRequest.student_id.ilike(term),
                )
            )

        return query.order_by(
            VerificationRequest.submitted_at.desc(), VerificationRequest.id.desc()
        ).all()
