"""
Verification workflow
An artisan submits evidence, an admin ticks off four sub-checks, then the
request is approved or rejected. Approval marks the artisan as verified.

    pending → approved
       └────→ rejected
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User, VerificationRequest
from ...services.verified_flag_sync import reconcile_verified_flags
from ...shared.errors import InvalidStateTransition, NotFoundError, ValidationError
from ...shared.policy import Action, authorize
from ...shared.validators import validate_matric_number
from ...utils.sanitization import sanitize_string
from .repository import VerificationRepository
from .schemas import VerificationSubmit

logger = logging.getLogger(__name__)

SUB_CHECKS = (
    "matric_number_verified",
    "business_name_verified",
    "certificates_verified",
    "bio_verified",
)

STATUS_FILTERS = ("all", "pending", "approved", "rejected")


class VerificationWorkflow:
    """Service layer for verification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VerificationRepository()

    def _get_or_404(self, request_id: int) -> VerificationRequest:
        request = self.repo.get_request(self.db, request_id)
        if not request:
            raise NotFoundError("Verification request not found")
        return request

    @staticmethod
    def _require_pending(request: VerificationRequest, requested: str) -> None:
        if request.status != "pending":
            raise InvalidStateTransition("verification request", request.status, requested)

    def submit(self, applicant: User, data: VerificationSubmit) -> VerificationRequest:
        """Open a new pending request with every sub-check unticked"""
        authorize(applicant, Action.SUBMIT_VERIFICATION)

        existing = self.repo.get_open_request(self.db, applicant.id)
        if existing:
            logger.warning(
                f"⚠️ User {applicant.id} already has a {existing.status} verification request"
            )
            raise ValidationError(
                f"You already have a {existing.status} verification request"
            )

        student_id = data.studentId or applicant.matric_number
        if student_id:
            try:
                student_id = validate_matric_number(student_id)
            except ValueError as e:
                raise ValidationError(str(e))

        request = self.repo.create_request(
            self.db,
            applicant.id,
            applicant_name=applicant.full_name,
            applicant_email=applicant.email,
            student_id=student_id,
            department=data.department or applicant.department,
            business_name=sanitize_string(data.businessName),
            business_description=sanitize_string(data.businessDescription)
            if data.businessDescription
            else None,
            specializations=data.specializations,
            experience_years=data.experienceYears,
            certificates=data.certificates,
            bio_document=data.bioDocument,
            supporting_documents=data.supportingDocuments,
            matric_number_verified=False,
            business_name_verified=False,
            certificates_verified=False,
            bio_verified=False,
            verification_complete=False,
            status="pending",
            approved_with_override=False,
        )
        logger.info(f"📥 Verification request {request.id} submitted by user {applicant.id}")
        return request

    def set_sub_check(
        self, request_id: int, check_name: str, value: bool, admin: User
    ) -> VerificationRequest:
        """Tick or untick one sub-check and recompute completeness"""
        authorize(admin, Action.REVIEW_VERIFICATION)
        if check_name not in SUB_CHECKS:
            raise ValidationError(f"Unknown verification check: {check_name}")

        request = self._get_or_404(request_id)
        if request.status != "pending":
            raise InvalidStateTransition(
                "verification request",
                request.status,
                "pending",
                detail=f"Cannot update checks on a verification request that is already {request.status}",
            )

        setattr(request, check_name, bool(value))
        request.verification_complete = all(getattr(request, name) for name in SUB_CHECKS)

        request = self.repo.save(self.db, request, "update the verification check")
        logger.info(
            f"🔄 Request {request.id}: {check_name}={bool(value)} "
            f"(complete={request.verification_complete}, admin {admin.id})"
        )
        return request

    def _mark_approved(
        self, request: VerificationRequest, admin: User, notes: Optional[str], override: bool
    ) -> VerificationRequest:
        request.status = "approved"
        request.reviewed_by = admin.id
        request.reviewed_at = datetime.utcnow()
        request.approved_with_override = override
        if notes:
            request.admin_notes = sanitize_string(notes)

        # Flag flips in the same commit as the approval
        request.applicant.is_verified = True

        request = self.repo.save(self.db, request, "approve the verification request")
        logger.info(
            f"✅ Verification request {request.id} approved by admin {admin.id}"
            f"{' (override)' if override else ''}; user {request.applicant_id} verified"
        )
        return request

    def approve(
        self, request_id: int, admin: User, notes: Optional[str] = None
    ) -> VerificationRequest:
        """Approve a pending request whose four sub-checks are all ticked"""
        authorize(admin, Action.REVIEW_VERIFICATION)
        request = self._get_or_404(request_id)
        self._require_pending(request, "approved")

        if not request.verification_complete:
            raise ValidationError(
                "All four checks must pass before approval; use the override path to approve anyway"
            )

        return self._mark_approved(request, admin, notes, override=False)

    def approve_with_override(self, request_id: int, admin: User, notes: str) -> VerificationRequest:
        """Approve without the completeness requirement; the reason is mandatory"""
        authorize(admin, Action.REVIEW_VERIFICATION)
        if not notes or not notes.strip():
            raise ValidationError("Notes are required when approving with an override")

        request = self._get_or_404(request_id)
        self._require_pending(request, "approved")

        logger.warning(
            f"⚠️ Admin {admin.id} overriding completeness on request {request.id} "
            f"(complete={request.verification_complete})"
        )
        return self._mark_approved(request, admin, notes, override=True)

    def reject(self, request_id: int, admin: User, reason: str) -> VerificationRequest:
        authorize(admin, Action.REVIEW_VERIFICATION)
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")

        request = self._get_or_404(request_id)
        self._require_pending(request, "rejected")

        request.status = "rejected"
        request.reviewed_by = admin.id
        request.reviewed_at = datetime.utcnow()
        request.admin_notes = sanitize_string(reason)

        request = self.repo.save(self.db, request, "reject the verification request")
        logger.info(f"❌ Verification request {request.id} rejected by admin {admin.id}")
        return request

    def list_requests(
        self, admin: User, status: str = "all", search: Optional[str] = None
    ) -> list[VerificationRequest]:
        """Admin queue"""
        authorize(admin, Action.REVIEW_VERIFICATION)
        if status not in STATUS_FILTERS:
            raise ValidationError(f"Invalid status filter: {status}")
        return self.repo.search_requests(self.db, status=status, search=search)

    def get_request(self, request_id: int, actor: User) -> VerificationRequest:
        request = self._get_or_404(request_id)
        authorize(actor, Action.VIEW_VERIFICATION, request)
        return request

    def list_own(self, applicant: User) -> list[VerificationRequest]:
        return self.repo.get_requests_by_applicant(self.db, applicant.id)

    def reconcile_verified_flags(self, admin: User) -> dict:
        authorize(admin, Action.REVIEW_VERIFICATION)
        logger.info(f"🔄 Verified flag sweep requested by admin {admin.id}")
        return reconcile_verified_flags(self.db)
