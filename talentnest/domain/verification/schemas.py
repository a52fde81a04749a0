"""Verification domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_tags

RequestStatusFilter = Literal["all", "pending", "approved", "rejected"]


class VerificationSubmit(BaseModel):
    """Evidence an artisan submits for review"""

    businessName: str = Field(..., min_length=1, max_length=255)
    businessDescription: Optional[str] = Field(None, max_length=5000)
    specializations: list[str] = Field(default_factory=list)
    experienceYears: int = Field(0, ge=0, le=80)
    studentId: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=255)
    certificates: list[str] = Field(default_factory=list)
    bioDocument: Optional[str] = Field(None, max_length=500)
    supportingDocuments: list[str] = Field(default_factory=list)

    @field_validator("specializations")
    @classmethod
    def check_specializations(cls, v: list[str]) -> list[str]:
        return validate_tags(v, max_tags=20, max_length=100)


class SubCheckUpdate(BaseModel):
    check: str
    value: bool


class ApproveRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class OverrideApproveRequest(BaseModel):
    notes: str = Field(..., max_length=2000)


class RejectRequest(BaseModel):
    reason: str = Field(..., max_length=2000)


class VerificationResponse(BaseModel):
    id: int
    applicantId: int
    applicantName: str
    applicantEmail: str
    studentId: Optional[str]
    department: Optional[str]
    businessName: str
    businessDescription: Optional[str]
    specializations: list[str]
    experienceYears: int
    certificates: list[str]
    bioDocument: Optional[str]
    supportingDocuments: list[str]
    matricNumberVerified: bool
    businessNameVerified: bool
    certificatesVerified: bool
    bioVerified: bool
    verificationComplete: bool
    status: str
    adminNotes: Optional[str]
    approvedWithOverride: bool
    reviewedBy: Optional[int]
    submittedAt: Optional[datetime]
    reviewedAt: Optional[datetime]

    @classmethod
    def from_model(cls, request) -> "VerificationResponse":
        return cls(
            id=request.id,
            applicantId=request.applicant_id,
            applicantName=request.applicant_name,
            applicantEmail=request.applicant_email,
            studentId=request.student_id,
            department=request.department,
            businessName=request.business_name,
            businessDescription=request.business_description,
            specializations=request.specializations or [],
            experienceYears=request.experience_years or 0,
            certificates=request.certificates or [],
            bioDocument=request.bio_document,
            supportingDocuments=request.supporting_documents or [],
            matricNumberVerified=request.matric_number_verified,
            businessNameVerified=request.business_name_verified,
            certificatesVerified=request.certificates_verified,
            bioVerified=request.bio_verified,
            verificationComplete=request.verification_complete,
            status=request.status,
            adminNotes=request.admin_notes,
            approvedWithOverride=request.approved_with_override,
            reviewedBy=request.reviewed_by,
            submittedAt=request.submitted_at,
            reviewedAt=request.reviewed_at,
        )


class ReconcileSummary(BaseModel):
    checked: int
    verified: list[int]
    unverified: list[int]
    totalChanged: int
