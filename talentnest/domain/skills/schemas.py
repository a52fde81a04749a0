"""Skills domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..catalog.schemas import ProviderSummary

Difficulty = Literal["beginner", "intermediate", "advanced"]
EnrollmentStatus = Literal["pending", "active", "completed", "cancelled"]


class SkillCreate(BaseModel):
    """Schema for listing a new skill"""

    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10, max_length=5000)
    category: str = Field(..., min_length=1, max_length=100)
    difficulty: Difficulty = "beginner"
    duration: str = Field(..., min_length=1, max_length=100)
    price: str = Field(..., min_length=1, max_length=100)
    maxStudents: int = Field(..., ge=1, le=500)
    images: list[str] = []
    syllabus: list[str] = Field(default=[], max_length=50)
    requirements: list[str] = Field(default=[], max_length=20)


class SkillUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    difficulty: Optional[Difficulty] = None
    duration: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[str] = Field(None, min_length=1, max_length=100)
    maxStudents: Optional[int] = Field(None, ge=1, le=500)
    images: Optional[list[str]] = None
    syllabus: Optional[list[str]] = Field(None, max_length=50)
    requirements: Optional[list[str]] = Field(None, max_length=20)
    isActive: Optional[bool] = None


class SkillResponse(BaseModel):
    id: int
    userId: int
    title: str
    description: str
    category: str
    difficulty: str
    duration: str
    price: str
    maxStudents: int
    currentStudents: int
    images: list[str]
    syllabus: list[str]
    requirements: list[str]
    isActive: bool
    provider: Optional[ProviderSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, skill) -> "SkillResponse":
        owner = skill.owner
        return cls(
            id=skill.id,
            userId=skill.user_id,
            title=skill.title,
            description=skill.description,
            category=skill.category,
            difficulty=skill.difficulty,
            duration=skill.duration,
            price=skill.price,
            maxStudents=skill.max_students,
            currentStudents=skill.current_students,
            images=skill.images or [],
            syllabus=skill.syllabus or [],
            requirements=skill.requirements or [],
            isActive=skill.is_active,
            provider=(
                ProviderSummary(
                    id=owner.id,
                    fullName=owner.full_name,
                    businessName=owner.business_name,
                    isVerified=owner.is_verified,
                    rating=owner.rating,
                    reviewCount=owner.review_count,
                )
                if owner
                else None
            ),
            createdAt=skill.created_at,
            updatedAt=skill.updated_at,
        )


class EnrollmentCreate(BaseModel):
    skillId: int


class ProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0, le=100)


class EnrollmentResponse(BaseModel):
    id: int
    studentId: int
    skillId: int
    providerId: int
    skillTitle: Optional[str] = None
    status: str
    progress: int
    enrolledAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, enrollment) -> "EnrollmentResponse":
        return cls(
            id=enrollment.id,
            studentId=enrollment.student_id,
            skillId=enrollment.skill_id,
            providerId=enrollment.provider_id,
            skillTitle=enrollment.skill.title if enrollment.skill else None,
            status=enrollment.status,
            progress=enrollment.progress,
            enrolledAt=enrollment.enrolled_at,
            completedAt=enrollment.completed_at,
        )
