"""Skills router - FastAPI endpoints for skill listings and enrollments"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import User
from .schemas import (
    EnrollmentCreate,
    EnrollmentResponse,
    EnrollmentStatus,
    ProgressUpdate,
    SkillCreate,
    SkillResponse,
    SkillUpdate,
)
from .service import SkillCatalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Skills"])


def get_skill_catalog(db: Session = Depends(get_db)) -> SkillCatalog:
    """Dependency injection for SkillCatalog"""
    return SkillCatalog(db)


@router.get("/skills", response_model=list[SkillResponse])
async def list_skills(
    search: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    providerId: Optional[int] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    """Browse skills open for learning"""
    skills = catalog.list_skills(search, category, difficulty, providerId, limit, offset)
    return [SkillResponse.from_model(s) for s in skills]


@router.get("/skills/mine", response_model=list[SkillResponse])
async def list_my_skills(
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    return [SkillResponse.from_model(s) for s in catalog.list_own_skills(current_user)]


@router.get("/skills/{skill_id}", response_model=SkillResponse)
async def get_skill(
    skill_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    return SkillResponse.from_model(catalog.get_skill(skill_id, viewer))


@router.post("/skills", response_model=SkillResponse, status_code=201)
async def create_skill(
    data: SkillCreate,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    """List a skill (artisans only)"""
    return SkillResponse.from_model(catalog.create_skill(current_user, data))


@router.put("/skills/{skill_id}", response_model=SkillResponse)
async def update_skill(
    skill_id: int,
    data: SkillUpdate,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    return SkillResponse.from_model(catalog.update_skill(skill_id, current_user, data))


@router.post("/enrollments", response_model=EnrollmentResponse, status_code=201)
async def enroll(
    data: EnrollmentCreate,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    """Enroll the current student in a skill"""
    return EnrollmentResponse.from_model(catalog.enroll(current_user, data.skillId))


@router.get("/enrollments", response_model=list[EnrollmentResponse])
async def list_enrollments(
    skillId: Optional[int] = Query(None),
    status: Optional[EnrollmentStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    enrollments = catalog.list_enrollments(current_user, skill_id=skillId, status=status)
    return [EnrollmentResponse.from_model(e) for e in enrollments]


@router.get("/enrollments/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(
    enrollment_id: int,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    return EnrollmentResponse.from_model(catalog.get_enrollment(enrollment_id, current_user))


@router.patch("/enrollments/{enrollment_id}/progress", response_model=EnrollmentResponse)
async def update_progress(
    enrollment_id: int,
    data: ProgressUpdate,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    """Teacher records a learner's progress"""
    return EnrollmentResponse.from_model(
        catalog.update_progress(enrollment_id, current_user, data.progress)
    )


@router.post("/enrollments/{enrollment_id}/cancel", response_model=EnrollmentResponse)
async def cancel_enrollment(
    enrollment_id: int,
    current_user: User = Depends(get_current_user),
    catalog: SkillCatalog = Depends(get_skill_catalog),
):
    return EnrollmentResponse.from_model(catalog.cancel_enrollment(enrollment_id, current_user))
