"""
Skills service - Business logic for skill listings and enrollments

Artisans list skills they teach; students enroll. A skill's
``current_students`` counts the seats held by pending and active
enrollments, so completing or cancelling an enrollment frees its seat.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Enrollment, Skill, User
from ...shared.errors import ConflictError, InvalidStateTransition, NotFoundError, ValidationError
from ...shared.policy import Action, Role, authorize, is_allowed, role_of
from ...utils.sanitization import sanitize_string
from .repository import SkillRepository
from .schemas import SkillCreate, SkillUpdate

logger = logging.getLogger(__name__)

DIFFICULTIES = ("beginner", "intermediate", "advanced")
ENROLLMENT_STATUSES = ("pending", "active", "completed", "cancelled")
SEAT_HOLDING_STATUSES = ("pending", "active")

# Filter values the browse UI sends for "no filter"
ALL_CATEGORIES = ("all", "All categories")


def _clean_items(items: Optional[list[str]]) -> Optional[list[str]]:
    if items is None:
        return None
    return [sanitize_string(item) for item in items if item and item.strip()]


class SkillCatalog:
    """Service layer for skills and enrollments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SkillRepository()

    @staticmethod
    def _is_listed(skill: Skill) -> bool:
        return bool(skill.is_active and skill.owner and skill.owner.is_active)

    def _get_or_404(self, skill_id: int) -> Skill:
        skill = self.repo.get_skill(self.db, skill_id)
        if not skill:
            raise NotFoundError("Skill not found")
        return skill

    def get_listed_skill(self, skill_id: int) -> Skill:
        """A skill that students can currently see and enroll in"""
        skill = self._get_or_404(skill_id)
        if not self._is_listed(skill):
            raise NotFoundError("Skill not found")
        return skill

    def create_skill(self, actor: User, data: SkillCreate) -> Skill:
        authorize(actor, Action.CREATE_SKILL)
        logger.info(f"📥 Creating skill for user_id: {actor.id}")

        skill = self.repo.create_skill(
            self.db,
            actor.id,
            title=sanitize_string(data.title),
            description=sanitize_string(data.description),
            category=data.category.strip(),
            difficulty=data.difficulty,
            duration=sanitize_string(data.duration),
            price=sanitize_string(data.price),
            max_students=data.maxStudents,
            current_students=0,
            images=data.images,
            syllabus=_clean_items(data.syllabus),
            requirements=_clean_items(data.requirements),
            is_active=True,
        )
        logger.info(f"✅ Skill {skill.id} listed by user {actor.id}")
        return skill

    def update_skill(self, skill_id: int, actor: User, data: SkillUpdate) -> Skill:
        """Owner edit; capacity cannot drop below the seats already taken"""
        skill = self._get_or_404(skill_id)
        authorize(actor, Action.UPDATE_SKILL, skill)

        if data.maxStudents is not None and data.maxStudents < skill.current_students:
            raise ValidationError(
                f"This skill already has {skill.current_students} students enrolled"
            )

        updates = {
            "title": sanitize_string(data.title) if data.title is not None else None,
            "description": sanitize_string(data.description) if data.description is not None else None,
            "category": data.category.strip() if data.category is not None else None,
            "difficulty": data.difficulty,
            "duration": sanitize_string(data.duration) if data.duration is not None else None,
            "price": sanitize_string(data.price) if data.price is not None else None,
            "max_students": data.maxStudents,
            "images": data.images,
            "syllabus": _clean_items(data.syllabus),
            "requirements": _clean_items(data.requirements),
            "is_active": data.isActive,
            "updated_at": datetime.utcnow(),
        }
        return self.repo.update_skill(self.db, skill, **updates)

    def get_skill(self, skill_id: int, viewer: Optional[User] = None) -> Skill:
        """Unlisted skills are only visible to their owner and admins"""
        skill = self._get_or_404(skill_id)
        if not self._is_listed(skill):
            is_owner = viewer is not None and viewer.id == skill.user_id
            if not (is_owner or role_of(viewer) == Role.ADMIN):
                raise NotFoundError("Skill not found")
        return skill

    def list_skills(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        provider_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Skill]:
        if category in ALL_CATEGORIES:
            category = None
        if difficulty == "all":
            difficulty = None
        if difficulty is not None and difficulty not in DIFFICULTIES:
            raise ValidationError(f"Invalid difficulty filter: {difficulty}")

        return self.repo.search_skills(
            self.db,
            search=search,
            category=category,
            difficulty=difficulty,
            provider_id=provider_id,
            limit=limit,
            offset=offset,
        )

    def list_own_skills(self, actor: User) -> list[Skill]:
        return self.repo.get_skills_by_owner(self.db, actor.id)

    # Enrollments

    def _get_visible_enrollment(self, enrollment_id: int, actor: User) -> Enrollment:
        enrollment = self.repo.get_enrollment(self.db, enrollment_id)
        if not enrollment or not is_allowed(actor, Action.VIEW_ENROLLMENT, enrollment):
            raise NotFoundError("Enrollment not found")
        return enrollment

    @staticmethod
    def _release_seat(enrollment: Enrollment) -> None:
        if enrollment.status in SEAT_HOLDING_STATUSES:
            skill = enrollment.skill
            skill.current_students = max((skill.current_students or 0) - 1, 0)

    def enroll(self, student: User, skill_id: int) -> Enrollment:
        """
        Enroll a student in a listed skill.

        A second enrollment in the same skill raises ConflictError unless the
        earlier one was cancelled, in which case that record is reopened.
        """
        authorize(student, Action.ENROLL_IN_SKILL)
        skill = self.get_listed_skill(skill_id)

        if skill.user_id == student.id:
            raise ValidationError("You cannot enroll in your own skill")

        enrollment = self.repo.get_student_enrollment(self.db, student.id, skill.id)
        if enrollment and enrollment.status != "cancelled":
            logger.warning(f"⚠️ User {student.id} is already enrolled in skill {skill.id}")
            raise ConflictError("Already enrolled in this skill")

        if skill.current_students >= skill.max_students:
            raise ValidationError("This skill has no open seats")

        now = datetime.utcnow()
        if enrollment:
            enrollment.status = "active"
            enrollment.progress = 0
            enrollment.completed_at = None
            enrollment.enrolled_at = now
        else:
            enrollment = Enrollment(
                student_id=student.id,
                skill_id=skill.id,
                provider_id=skill.user_id,
                status="active",
                progress=0,
                enrolled_at=now,
            )
        skill.current_students = (skill.current_students or 0) + 1

        enrollment = self.repo.save_enrollment(self.db, enrollment, "enroll in the skill")
        logger.info(f"✅ User {student.id} enrolled in skill {skill.id}")
        return enrollment

    def update_progress(self, enrollment_id: int, actor: User, progress: int) -> Enrollment:
        """Teacher records progress; reaching 100 completes the enrollment"""
        enrollment = self._get_visible_enrollment(enrollment_id, actor)
        authorize(actor, Action.TEACH_ENROLLMENT, enrollment)

        if enrollment.status != "active":
            raise InvalidStateTransition(
                "enrollment",
                enrollment.status,
                "active",
                detail=f"Cannot update progress on a {enrollment.status} enrollment",
            )
        if not 0 <= progress <= 100:
            raise ValidationError("Progress must be between 0 and 100")

        enrollment.progress = progress
        if progress == 100:
            self._release_seat(enrollment)
            enrollment.status = "completed"
            enrollment.completed_at = datetime.utcnow()

        enrollment = self.repo.save_enrollment(self.db, enrollment, "update the enrollment")
        logger.info(f"🔄 Enrollment {enrollment.id}: progress={progress} ({enrollment.status})")
        return enrollment

    def cancel_enrollment(self, enrollment_id: int, actor: User) -> Enrollment:
        enrollment = self._get_visible_enrollment(enrollment_id, actor)
        authorize(actor, Action.CANCEL_ENROLLMENT, enrollment)

        if enrollment.status not in SEAT_HOLDING_STATUSES:
            raise InvalidStateTransition("enrollment", enrollment.status, "cancelled")

        self._release_seat(enrollment)
        enrollment.status = "cancelled"

        enrollment = self.repo.save_enrollment(self.db, enrollment, "cancel the enrollment")
        logger.info(f"🔄 Enrollment {enrollment.id} cancelled by user {actor.id}")
        return enrollment

    def get_enrollment(self, enrollment_id: int, actor: User) -> Enrollment:
        return self._get_visible_enrollment(enrollment_id, actor)

    def list_enrollments(
        self,
        actor: User,
        skill_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Enrollment]:
        """Students see their own enrollments, artisans their learners, admins all"""
        if status is not None and status not in ENROLLMENT_STATUSES:
            raise ValidationError(f"Invalid status filter: {status}")

        role = role_of(actor)
        if role == Role.ADMIN:
            scope = {}
        elif role == Role.ARTISAN:
            scope = {"provider_id": actor.id}
        else:
            scope = {"student_id": actor.id}

        return self.repo.list_enrollments(self.db, skill_id=skill_id, status=status, **scope)
