"""Skills repository - Database operations for skills and enrollments"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...database import commit_or_raise
from ...models import Enrollment, Skill, User


class SkillRepository:
    """Repository for skill and enrollment database operations"""

    @staticmethod
    def get_skill(db: Session, skill_id: int) -> Optional[Skill]:
        return (
            db.query(Skill)
            .options(joinedload(Skill.owner))
            .filter(Skill.id == skill_id)
            .first()
        )

    @staticmethod
    def get_skills_by_owner(db: Session, user_id: int) -> list[Skill]:
        return (
            db.query(Skill)
            .filter(Skill.user_id == user_id)
            .order_by(Skill.created_at.desc(), Skill.id.desc())
            .all()
        )

    @staticmethod
    def create_skill(db: Session, user_id: int, **skill_data) -> Skill:
        """Create a new skill"""
        skill = Skill(user_id=user_id, **skill_data)
        db.add(skill)
        commit_or_raise(db, "create the skill")
        db.refresh(skill)
        return skill

    @staticmethod
    def update_skill(db: Session, skill: Skill, **updates) -> Skill:
        """Update a skill with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(skill, key):
                setattr(skill, key, value)

        commit_or_raise(db, "update the skill")
        db.refresh(skill)
        return skill

    @staticmethod
    def search_skills(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        provider_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Skill]:
        """Listed skills of active providers, newest first"""
        query = (
            db.query(Skill)
            .join(User, Skill.user_id == User.id)
            .options(joinedload(Skill.owner))
            .filter(Skill.is_active.is_(True), User.is_active.is_(True))
        )

        if category:
            query = query.filter(Skill.category == category)

        if difficulty:
            query = query.filter(Skill.difficulty == difficulty)

        if provider_id:
            query = query.filter(Skill.user_id == provider_id)

        if search:
            search_term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Skill.title.ilike(search_term),
                    Skill.description.ilike(search_term),
                    Skill.category.ilike(search_term),
                    User.full_name.ilike(search_term),
                    User.business_name.ilike(search_term),
                )
            )

        query = query.order_by(Skill.created_at.desc(), Skill.id.desc()).offset(offset)
        if limit:
            query = query.limit(limit)

        return query.all()

    @staticmethod
    def get_enrollment(db: Session, enrollment_id: int) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .options(joinedload(Enrollment.skill))
            .filter(Enrollment.id == enrollment_id)
            .first()
        )

    @staticmethod
    def get_student_enrollment(db: Session, student_id: int, skill_id: int) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(Enrollment.student_id == student_id, Enrollment.skill_id == skill_id)
            .first()
        )

    @staticmethod
    def save_enrollment(db: Session, enrollment: Enrollment, action: str) -> Enrollment:
        """Add (if new) and commit the enrollment with any seat-count change"""
        db.add(enrollment)
        commit_or_raise(db, action)
        db.refresh(enrollment)
        return enrollment

    @staticmethod
    def list_enrollments(
        db: Session,
        student_id: Optional[int] = None,
        provider_id: Optional[int] = None,
        skill_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Enrollment]:
        query = db.query(Enrollment).options(joinedload(Enrollment.skill))

        if student_id is not None:
            query = query.filter(Enrollment.student_id == student_id)
        if provider_id is not None:
            query = query.filter(Enrollment.provider_id == provider_id)
        if skill_id is not None:
            query = query.filter(Enrollment.skill_id == skill_id)
        if status:
            query = query.filter(Enrollment.status == status)

        return query.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc()).all()
