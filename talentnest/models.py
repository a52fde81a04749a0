from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    auth_uid = Column(String(255), unique=True, index=True, nullable=False)  # Identity provider subject
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, index=True)  # student, artisan, admin
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=True)  # E.164
    whatsapp_number = Column(String(20), nullable=True)  # E.164, target of contact links
    is_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # Soft status, users are never deleted
    rating = Column(Float, default=0.0, nullable=False)  # Average of received reviews
    review_count = Column(Integer, default=0, nullable=False)

    # Student profile
    matric_number = Column(String(20), nullable=True, index=True)
    faculty = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    level = Column(String(20), nullable=True)

    # Artisan profile
    business_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, default=list, nullable=True)
    available_for_learning = Column(Boolean, default=False, nullable=False)
    profile_image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="owner")
    skills_offered = relationship("Skill", back_populates="owner")
    verification_requests = relationship(
        "VerificationRequest",
        back_populates="applicant",
        foreign_keys="VerificationRequest.applicant_id",
    )

    @property
    def display_name(self) -> str:
        """Business name for artisans who set one, full name otherwise"""
        return self.business_name or self.full_name


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    subcategory = Column(String(100), nullable=True)
    price_range = Column(String(100), nullable=False)  # Free text, e.g. "₦5,000 - ₦10,000"
    delivery_time = Column(String(100), nullable=False)
    images = Column(JSON, default=list, nullable=True)
    tags = Column(JSON, default=list, nullable=True)
    tags_text = Column(Text, default="", nullable=False)  # Lowercased tags, one per line, for search
    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, active, rejected, flagged
    is_active = Column(Boolean, default=True, nullable=False)
    views_count = Column(Integer, default=0, nullable=False)
    orders_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="services")
    bookings = relationship("Booking", back_populates="service")

    @validates("tags")
    def _sync_tags_text(self, key, tags):
        self.tags_text = "\n".join(tag.lower() for tag in tags or [])
        return tags


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Service owner at creation time; not re-derived if the listing changes hands
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    agreed_price = Column(String(100), nullable=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    whatsapp_chat_initiated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    service = relationship("Service", back_populates="bookings")
    client = relationship("User", foreign_keys=[client_id])
    provider = relationship("User", foreign_keys=[provider_id])


class VerificationRequest(Base):
    __tablename__ = "verification_requests"

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Applicant identity
    applicant_name = Column(String(255), nullable=False)
    applicant_email = Column(String(255), nullable=False)
    student_id = Column(String(20), nullable=True)  # Matric number
    department = Column(String(255), nullable=True)

    # Business details
    business_name = Column(String(255), nullable=False)
    business_description = Column(Text, nullable=True)
    specializations = Column(JSON, default=list, nullable=True)
    experience_years = Column(Integer, default=0, nullable=False)

    # Evidence (storage keys or URLs)
    certificates = Column(JSON, default=list, nullable=True)
    bio_document = Column(String(500), nullable=True)
    supporting_documents = Column(JSON, default=list, nullable=True)

    # Checklist
    matric_number_verified = Column(Boolean, default=False, nullable=False)
    business_name_verified = Column(Boolean, default=False, nullable=False)
    certificates_verified = Column(Boolean, default=False, nullable=False)
    bio_verified = Column(Boolean, default=False, nullable=False)
    verification_complete = Column(Boolean, default=False, nullable=False)  # AND of the four checks

    # Review
    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, approved, rejected
    admin_notes = Column(Text, nullable=True)
    approved_with_override = Column(Boolean, default=False, nullable=False)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    submitted_at = Column(DateTime, server_default=func.now())
    reviewed_at = Column(DateTime, nullable=True)

    applicant = relationship(
        "User", back_populates="verification_requests", foreign_keys=[applicant_id]
    )
    reviewer = relationship("User", foreign_keys=[reviewed_by])


class ContactEvent(Base):
    """Analytics record of a WhatsApp hand-off"""

    __tablename__ = "contact_events"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    intent = Column(String(30), nullable=False)  # skill_learning, direct_service
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=True)
    skill_title = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("booking_id", "reviewer_id", name="uq_review_booking_reviewer"),)

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    reviewee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    booking = relationship("Booking")
    reviewer = relationship("User", foreign_keys=[reviewer_id])


class Category(Base):
    """Browsing category shared by services and skills"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Skill(Base):
    """A course an artisan teaches to students"""

    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    difficulty = Column(String(20), nullable=False, index=True)  # beginner, intermediate, advanced
    duration = Column(String(100), nullable=False)
    price = Column(String(100), nullable=False)  # Free text, like Service.price_range
    max_students = Column(Integer, nullable=False)
    current_students = Column(Integer, default=0, nullable=False)  # Pending and active enrollments
    images = Column(JSON, default=list, nullable=True)
    syllabus = Column(JSON, default=list, nullable=True)
    requirements = Column(JSON, default=list, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="skills_offered")
    enrollments = relationship("Enrollment", back_populates="skill")


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "skill_id", name="uq_enrollment_student_skill"),)

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), default="active", nullable=False, index=True)  # pending, active, completed, cancelled
    progress = Column(Integer, default=0, nullable=False)  # Percent, 0..100
    enrolled_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    skill = relationship("Skill", back_populates="enrollments")
    student = relationship("User", foreign_keys=[student_id])
    provider = relationship("User", foreign_keys=[provider_id])
