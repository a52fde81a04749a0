import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..auth import get_current_user, get_token_claims
from ..config import ADMIN_EMAILS
from ..database import commit_or_raise, get_db
from ..models import User
from ..schemas import PublicProfileResponse, UserResponse
from ..shared.errors import AuthorizationError, NotFoundError, ValidationError
from ..shared.validators import (
    normalize_phone_number,
    validate_email,
    validate_matric_number,
    validate_tags,
)
from ..utils.sanitization import sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


class ProfileFields(BaseModel):
    phoneNumber: Optional[str] = None
    whatsappNumber: Optional[str] = None
    matricNumber: Optional[str] = None
    faculty: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    level: Optional[str] = Field(None, max_length=20)
    businessName: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = Field(None, max_length=2000)
    skills: Optional[list[str]] = None
    availableForLearning: Optional[bool] = None
    profileImageUrl: Optional[str] = Field(None, max_length=500)

    @field_validator("phoneNumber", "whatsappNumber")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone_number(v)

    @field_validator("matricNumber")
    @classmethod
    def validate_matric(cls, v: Optional[str]) -> Optional[str]:
        return validate_matric_number(v)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return validate_tags(v, max_tags=20, max_length=100)

    @field_validator("profileImageUrl")
    @classmethod
    def reject_data_uri(cls, v: Optional[str]) -> Optional[str]:
        # Data URIs are too long for the column; upload the image instead
        if v and v.startswith("data:"):
            raise ValueError("Upload the image and send its URL or storage key")
        return v


class UserRegister(ProfileFields):
    role: Literal["student", "artisan", "admin"]
    fullName: str = Field(..., min_length=1, max_length=255)


class UserUpdate(ProfileFields):
    fullName: Optional[str] = Field(None, min_length=1, max_length=255)


_PROFILE_COLUMNS = {
    "fullName": "full_name",
    "phoneNumber": "phone_number",
    "whatsappNumber": "whatsapp_number",
    "matricNumber": "matric_number",
    "faculty": "faculty",
    "department": "department",
    "level": "level",
    "businessName": "business_name",
    "bio": "bio",
    "skills": "skills",
    "availableForLearning": "available_for_learning",
    "profileImageUrl": "profile_image_url",
}

_FREE_TEXT = {"fullName", "faculty", "department", "level", "businessName", "bio"}


def _profile_values(data: ProfileFields) -> dict:
    """Map the provided camelCase fields onto model columns"""
    values = {}
    for field, column in _PROFILE_COLUMNS.items():
        value = getattr(data, field, None)
        if value is None:
            continue
        values[column] = sanitize_string(value) if field in _FREE_TEXT else value
    return values


@router.post("/register", response_model=UserResponse, status_code=201)
def register_user(
    data: UserRegister,
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """Create the TalentNest profile for a signed-in identity"""
    try:
        email = validate_email(claims.get("email"))
    except ValueError as e:
        raise ValidationError(str(e))
    if not email:
        raise ValidationError("Your sign-in account has no email address")

    logger.info(f"📥 Registering {email} as {data.role}")

    existing = (
        db.query(User).filter(or_(User.auth_uid == claims["sub"], User.email == email)).first()
    )
    if existing:
        raise ValidationError("This account is already registered")

    if data.role == "admin" and email not in ADMIN_EMAILS:
        logger.warning(f"🚫 {email} tried to register as admin")
        raise AuthorizationError("You are not allowed to register as an admin")

    profile = _profile_values(data)
    profile.setdefault("available_for_learning", False)

    user = User(
        auth_uid=claims["sub"],
        email=email,
        role=data.role,
        is_verified=False,
        is_active=True,
        rating=0.0,
        review_count=0,
        **profile,
    )
    db.add(user)
    commit_or_raise(db, "register the account")
    db.refresh(user)

    logger.info(f"✅ User {user.id} registered ({user.role})")
    return user


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit the caller's own profile; role and verification are not editable here"""
    logger.info(f"📥 Updating profile for user {current_user.id}")

    for column, value in _profile_values(data).items():
        setattr(current_user, column, value)

    commit_or_raise(db, "update your profile")
    db.refresh(current_user)
    return current_user


@router.get("/{user_id}/public", response_model=PublicProfileResponse)
def get_public_profile(user_id: int, db: Session = Depends(get_db)):
    """Provider profile page"""
    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    if not user or user.role == "admin":
        raise NotFoundError("User not found")
    return user
