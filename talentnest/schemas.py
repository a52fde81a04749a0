from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: int
    email: str
    role: str
    full_name: str
    phone_number: Optional[str]
    whatsapp_number: Optional[str]
    is_verified: bool
    is_active: bool
    rating: float
    review_count: int
    matric_number: Optional[str]
    faculty: Optional[str]
    department: Optional[str]
    level: Optional[str]
    business_name: Optional[str]
    bio: Optional[str]
    skills: Optional[list[str]] = None
    available_for_learning: bool
    profile_image_url: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    """What anyone may see about a provider; contact details stay private"""

    id: int
    role: str
    full_name: str
    business_name: Optional[str]
    bio: Optional[str]
    skills: Optional[list[str]] = None
    is_verified: bool
    rating: float
    review_count: int
    available_for_learning: bool
    department: Optional[str]
    profile_image_url: Optional[str]

    class Config:
        from_attributes = True
