"""Catalog domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_tags

ServiceStatus = Literal["pending", "active", "rejected", "flagged"]


class ServiceCreate(BaseModel):
    """Schema for creating a new service listing"""

    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10, max_length=5000)
    category: str = Field(..., min_length=1, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    priceRange: str = Field(..., min_length=1, max_length=100)
    deliveryTime: str = Field(..., min_length=1, max_length=100)
    images: list[str] = []
    tags: list[str] = []

    @field_validator("tags")
    @classmethod
    def validate_tag_list(cls, v):
        return validate_tags(v)


class ServiceUpdate(BaseModel):
    """Schema for updating an existing service (status is not editable here)"""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=100)
    priceRange: Optional[str] = Field(None, min_length=1, max_length=100)
    deliveryTime: Optional[str] = Field(None, min_length=1, max_length=100)
    images: Optional[list[str]] = None
    tags: Optional[list[str]] = None

    @field_validator("tags")
    @classmethod
    def validate_tag_list(cls, v):
        return validate_tags(v)


class ServiceStatusUpdate(BaseModel):
    """Admin moderation of a listing"""

    status: ServiceStatus


class ServiceActiveUpdate(BaseModel):
    """Owner soft-disable / re-enable"""

    isActive: bool


class ProviderSummary(BaseModel):
    id: int
    fullName: str
    businessName: Optional[str] = None
    isVerified: bool
    rating: float
    reviewCount: int


class ServiceResponse(BaseModel):
    """Schema for service response"""

    id: int
    userId: int
    title: str
    description: str
    category: str
    subcategory: Optional[str]
    priceRange: str
    deliveryTime: str
    images: list[str]
    tags: list[str]
    status: str
    isActive: bool
    viewsCount: int
    ordersCount: int
    provider: Optional[ProviderSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, service) -> "ServiceResponse":
        owner = service.owner
        return cls(
            id=service.id,
            userId=service.user_id,
            title=service.title,
            description=service.description,
            category=service.category,
            subcategory=service.subcategory,
            priceRange=service.price_range,
            deliveryTime=service.delivery_time,
            images=service.images or [],
            tags=service.tags or [],
            status=service.status,
            isActive=service.is_active,
            viewsCount=service.views_count,
            ordersCount=service.orders_count,
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
            createdAt=service.created_at,
            updatedAt=service.updated_at,
        )
