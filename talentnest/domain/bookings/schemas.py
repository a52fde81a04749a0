"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

BookingStatus = Literal["pending", "accepted", "in_progress", "completed", "cancelled"]


class BookingCreate(BaseModel):
    """Schema for booking a service"""

    serviceId: int
    providerId: int
    description: Optional[str] = Field(None, max_length=2000)
    agreedPrice: Optional[str] = Field(None, max_length=100)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class ContactRequest(BaseModel):
    mobile: bool = False


class ParticipantSummary(BaseModel):
    id: int
    fullName: str
    businessName: Optional[str] = None
    isVerified: bool


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    serviceId: int
    clientId: int
    providerId: int
    title: str
    description: Optional[str]
    agreedPrice: Optional[str]
    status: str
    whatsappChatInitiated: bool
    client: Optional[ParticipantSummary] = None
    provider: Optional[ParticipantSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, booking) -> "BookingResponse":
        def summary(user):
            if user is None:
                return None
            return ParticipantSummary(
                id=user.id,
                fullName=user.full_name,
                businessName=user.business_name,
                isVerified=user.is_verified,
            )

        return cls(
            id=booking.id,
            serviceId=booking.service_id,
            clientId=booking.client_id,
            providerId=booking.provider_id,
            title=booking.title,
            description=booking.description,
            agreedPrice=booking.agreed_price,
            status=booking.status,
            whatsappChatInitiated=booking.whatsapp_chat_initiated,
            client=summary(booking.client),
            provider=summary(booking.provider),
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
        )


class BookingPartitionResponse(BaseModel):
    asClient: list[BookingResponse]
    asProvider: list[BookingResponse]


class BookingContactResponse(BaseModel):
    url: str
    booking: BookingResponse
