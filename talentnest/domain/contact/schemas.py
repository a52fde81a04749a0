"""Contact domain schemas"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

ContactIntent = Literal["skill_learning", "direct_service"]


class ContactProviderRequest(BaseModel):
    intent: ContactIntent = "direct_service"
    skillTitle: Optional[str] = Field(None, max_length=255)
    skillId: Optional[int] = None
    mobile: bool = False


class ContactLinkResponse(BaseModel):
    url: str
    intent: str
    providerId: int
    bookingId: Optional[int] = None
