"""Contact router - WhatsApp hand-off from a provider profile"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import CONTACT_RATE_LIMIT, CONTACT_RATE_WINDOW
from ...database import get_db
from ...models import User
from ...rate_limiter import create_user_rate_limiter
from .schemas import ContactLinkResponse, ContactProviderRequest
from .service import ContactBridge

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])

contact_rate_limit = create_user_rate_limiter(CONTACT_RATE_LIMIT, CONTACT_RATE_WINDOW, "contact")


def get_contact_bridge(db: Session = Depends(get_db)) -> ContactBridge:
    """Dependency injection for ContactBridge"""
    return ContactBridge(db)


@router.post("/providers/{provider_id}", response_model=ContactLinkResponse)
async def contact_provider(
    provider_id: int,
    data: ContactProviderRequest,
    current_user: User = Depends(get_current_user),
    bridge: ContactBridge = Depends(get_contact_bridge),
    _: None = Depends(contact_rate_limit),
):
    """Get a WhatsApp link to a provider, pre-filled for the chosen intent"""
    url = bridge.contact_provider(
        current_user, provider_id, data.intent, data.skillTitle, data.mobile, skill_id=data.skillId
    )
    return ContactLinkResponse(url=url, intent=data.intent, providerId=provider_id)
