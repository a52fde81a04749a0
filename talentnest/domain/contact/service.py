"""
Contact Bridge
Builds WhatsApp deep links with a pre-filled message and records the hand-off.
The conversation itself never passes through TalentNest.
"""

import logging
from typing import Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from ...config import WHATSAPP_MOBILE_URL, WHATSAPP_WEB_URL
from ...models import Booking, User
from ...shared.errors import InvalidContactNumber, NotFoundError, ValidationError
from ...shared.policy import Action, Role, authorize, role_of
from ...shared.validators import clean_phone_number, is_valid_whatsapp_number
from ..skills.service import SkillCatalog
from . import templates
from .repository import ContactEventRepository

logger = logging.getLogger(__name__)


class ContactBridge:
    """Service layer for WhatsApp contact hand-offs"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContactEventRepository()

    def render_message(
        self,
        provider: User,
        requester: User,
        intent: str,
        skill_title: Optional[str] = None,
        booking: Optional[Booking] = None,
    ) -> str:
        """Render the message template for an intent"""
        if intent not in templates.INTENTS:
            raise ValidationError(f"Unknown contact intent: {intent}")

        if intent == templates.SKILL_LEARNING:
            if not skill_title or not skill_title.strip():
                raise ValidationError("A skill title is required for skill learning requests")
            return templates.render_skill_learning(
                provider_name=provider.display_name,
                requester_name=requester.full_name,
                skill_title=skill_title,
                available_for_learning=bool(provider.available_for_learning),
            )

        return templates.render_direct_service(
            provider_name=provider.display_name,
            requester_name=requester.full_name,
            skills=provider.skills or [],
            booking_title=booking.title if booking else None,
        )

    def build_contact_link(
        self,
        provider: User,
        requester: User,
        intent: str,
        skill_title: Optional[str] = None,
        mobile: bool = False,
        booking: Optional[Booking] = None,
        skill_id: Optional[int] = None,
    ) -> str:
        """
        Build the WhatsApp deep link for contacting ``provider``.

        Raises InvalidContactNumber (and records nothing) when the provider's
        number does not normalize to '+' followed by 10-15 digits.
        """
        if not is_valid_whatsapp_number(provider.whatsapp_number):
            logger.warning(f"⚠️ User {provider.id} has no valid WhatsApp number")
            raise InvalidContactNumber("This provider has not set up a valid WhatsApp number")

        message = self.render_message(provider, requester, intent, skill_title, booking)
        digits = clean_phone_number(provider.whatsapp_number).lstrip("+")
        encoded = quote(message, safe="")

        if mobile:
            url = f"{WHATSAPP_MOBILE_URL}/{digits}?text={encoded}"
        else:
            url = f"{WHATSAPP_WEB_URL}?phone={digits}&text={encoded}"

        self._record_contact(requester, provider, intent, skill_title, booking, skill_id)
        return url

    def _record_contact(
        self,
        requester: User,
        provider: User,
        intent: str,
        skill_title: Optional[str],
        booking: Optional[Booking],
        skill_id: Optional[int] = None,
    ) -> None:
        """Analytics only; a failure here must not block the hand-off"""
        try:
            self.repo.record_event(
                self.db,
                requester_id=requester.id,
                provider_id=provider.id,
                intent=intent,
                booking_id=booking.id if booking else None,
                skill_id=skill_id,
                skill_title=skill_title,
            )
            logger.info(f"📱 Contact recorded: user {requester.id} → user {provider.id} ({intent})")
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record contact event for user {requester.id}: {e}")

    def contact_provider(
        self,
        requester: User,
        provider_id: int,
        intent: str,
        skill_title: Optional[str] = None,
        mobile: bool = False,
        skill_id: Optional[int] = None,
    ) -> str:
        """
        Contact an artisan straight from their profile, outside any booking.

        For skill learning, ``skill_id`` names one of the provider's listed
        skills and its title replaces any free-text ``skill_title``.
        """
        authorize(requester, Action.CONTACT_PROVIDER)

        provider = self.db.query(User).filter(User.id == provider_id).first()
        if not provider or not provider.is_active or role_of(provider) != Role.ARTISAN:
            raise NotFoundError("Provider not found")
        if provider.id == requester.id:
            raise ValidationError("You cannot contact yourself")

        if skill_id is not None and intent == templates.SKILL_LEARNING:
            skill = SkillCatalog(self.db).get_listed_skill(skill_id)
            if skill.user_id != provider.id:
                raise NotFoundError("Skill not found")
            skill_title = skill.title
        else:
            skill_id = None

        return self.build_contact_link(
            provider, requester, intent, skill_title, mobile, skill_id=skill_id
        )
