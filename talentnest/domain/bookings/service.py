"""Booking service - Business logic for the booking lifecycle"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, User
from ...shared.errors import NotFoundError, ValidationError
from ...shared.policy import Action, authorize, is_allowed
from ...utils.sanitization import sanitize_string
from ..catalog.repository import ServiceRepository
from ..contact.service import ContactBridge
from ..contact.templates import DIRECT_SERVICE
from . import state_machine as sm
from .repository import BookingRepository
from .schemas import BookingCreate

logger = logging.getLogger(__name__)


class BookingEngine:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.services = ServiceRepository()

    def create_booking(self, client: User, data: BookingCreate) -> Booking:
        """Book a discoverable service; the booking starts in `pending`"""
        authorize(client, Action.BOOK_SERVICE)

        service = self.services.get_service(self.db, data.serviceId)
        if not service or service.status != "active" or not service.is_active:
            raise NotFoundError("Service not found")

        if data.providerId != service.user_id:
            logger.warning(
                f"⚠️ Booking rejected: provider {data.providerId} does not own service {service.id}"
            )
            raise ValidationError("providerId does not match the owner of this service")

        description = data.description.strip() if data.description else ""
        booking = self.repo.create_booking(
            self.db,
            service,
            client_id=client.id,
            provider_id=service.user_id,
            title=service.title,
            description=sanitize_string(description) if description else service.description,
            agreed_price=sanitize_string(data.agreedPrice) if data.agreedPrice else None,
            status=sm.PENDING,
            whatsapp_chat_initiated=False,
        )
        logger.info(f"✅ Booking {booking.id} created: client {client.id} → provider {booking.provider_id}")
        return booking

    def _get_visible(self, booking_id: int, actor: User) -> Booking:
        """Load a booking, hiding it from anyone who is neither participant nor admin"""
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking or not is_allowed(actor, Action.VIEW_BOOKING, booking):
            raise NotFoundError("Booking not found")
        return booking

    def get_booking(self, booking_id: int, actor: User) -> Booking:
        return self._get_visible(booking_id, actor)

    def transition(self, booking_id: int, actor: User, new_status: str) -> Booking:
        """Move a booking along the workflow, checking both the edge and the actor's side"""
        booking = self._get_visible(booking_id, actor)
        sides = sm.participant_sides(booking, actor)

        sm.check_transition(booking, sides, new_status)

        previous = booking.status
        booking = self.repo.update_booking(
            self.db, booking, status=new_status, updated_at=datetime.utcnow()
        )
        logger.info(f"🔄 Booking {booking.id} status: {previous} → {new_status} (user {actor.id})")
        return booking

    def accept(self, booking_id: int, actor: User) -> Booking:
        return self.transition(booking_id, actor, sm.ACCEPTED)

    def start(self, booking_id: int, actor: User) -> Booking:
        return self.transition(booking_id, actor, sm.IN_PROGRESS)

    def complete(self, booking_id: int, actor: User) -> Booking:
        return self.transition(booking_id, actor, sm.COMPLETED)

    def cancel(self, booking_id: int, actor: User) -> Booking:
        return self.transition(booking_id, actor, sm.CANCELLED)

    def initiate_contact(
        self, booking_id: int, actor: User, mobile: bool = False
    ) -> tuple[str, Booking]:
        """
        Open WhatsApp with the other participant of the booking.

        Marks the booking as having had a chat initiated; calling again just
        returns a fresh link.
        """
        booking = self._get_visible(booking_id, actor)
        sides = sm.participant_sides(booking, actor)
        if not sides:
            raise NotFoundError("Booking not found")

        counterpart = booking.provider if sm.CLIENT in sides else booking.client

        bridge = ContactBridge(self.db)
        url = bridge.build_contact_link(
            provider=counterpart,
            requester=actor,
            intent=DIRECT_SERVICE,
            mobile=mobile,
            booking=booking,
        )

        if not booking.whatsapp_chat_initiated:
            booking = self.repo.update_booking(
                self.db, booking, whatsapp_chat_initiated=True, updated_at=datetime.utcnow()
            )
            logger.info(f"📱 WhatsApp chat initiated for booking {booking.id}")

        return url, booking

    def list_for_user(
        self, user: User, as_role: Optional[str] = None, status: Optional[str] = None
    ) -> list[Booking]:
        """Bookings the user takes part in, newest first"""
        if as_role not in (None, sm.CLIENT, sm.PROVIDER):
            raise ValidationError(f"Invalid booking side: {as_role}")
        return self.repo.get_bookings_for_user(self.db, user.id, as_role=as_role, status=status)

    def partition_for_user(self, user: User) -> dict[str, list[Booking]]:
        """
        Split the user's bookings into the client and provider views.

        The two lists overlap only when a user booked their own service.
        """
        bookings = self.repo.get_bookings_for_user(self.db, user.id)
        return {
            "as_client": [b for b in bookings if b.client_id == user.id],
            "as_provider": [b for b in bookings if b.provider_id == user.id],
        }
