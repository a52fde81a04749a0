"""Contact repository - Database operations for contact analytics"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import ContactEvent


class ContactEventRepository:
    """Repository for contact event database operations"""

    @staticmethod
    def record_event(
        db: Session,
        requester_id: int,
        provider_id: int,
        intent: str,
        booking_id: Optional[int] = None,
        skill_title: Optional[str] = None,
        skill_id: Optional[int] = None,
    ) -> ContactEvent:
        """Persist one contact hand-off; the caller decides how to treat failures"""
        event = ContactEvent(
            requester_id=requester_id,
            provider_id=provider_id,
            intent=intent,
            booking_id=booking_id,
            skill_id=skill_id,
            skill_title=skill_title,
        )
        db.add(event)
        db.commit()
        return event

    @staticmethod
    def count_by_intent(db: Session) -> dict[str, int]:
        """Contact hand-offs grouped by intent"""
        rows = (
            db.query(ContactEvent.intent, func.count(ContactEvent.id))
            .group_by(ContactEvent.intent)
            .all()
        )
        return {intent: count for intent, count in rows}
