"""Admin console - platform statistics and user oversight"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from ...shared.errors import ValidationError
from ...shared.policy import Action, Role, authorize
from ..contact.repository import ContactEventRepository
from .repository import AdminRepository

logger = logging.getLogger(__name__)

USER_ROLE_FILTERS = ("all",) + tuple(role.value for role in Role)


class AdminConsole:
    """Service layer for admin-only reads"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    def get_platform_stats(self, admin: User) -> dict:
        """Headline numbers for the admin dashboard"""
        authorize(admin, Action.VIEW_ADMIN_CONSOLE)

        users_by_role = self.repo.count_users_by_role(self.db)
        services_by_status = self.repo.count_services_by_status(self.db)
        bookings_by_status = self.repo.count_bookings_by_status(self.db)

        total_bookings = sum(bookings_by_status.values())
        completed_bookings = bookings_by_status.get("completed", 0)
        completion_rate = (
            round(completed_bookings / total_bookings * 100, 1) if total_bookings else 0.0
        )

        stats = {
            "total_users": sum(users_by_role.values()),
            "users_by_role": {role.value: users_by_role.get(role.value, 0) for role in Role},
            "verified_users": self.repo.count_verified_users(self.db),
            "active_services": self.repo.count_active_services(self.db),
            "pending_services": services_by_status.get("pending", 0),
            "total_bookings": total_bookings,
            "completed_bookings": completed_bookings,
            "completion_rate": completion_rate,
            "pending_verifications": self.repo.count_pending_verifications(self.db),
            "contacts_by_intent": ContactEventRepository.count_by_intent(self.db),
        }
        logger.debug(f"📊 Platform stats computed for admin {admin.id}")
        return stats

    def list_users(
        self,
        admin: User,
        role: Optional[str] = None,
        verified: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> list[User]:
        authorize(admin, Action.VIEW_ADMIN_CONSOLE)
        if role is not None and role not in USER_ROLE_FILTERS:
            raise ValidationError(f"Invalid role filter: {role}")
        return self.repo.search_users(self.db, role=role, verified=verified, search=search)
