"""Catalog service - Business logic for service listings"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service, User
from ...shared.errors import NotFoundError, ValidationError
from ...shared.policy import Action, authorize
from ...utils.sanitization import sanitize_string
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

SERVICE_STATUSES = ("pending", "active", "rejected", "flagged")


class CatalogService:
    """Service layer for catalog business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def _get_or_404(self, service_id: int) -> Service:
        service = self.repo.get_service(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def create_service(self, actor: User, data: ServiceCreate) -> Service:
        """Create a new listing; it waits in `pending` until an admin activates it"""
        authorize(actor, Action.CREATE_SERVICE)
        logger.info(f"📥 Creating service for user_id: {actor.id}")

        service = self.repo.create_service(
            self.db,
            actor.id,
            title=sanitize_string(data.title),
            description=sanitize_string(data.description),
            category=data.category.strip(),
            subcategory=data.subcategory.strip() if data.subcategory else None,
            price_range=sanitize_string(data.priceRange),
            delivery_time=sanitize_string(data.deliveryTime),
            images=data.images,
            tags=data.tags,
            status="pending",
            is_active=True,
            views_count=0,
            orders_count=0,
        )
        logger.info(f"✅ Service {service.id} created in pending status")
        return service

    def update_service(self, service_id: int, actor: User, data: ServiceUpdate) -> Service:
        """Owner edit; never touches status"""
        service = self._get_or_404(service_id)
        authorize(actor, Action.UPDATE_SERVICE, service)

        updates = {}
        if data.title is not None:
            updates["title"] = sanitize_string(data.title)
        if data.description is not None:
            updates["description"] = sanitize_string(data.description)
        if data.category is not None:
            updates["category"] = data.category.strip()
        if data.subcategory is not None:
            updates["subcategory"] = data.subcategory.strip()
        if data.priceRange is not None:
            updates["price_range"] = sanitize_string(data.priceRange)
        if data.deliveryTime is not None:
            updates["delivery_time"] = sanitize_string(data.deliveryTime)
        if data.images is not None:
            updates["images"] = data.images
        if data.tags is not None:
            updates["tags"] = data.tags
        updates["updated_at"] = datetime.utcnow()

        return self.repo.update_service(self.db, service, **updates)

    def set_service_status(self, service_id: int, status: str, actor: User) -> Service:
        """Admin moderation; only `active` listings are discoverable"""
        authorize(actor, Action.MODERATE_SERVICE)
        if status not in SERVICE_STATUSES:
            raise ValidationError(f"Invalid service status: {status}")

        service = self._get_or_404(service_id)

        if status == "active" and not service.owner.is_verified:
            logger.warning(
                f"⚠️ Admin {actor.id} tried to activate service {service.id} of unverified provider"
            )
            raise ValidationError("The provider must be verified before this listing can be activated")

        logger.info(f"🔄 Service {service.id} status: {service.status} → {status} (admin {actor.id})")
        return self.repo.update_service(
            self.db,
            service,
            status=status,
            is_active=status == "active",
            updated_at=datetime.utcnow(),
        )

    def set_listing_active(self, service_id: int, actor: User, is_active: bool) -> Service:
        """Soft-disable or re-enable a listing (owner or admin)"""
        service = self._get_or_404(service_id)
        authorize(actor, Action.TOGGLE_SERVICE, service)

        # Setting False explicitly; update_service skips None only
        service.is_active = is_active
        return self.repo.update_service(self.db, service, updated_at=datetime.utcnow())

    def get_service(self, service_id: int, viewer: Optional[User] = None) -> Service:
        """Public read; hidden listings are only visible to their owner and admins"""
        service = self._get_or_404(service_id)

        discoverable = service.status == "active" and service.is_active
        if not discoverable:
            is_owner = viewer is not None and viewer.id == service.user_id
            is_admin = viewer is not None and viewer.role == "admin"
            if not (is_owner or is_admin):
                raise NotFoundError("Service not found")
            return service

        self.repo.increment_views(self.db, service)
        return service

    def list_active(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        provider_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Service]:
        """Discoverable listings, newest first"""
        return self.repo.search_services(
            self.db,
            discoverable_only=True,
            search=search,
            category=category,
            provider_id=provider_id,
            limit=limit,
            offset=offset,
        )

    def list_own_services(self, actor: User) -> list[Service]:
        """Every listing the actor owns, whatever its status"""
        return self.repo.get_services_by_owner(self.db, actor.id)

    def list_all(
        self,
        actor: User,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Service]:
        """Admin listing across all statuses"""
        authorize(actor, Action.MODERATE_SERVICE)
        return self.repo.search_services(self.db, status=status, category=category, search=search)
