"""Catalog repository - Database operations for service listings"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...database import commit_or_raise
from ...models import Service


class ServiceRepository:
    """Repository for service listing database operations"""

    @staticmethod
    def get_service(db: Session, service_id: int) -> Optional[Service]:
        """Get a service by ID regardless of status"""
        return (
            db.query(Service)
            .options(joinedload(Service.owner))
            .filter(Service.id == service_id)
            .first()
        )

    @staticmethod
    def get_services_by_owner(db: Session, user_id: int) -> list[Service]:
        """Get every listing owned by a user"""
        return (
            db.query(Service)
            .filter(Service.user_id == user_id)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .all()
        )

    @staticmethod
    def create_service(db: Session, user_id: int, **service_data) -> Service:
        """Create a new service"""
        service = Service(user_id=user_id, **service_data)
        db.add(service)
        commit_or_raise(db, "create the service")
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        """Update a service with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        commit_or_raise(db, "update the service")
        db.refresh(service)
        return service

    @staticmethod
    def increment_views(db: Session, service: Service) -> None:
        """Count a public view"""
        service.views_count = (service.views_count or 0) + 1
        commit_or_raise(db, "record the service view")

    @staticmethod
    def search_services(
        db: Session,
        status: Optional[str] = None,
        discoverable_only: bool = False,
        search: Optional[str] = None,
        category: Optional[str] = None,
        provider_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Service]:
        """Search and filter services"""
        query = db.query(Service).options(joinedload(Service.owner))

        if discoverable_only:
            query = query.filter(Service.status == "active", Service.is_active.is_(True))
        elif status and status != "all":
            query = query.filter(Service.status == status)

        if category and category != "all":
            query = query.filter(Service.category == category)

        if provider_id:
            query = query.filter(Service.user_id == provider_id)

        if search:
            search_term = f"%{search.strip()}%"
            tag_term = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    Service.title.ilike(search_term),
                    Service.description.ilike(search_term),
                    Service.tags_text.like(tag_term),
                )
            )

        query = query.order_by(Service.created_at.desc(), Service.id.desc()).offset(offset)
        if limit:
            query = query.limit(limit)

        return query.all()
