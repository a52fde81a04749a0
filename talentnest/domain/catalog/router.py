"""Catalog router - FastAPI endpoints for service listings"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import User
from .schemas import ServiceActiveUpdate, ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    search: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None),
    providerId: Optional[int] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: CatalogService = Depends(get_catalog_service),
):
    """Browse discoverable listings"""
    services = service.list_active(search, category, providerId, limit, offset)
    return [ServiceResponse.from_model(s) for s in services]


@router.get("/mine", response_model=list[ServiceResponse])
async def list_my_services(
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Every listing owned by the current user"""
    return [ServiceResponse.from_model(s) for s in service.list_own_services(current_user)]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Get a single listing"""
    return ServiceResponse.from_model(service.get_service(service_id, viewer))


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Create a listing (artisans only)"""
    return ServiceResponse.from_model(service.create_service(current_user, data))


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Edit an owned listing"""
    return ServiceResponse.from_model(service.update_service(service_id, current_user, data))


@router.patch("/{service_id}/active", response_model=ServiceResponse)
async def set_service_active(
    service_id: int,
    data: ServiceActiveUpdate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Soft-disable or re-enable a listing"""
    return ServiceResponse.from_model(
        service.set_listing_active(service_id, current_user, data.isActive)
    )
