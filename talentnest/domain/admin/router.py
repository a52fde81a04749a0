"""Admin router - platform oversight endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import UserResponse
from ..catalog.router import get_catalog_service
from ..catalog.schemas import ServiceResponse, ServiceStatusUpdate
from ..catalog.service import CatalogService
from ..verification.router import get_verification_workflow
from ..verification.schemas import ReconcileSummary, RequestStatusFilter, VerificationResponse
from ..verification.service import VerificationWorkflow
from .service import AdminConsole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_console(db: Session = Depends(get_db)) -> AdminConsole:
    """Dependency injection for AdminConsole"""
    return AdminConsole(db)


@router.get("/stats")
async def get_platform_stats(
    current_user: User = Depends(get_current_user),
    console: AdminConsole = Depends(get_admin_console),
):
    """Headline platform numbers"""
    return console.get_platform_stats(current_user)


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    role: Optional[str] = Query(None),
    verified: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_user),
    console: AdminConsole = Depends(get_admin_console),
):
    return console.list_users(current_user, role=role, verified=verified, search=search)


@router.get("/services", response_model=list[ServiceResponse])
async def list_all_services(
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Every listing, whatever its status"""
    services = catalog.list_all(current_user, status=status, category=category, search=search)
    return [ServiceResponse.from_model(s) for s in services]


@router.patch("/services/{service_id}/status", response_model=ServiceResponse)
async def set_service_status(
    service_id: int,
    data: ServiceStatusUpdate,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Moderate a listing"""
    service = catalog.set_service_status(service_id, data.status, current_user)
    return ServiceResponse.from_model(service)


@router.get("/verification-requests", response_model=list[VerificationResponse])
async def verification_queue(
    status: RequestStatusFilter = Query("pending"),
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Verification queue, pending first by default"""
    requests = workflow.list_requests(current_user, status=status, search=search)
    return [VerificationResponse.from_model(r) for r in requests]


@router.post("/verification/reconcile", response_model=ReconcileSummary)
async def reconcile_verified_flags(
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Re-derive every artisan's verified flag from their requests"""
    summary = workflow.reconcile_verified_flags(current_user)
    return ReconcileSummary(
        checked=summary["checked"],
        verified=summary["verified"],
        unverified=summary["unverified"],
        totalChanged=summary["total_changed"],
    )
