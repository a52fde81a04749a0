"""Verification router - FastAPI endpoints for artisan verification"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    ApproveRequest,
    OverrideApproveRequest,
    RejectRequest,
    RequestStatusFilter,
    SubCheckUpdate,
    VerificationResponse,
    VerificationSubmit,
)
from .service import VerificationWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/verification-requests", tags=["Verification"])


def get_verification_workflow(db: Session = Depends(get_db)) -> VerificationWorkflow:
    """Dependency injection for VerificationWorkflow"""
    return VerificationWorkflow(db)


@router.post("", response_model=VerificationResponse, status_code=201)
async def submit_verification(
    data: VerificationSubmit,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Submit evidence for review (artisans only)"""
    return VerificationResponse.from_model(workflow.submit(current_user, data))


@router.get("", response_model=list[VerificationResponse])
async def list_verification_requests(
    status: RequestStatusFilter = Query("all"),
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Admin queue, filterable by status and applicant"""
    requests = workflow.list_requests(current_user, status=status, search=search)
    return [VerificationResponse.from_model(r) for r in requests]


@router.get("/mine", response_model=list[VerificationResponse])
async def list_my_verification_requests(
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    return [VerificationResponse.from_model(r) for r in workflow.list_own(current_user)]


@router.get("/{request_id}", response_model=VerificationResponse)
async def get_verification_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    return VerificationResponse.from_model(workflow.get_request(request_id, current_user))


@router.patch("/{request_id}/checks", response_model=VerificationResponse)
async def set_verification_check(
    request_id: int,
    data: SubCheckUpdate,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Tick or untick one of the four checks"""
    request = workflow.set_sub_check(request_id, data.check, data.value, current_user)
    return VerificationResponse.from_model(request)


@router.post("/{request_id}/approve", response_model=VerificationResponse)
async def approve_verification(
    request_id: int,
    data: Optional[ApproveRequest] = None,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    notes = data.notes if data else None
    return VerificationResponse.from_model(workflow.approve(request_id, current_user, notes))


@router.post("/{request_id}/approve-override", response_model=VerificationResponse)
async def approve_verification_with_override(
    request_id: int,
    data: OverrideApproveRequest,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """Approve even though not every check has passed"""
    request = workflow.approve_with_override(request_id, current_user, data.notes)
    return VerificationResponse.from_model(request)


@router.post("/{request_id}/reject", response_model=VerificationResponse)
async def reject_verification(
    request_id: int,
    data: RejectRequest,
    current_user: User = Depends(get_current_user),
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    return VerificationResponse.from_model(workflow.reject(request_id, current_user, data.reason))
