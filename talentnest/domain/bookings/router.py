"""Bookings router - FastAPI endpoints for the booking lifecycle"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..contact.router import contact_rate_limit
from .schemas import (
    BookingContactResponse,
    BookingCreate,
    BookingPartitionResponse,
    BookingResponse,
    BookingStatusUpdate,
    ContactRequest,
)
from .service import BookingEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_engine(db: Session = Depends(get_db)) -> BookingEngine:
    """Dependency injection for BookingEngine"""
    return BookingEngine(db)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Book a service"""
    return BookingResponse.from_model(engine.create_booking(current_user, data))


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    as_role: Optional[Literal["client", "provider"]] = Query(None, alias="as"),
    status: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Bookings the current user is part of, optionally limited to one side"""
    bookings = engine.list_for_user(current_user, as_role=as_role, status=status)
    return [BookingResponse.from_model(b) for b in bookings]


@router.get("/partitioned", response_model=BookingPartitionResponse)
async def list_bookings_partitioned(
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    parts = engine.partition_for_user(current_user)
    return BookingPartitionResponse(
        asClient=[BookingResponse.from_model(b) for b in parts["as_client"]],
        asProvider=[BookingResponse.from_model(b) for b in parts["as_provider"]],
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return BookingResponse.from_model(engine.get_booking(booking_id, current_user))


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Move a booking to a new status"""
    return BookingResponse.from_model(engine.transition(booking_id, current_user, data.status))


@router.post("/{booking_id}/accept", response_model=BookingResponse)
async def accept_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return BookingResponse.from_model(engine.accept(booking_id, current_user))


@router.post("/{booking_id}/start", response_model=BookingResponse)
async def start_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return BookingResponse.from_model(engine.start(booking_id, current_user))


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return BookingResponse.from_model(engine.complete(booking_id, current_user))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return BookingResponse.from_model(engine.cancel(booking_id, current_user))


@router.post("/{booking_id}/contact", response_model=BookingContactResponse)
async def contact_counterpart(
    booking_id: int,
    data: Optional[ContactRequest] = None,
    current_user: User = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
    _: None = Depends(contact_rate_limit),
):
    """WhatsApp link to the other participant of the booking"""
    mobile = data.mobile if data else False
    url, booking = engine.initiate_contact(booking_id, current_user, mobile=mobile)
    return BookingContactResponse(url=url, booking=BookingResponse.from_model(booking))
