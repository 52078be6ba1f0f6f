"""Booking router - FastAPI endpoints for bookings and their workflow"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from .schemas import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    PaymentRequest,
    RefundRequest,
    StaffAssignmentRequest,
    StatusChangeRequest,
)
from .service import BookingService, booking_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[BookingResponse])
async def get_bookings(
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get bookings ordered by event date"""
    return [booking_to_response(b) for b in service.get_bookings(status, start_date, end_date)]


@router.post("", response_model=BookingResponse)
async def create_booking(
    data: BookingCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Create a booking; financials and workflow fields are computed server-side"""
    return booking_to_response(service.create_booking(data))


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get a booking"""
    return booking_to_response(service.get_booking(booking_id))


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Update a booking"""
    return booking_to_response(service.update_booking(booking_id, data))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Delete a booking"""
    return service.delete_booking(booking_id)


@router.post("/{booking_id}/reprice", response_model=BookingResponse)
async def reprice_booking(
    booking_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Recompute financials under the current rules and replace the pricing snapshot"""
    return booking_to_response(service.reprice_booking(booking_id))


# ============================================================================
# WORKFLOW
# ============================================================================


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Confirm a booking and set its deposit terms"""
    return booking_to_response(service.confirm_booking(booking_id))


@router.post("/{booking_id}/payments", response_model=BookingResponse)
async def record_payment(
    booking_id: str,
    data: PaymentRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Record a customer payment"""
    return booking_to_response(service.record_payment(booking_id, data))


@router.post("/{booking_id}/refunds", response_model=BookingResponse)
async def record_refund(
    booking_id: str,
    data: RefundRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Refund a payment; the booking is cancelled"""
    return booking_to_response(service.record_refund(booking_id, data))


@router.post("/{booking_id}/status", response_model=BookingResponse)
async def change_booking_status(
    booking_id: str,
    data: StatusChangeRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Move a booking through pending → confirmed → completed, or cancel it"""
    return booking_to_response(service.change_status(booking_id, data))


# ============================================================================
# STAFF
# ============================================================================


@router.put("/{booking_id}/staff", response_model=BookingResponse)
async def assign_staff(
    booking_id: str,
    data: StaffAssignmentRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Replace the staff assigned to a booking (409 if someone is unavailable)"""
    return booking_to_response(service.assign_staff(booking_id, data))
