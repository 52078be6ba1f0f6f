"""Staff router - FastAPI endpoints for staff members"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from ...shared.validators import validate_iso_date, validate_time_of_day
from .schemas import StaffCreate, StaffResponse, StaffUpdate
from .service import StaffService, staff_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff", tags=["Staff"])


def get_staff_service(db: Session = Depends(get_db)) -> StaffService:
    """Dependency injection for StaffService"""
    return StaffService(db)


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.get("/available", response_model=list[StaffResponse])
async def get_available_staff(
    date: str = Query(..., description="Event date, YYYY-MM-DD"),
    time: str = Query(..., description="Event start time, HH:MM or H:MM AM/PM"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Active staff who can work an event starting at the given date and time"""
    try:
        event_date = validate_iso_date(date)
        event_time = validate_time_of_day(time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return [staff_to_response(m) for m in service.get_available_staff(event_date, event_time)]


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[StaffResponse])
async def get_staff(
    status: Optional[str] = Query(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Get all staff members"""
    return [staff_to_response(m) for m in service.get_staff(status)]


@router.post("", response_model=StaffResponse)
async def create_staff(
    data: StaffCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Create a staff member"""
    return staff_to_response(service.create_staff(data))


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff_member(
    staff_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Get a staff member"""
    return staff_to_response(service.get_staff_member(staff_id))


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: str,
    data: StaffUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Update a staff member"""
    return staff_to_response(service.update_staff(staff_id, data))


@router.delete("/{staff_id}")
async def delete_staff(
    staff_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
):
    """Delete a staff member"""
    return service.delete_staff(staff_id)
