"""
API endpoint for booking status automation and analytics
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth import AuthenticatedUser, get_current_user
from ..database import get_db
from ..models import Booking
from ..services.status_automation import refresh_booking_workflows

router = APIRouter(prefix="/status", tags=["status"])


class StatusSummary(BaseModel):
    pending: int
    confirmed: int
    completed: int
    cancelled: int


class PipelineSummary(BaseModel):
    inquiry: int
    quote_sent: int
    deposit_pending: int
    booked: int
    completed: int


class StatusAnalytics(BaseModel):
    status: StatusSummary
    pipeline: PipelineSummary


class AutomationResult(BaseModel):
    checked: int
    payment_status_changed: int
    to_balance_due: int
    total_updated: int


def _count_by(db: Session, column, keys: list[str]) -> dict:
    counts = db.query(column, func.count(Booking.id).label("count")).group_by(column).all()

    # Initialize with zeros
    summary = dict.fromkeys(keys, 0)
    for value, count in counts:
        if value in summary:
            summary[value] = count
    return summary


@router.get("/analytics", response_model=StatusAnalytics)
async def get_status_analytics(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get count of bookings by status and by pipeline stage"""
    return StatusAnalytics(
        status=StatusSummary(**_count_by(db, Booking.status, list(StatusSummary.model_fields))),
        pipeline=PipelineSummary(**_count_by(db, Booking.pipeline_status, list(PipelineSummary.model_fields))),
    )


@router.post("/automation/run", response_model=AutomationResult)
async def run_status_automation(
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (default today)"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Manually trigger the booking workflow refresh
    (In production, this should be run via scheduled job/cron)
    """
    result = refresh_booking_workflows(db, as_of)
    return AutomationResult(**result)
