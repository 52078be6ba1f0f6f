"""
Email Routes - Send transactional emails for a booking
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import AuthenticatedUser, get_current_user
from ..database import get_db
from ..domain.bookings.repository import BookingRepository
from ..email_service import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    is_email_configured,
    send_booking_confirmation_email,
    send_payment_receipt_email,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emails", tags=["Email"])


class SendBookingEmailRequest(BaseModel):
    type: str  # "confirmation" or "receipt"
    bookingId: str
    businessName: Optional[str] = None
    amount: Optional[float] = None  # receipt only
    method: Optional[str] = None  # receipt only


@router.post("/send")
async def send_booking_email(
    data: SendBookingEmailRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send a booking confirmation or payment receipt to the customer"""
    if not is_email_configured():
        raise HTTPException(
            status_code=503,
            detail="Email not configured - add RESEND_API_KEY to your environment variables.",
        )

    booking = BookingRepository.get_booking_by_id(db, data.bookingId)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    record = BookingRepository.to_record(booking)
    if not record.customer_email:
        raise HTTPException(status_code=400, detail="No customer email on this booking")

    try:
        if data.type == "confirmation":
            send_booking_confirmation_email(record, data.businessName)
        elif data.type == "receipt":
            if not data.amount or not data.method:
                raise HTTPException(status_code=400, detail="amount and method are required for receipt emails")
            send_payment_receipt_email(record, data.amount, data.method, data.businessName)
        else:
            raise HTTPException(status_code=400, detail="Unknown email type")
    except EmailNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except EmailDeliveryError as e:
        logger.error(f"❌ {data.type} email failed for booking {data.bookingId}: {e}")
        raise HTTPException(status_code=500, detail="Email send failed") from e

    logger.info(f"📧 {data.type} email sent for booking {data.bookingId}")
    return {"success": True}
