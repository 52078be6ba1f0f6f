"""Proposal service - Shareable quote links and public acceptance"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import BUSINESS_NAME, FRONTEND_URL, PROPOSAL_EXPIRY_DAYS
from ...models import ProposalToken
from ..bookings.repository import BookingRepository
from ..bookings.schemas import BookingRecord
from ..bookings.workflow import apply_confirmation_payment_terms, normalize_booking_workflow_fields
from ..rules.service import RulesService
from .repository import ProposalRepository
from .schemas import (
    ProposalAcceptResponse,
    ProposalCreateRequest,
    ProposalCreateResponse,
    ProposalResponse,
    ProposalSnapshot,
)

logger = logging.getLogger(__name__)


def generate_proposal_token() -> str:
    return str(uuid.uuid4())


def build_proposal_snapshot(booking: BookingRecord, sent_at: datetime, business_name: str) -> ProposalSnapshot:
    """Copy the booking terms a client needs to review"""
    return ProposalSnapshot(
        customerName=booking.customer_name,
        customerEmail=booking.customer_email,
        eventDate=booking.event_date.isoformat(),
        eventTime=booking.event_time,
        location=booking.location,
        adults=booking.adults,
        children=booking.children,
        eventType=booking.event_type,
        subtotal=booking.subtotal,
        gratuity=booking.gratuity,
        distanceFee=booking.distance_fee,
        total=booking.total,
        depositAmount=booking.deposit_amount,
        depositDueDate=booking.deposit_due_date.isoformat() if booking.deposit_due_date else None,
        balanceDueDate=booking.balance_due_date.isoformat() if booking.balance_due_date else None,
        notes=booking.notes,
        businessName=business_name,
        sentAt=sent_at.isoformat(),
    )


def is_expired(proposal: ProposalToken, now: datetime) -> bool:
    return proposal.status == "pending" and proposal.expires_at is not None and now > proposal.expires_at


def proposal_to_response(proposal: ProposalToken, now: datetime) -> ProposalResponse:
    return ProposalResponse(
        token=proposal.token,
        bookingId=proposal.booking_id,
        status="expired" if is_expired(proposal, now) else proposal.status,
        snapshot=ProposalSnapshot.model_validate(proposal.snapshot),
        createdAt=proposal.created_at,
        acceptedAt=proposal.accepted_at,
        expiresAt=proposal.expires_at,
    )


class ProposalService:
    """Service layer for proposal tokens"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProposalRepository()
        self.bookings = BookingRepository()

    def create_proposal(self, data: ProposalCreateRequest) -> ProposalCreateResponse:
        """
        Issue a token for a booking and mark the proposal as sent.

        Raises:
            HTTPException 400: bookingId missing
            HTTPException 404: Booking does not exist
        """
        if not data.bookingId:
            raise HTTPException(status_code=400, detail="bookingId is required")

        booking = self.bookings.get_booking_by_id(self.db, data.bookingId)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")

        now = datetime.utcnow()
        record = self.bookings.to_record(booking)
        snapshot = data.snapshot or build_proposal_snapshot(record, now, BUSINESS_NAME)

        token = generate_proposal_token()
        expires_at = now + timedelta(days=PROPOSAL_EXPIRY_DAYS) if PROPOSAL_EXPIRY_DAYS > 0 else None
        self.repo.create_token(self.db, token, data.bookingId, snapshot.model_dump(mode="json"), expires_at)

        rules = RulesService(self.db).load_rules()
        sent = record.model_copy(update={"proposal_token": token, "proposal_sent_at": now})
        self.bookings.save_booking(
            self.db,
            booking,
            normalize_booking_workflow_fields(sent, now.date(), rules.pricing.default_deposit_percent),
        )

        url = f"{FRONTEND_URL.rstrip('/')}/proposal/{token}"
        logger.info(f"📨 Proposal created for booking {data.bookingId}")

        if data.sendEmail:
            self._email_proposal(snapshot, url)

        return ProposalCreateResponse(token=token, url=url)

    def _email_proposal(self, snapshot: ProposalSnapshot, url: str) -> None:
        from ...email_service import EmailDeliveryError, EmailNotConfiguredError, send_proposal_email

        if not snapshot.customerEmail:
            logger.warning("Proposal email skipped: no customer email on snapshot")
            return
        # The link is already issued; a failed email must not undo it
        try:
            send_proposal_email(snapshot.customerEmail, snapshot, url)
        except (EmailNotConfiguredError, EmailDeliveryError) as e:
            logger.error(f"❌ Failed to send proposal email: {e}")

    def get_proposal(self, token: str) -> ProposalResponse:
        """Public view of a proposal by token"""
        proposal = self.repo.get_by_token(self.db, token)
        if not proposal:
            raise HTTPException(status_code=404, detail="Proposal not found")

        now = datetime.utcnow()
        if is_expired(proposal, now):
            raise HTTPException(
                status_code=410,
                detail="This proposal link has expired. Please contact us for an updated quote.",
            )
        return proposal_to_response(proposal, now)

    def accept_proposal(self, token: Optional[str]) -> ProposalAcceptResponse:
        """
        Accept a proposal exactly once.

        A repeat call reports alreadyAccepted instead of failing and leaves
        accepted_at untouched.
        """
        if not token:
            raise HTTPException(status_code=400, detail="token is required")

        proposal = self.repo.get_by_token(self.db, token)
        if not proposal:
            raise HTTPException(status_code=404, detail="Proposal not found")

        booking_id = proposal.booking_id
        if proposal.status == "accepted":
            return ProposalAcceptResponse(success=True, bookingId=booking_id, alreadyAccepted=True)

        now = datetime.utcnow()
        if is_expired(proposal, now):
            raise HTTPException(
                status_code=410,
                detail="This proposal link has expired. Please contact us for an updated quote.",
            )

        if not self.repo.mark_accepted(self.db, token, now):
            # Another request accepted it between our read and the update
            logger.info(f"Proposal for booking {booking_id} was accepted concurrently")
            return ProposalAcceptResponse(success=True, bookingId=booking_id, alreadyAccepted=True)

        logger.info(f"✅ Proposal accepted for booking {booking_id}")
        self._confirm_booking(booking_id, now)
        return ProposalAcceptResponse(success=True, bookingId=booking_id, alreadyAccepted=False)

    def _confirm_booking(self, booking_id: str, accepted_at: datetime) -> None:
        booking = self.bookings.get_booking_by_id(self.db, booking_id)
        if not booking:
            logger.warning(f"Accepted proposal references missing booking {booking_id}")
            return

        rules = RulesService(self.db).load_rules()
        record = self.bookings.to_record(booking).model_copy(update={"proposal_accepted": True})
        if record.status == "pending":
            record = apply_confirmation_payment_terms(record, accepted_at, rules.pricing.default_deposit_percent)
        else:
            record = normalize_booking_workflow_fields(record, accepted_at.date(), rules.pricing.default_deposit_percent)
        self.bookings.save_booking(self.db, booking, record)
