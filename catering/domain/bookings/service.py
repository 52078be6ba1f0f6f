"""Booking service - Business logic for bookings

Every path that persists a booking prices it with the pricing engine (when
pricing inputs change) and runs it through the workflow normalizer first.
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Booking
from ...shared.money import round_money
from ..pricing.engine import apply_discount, build_financial_snapshot, calculate_event_financials
from ..pricing.schemas import EventFinancialInput
from ..rules.schemas import RulesConfiguration
from ..rules.service import RulesService
from ..staff.availability import is_staff_available_for_event
from ..staff.service import StaffService
from .repository import BookingRepository
from .schemas import (
    BookingCreate,
    BookingRecord,
    BookingResponse,
    BookingUpdate,
    PaymentRequest,
    RefundRequest,
    StaffAssignment,
    StaffAssignmentItem,
    StaffAssignmentRequest,
    StatusChangeRequest,
)
from .workflow import (
    apply_confirmation_payment_terms,
    apply_payment,
    apply_refund,
    apply_status_change,
    get_service_status,
    normalize_booking_workflow_fields,
    validate_status_transition,
)

logger = logging.getLogger(__name__)

# BookingUpdate field -> booking column
UPDATE_FIELD_MAP = {
    "eventType": "event_type",
    "pricingSlot": "pricing_slot",
    "eventDate": "event_date",
    "eventTime": "event_time",
    "customerName": "customer_name",
    "customerEmail": "customer_email",
    "customerPhone": "customer_phone",
    "adults": "adults",
    "children": "children",
    "location": "location",
    "distanceMiles": "distance_miles",
    "premiumAddOn": "premium_add_on",
    "staffingProfileId": "staffing_profile_id",
    "discountType": "discount_type",
    "discountValue": "discount_value",
    "depositPercent": "deposit_percent",
    "notes": "notes",
}

# Changing any of these invalidates the stored financials
PRICING_FIELDS = {
    "event_type",
    "pricing_slot",
    "adults",
    "children",
    "distance_miles",
    "premium_add_on",
    "staffing_profile_id",
    "discount_type",
    "discount_value",
}


def price_booking(record: BookingRecord, rules: RulesConfiguration, captured_at: datetime) -> BookingRecord:
    """
    Compute the booking's financial fields and lock a fresh pricing snapshot.

    A discount reduces the subtotal only; gratuity and distance fee are unchanged.
    """
    financials = calculate_event_financials(
        EventFinancialInput(
            adults=record.adults,
            children=record.children,
            event_type=record.event_type,
            pricing_slot=record.pricing_slot,
            event_date=record.event_date,
            distance_miles=record.distance_miles,
            premium_add_on=record.premium_add_on,
            staffing_profile_id=record.staffing_profile_id,
        ),
        rules,
    )
    subtotal = round_money(apply_discount(financials.subtotal, record.discount_type, record.discount_value))
    total = round_money(subtotal + financials.gratuity + financials.distance_fee)
    snapshot = build_financial_snapshot(financials, captured_at).model_copy(
        update={"subtotal": subtotal, "total_charged": total}
    )

    return record.model_copy(
        update={
            "pricing_slot": financials.pricing_slot,
            "subtotal": subtotal,
            "gratuity": financials.gratuity,
            "distance_fee": financials.distance_fee,
            "total": total,
            "pricing_snapshot": snapshot.model_dump(mode="json"),
        }
    )


def booking_to_response(booking: Booking) -> BookingResponse:
    record = BookingRepository.to_record(booking)
    return BookingResponse(
        id=record.id,
        eventType=record.event_type,
        pricingSlot=record.pricing_slot,
        eventDate=record.event_date,
        eventTime=record.event_time,
        customerName=record.customer_name,
        customerEmail=record.customer_email,
        customerPhone=record.customer_phone,
        adults=record.adults,
        children=record.children,
        location=record.location,
        distanceMiles=record.distance_miles,
        premiumAddOn=record.premium_add_on,
        staffingProfileId=record.staffing_profile_id,
        discountType=record.discount_type,
        discountValue=record.discount_value,
        subtotal=record.subtotal,
        gratuity=record.gratuity,
        distanceFee=record.distance_fee,
        total=record.total,
        pricingSnapshot=record.pricing_snapshot,
        status=record.status,
        serviceStatus=get_service_status(record),
        paymentStatus=record.payment_status,
        pipelineStatus=record.pipeline_status,
        depositPercent=record.deposit_percent,
        depositAmount=record.deposit_amount,
        depositDueDate=record.deposit_due_date,
        balanceDueDate=record.balance_due_date,
        amountPaid=record.amount_paid or 0.0,
        balanceDueAmount=record.balance_due_amount,
        confirmedAt=record.confirmed_at,
        prepPurchaseByDate=record.prep_purchase_by_date,
        locked=record.locked,
        staffAssignments=[
            StaffAssignmentItem(staffId=a.staff_id, role=a.role, estimatedPay=a.estimated_pay, status=a.status)
            for a in record.staff_assignments
        ],
        notes=record.notes,
        source=record.source,
        proposalToken=record.proposal_token,
        proposalSentAt=record.proposal_sent_at,
        proposalAccepted=record.proposal_accepted,
        createdAt=record.created_at,
        updatedAt=record.updated_at,
    )


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    def _rules(self) -> RulesConfiguration:
        return RulesService(self.db).load_rules()

    def _persist(self, booking: Booking, record: BookingRecord, as_of: date, rules: RulesConfiguration) -> Booking:
        normalized = normalize_booking_workflow_fields(record, as_of, rules.pricing.default_deposit_percent)
        return self.repo.save_booking(self.db, booking, normalized)

    def _ensure_unlocked(self, record: BookingRecord) -> None:
        if record.locked:
            raise HTTPException(status_code=409, detail="Booking is completed and locked")

    def get_bookings(
        self,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Booking]:
        return self.repo.get_bookings(self.db, status, start_date, end_date)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def create_booking(self, data: BookingCreate) -> Booking:
        """Price and normalize a new booking before it is stored"""
        logger.info(f"📥 Creating {data.eventType} booking for {data.eventDate} ({data.customerName})")
        rules = self._rules()
        now = datetime.utcnow()

        record = BookingRecord(
            event_type=data.eventType,
            pricing_slot=data.pricingSlot,
            event_date=data.eventDate,
            event_time=data.eventTime,
            customer_name=data.customerName.strip(),
            customer_email=data.customerEmail,
            customer_phone=data.customerPhone,
            adults=data.adults,
            children=data.children,
            location=data.location,
            distance_miles=data.distanceMiles,
            premium_add_on=data.premiumAddOn,
            staffing_profile_id=data.staffingProfileId,
            discount_type=data.discountType if data.discountValue else None,
            discount_value=data.discountValue if data.discountType else None,
            deposit_percent=data.depositPercent,
            notes=data.notes,
            source=data.source,
        )
        record = price_booking(record, rules, now)
        record = normalize_booking_workflow_fields(record, now.date(), rules.pricing.default_deposit_percent)

        booking = self.repo.create_booking(self.db, record)
        logger.info(f"✅ Booking {booking.id} created: total ${booking.total:.2f}, status {booking.status}")
        return booking

    def update_booking(self, booking_id: str, data: BookingUpdate) -> Booking:
        """
        Apply field edits. Pricing inputs trigger a reprice under the current
        rules; otherwise the stored financials and snapshot are kept.
        """
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        self._ensure_unlocked(record)

        updates = {}
        for field_name, column in UPDATE_FIELD_MAP.items():
            value = getattr(data, field_name)
            if value is not None and value != getattr(record, column):
                updates[column] = value

        if not updates:
            return booking

        if "event_date" in updates:
            # Derived dates follow the new event date
            updates["prep_purchase_by_date"] = None
            updates["balance_due_date"] = None
        if "deposit_percent" in updates:
            updates["deposit_amount"] = None

        rules = self._rules()
        now = datetime.utcnow()
        record = record.model_copy(update=updates)

        if PRICING_FIELDS & updates.keys():
            record = price_booking(record, rules, now).model_copy(update={"deposit_amount": None})
            logger.info(f"💲 Booking {booking_id} repriced: total ${record.total:.2f}")

        return self._persist(booking, record, now.date(), rules)

    def reprice_booking(self, booking_id: str) -> Booking:
        """Recompute financials and replace the snapshot under the current rules"""
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        self._ensure_unlocked(record)

        rules = self._rules()
        now = datetime.utcnow()
        record = price_booking(record, rules, now).model_copy(update={"deposit_amount": None})
        logger.info(f"💲 Booking {booking_id} repriced on request: total ${record.total:.2f}")
        return self._persist(booking, record, now.date(), rules)

    def delete_booking(self, booking_id: str) -> dict:
        booking = self.get_booking(booking_id)
        self.repo.delete_booking(self.db, booking)
        logger.info(f"🗑️ Deleted booking {booking_id}")
        return {"message": "Booking deleted"}

    # ------------------------------------------------------------------
    # Workflow transitions
    # ------------------------------------------------------------------

    def confirm_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        current = get_service_status(record)
        if not validate_status_transition(current, "confirmed"):
            raise HTTPException(status_code=400, detail=f"Cannot confirm a {current} booking")

        rules = self._rules()
        now = datetime.utcnow()
        confirmed = apply_confirmation_payment_terms(record, now, rules.pricing.default_deposit_percent)
        logger.info(f"✅ Booking {booking_id} confirmed, deposit ${confirmed.deposit_amount:.2f}")
        return self.repo.save_booking(self.db, booking, confirmed)

    def record_payment(self, booking_id: str, data: PaymentRequest) -> Booking:
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        if get_service_status(record) == "cancelled":
            raise HTTPException(status_code=400, detail="Cannot record a payment on a cancelled booking")

        payment_date = data.paymentDate or datetime.utcnow().date()
        updated = apply_payment(record, data.amount, payment_date)
        logger.info(f"💰 Payment of ${data.amount:.2f} recorded for booking {booking_id}: {updated.payment_status}")
        return self.repo.save_booking(self.db, booking, updated)

    def record_refund(self, booking_id: str, data: RefundRequest) -> Booking:
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        self._ensure_unlocked(record)

        if data.amount > (record.amount_paid or 0) + 0.009:
            raise HTTPException(status_code=400, detail="Refund amount exceeds the amount paid")

        refund_date = data.refundDate or datetime.utcnow().date()
        updated = apply_refund(record, data.amount, refund_date)
        logger.info(f"↩️ Refund of ${data.amount:.2f} recorded for booking {booking_id}")
        return self.repo.save_booking(self.db, booking, updated)

    def change_status(self, booking_id: str, data: StatusChangeRequest) -> Booking:
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        current = get_service_status(record)
        if not validate_status_transition(current, data.status):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status transition from '{current}' to '{data.status}'",
            )

        rules = self._rules()
        updated = apply_status_change(record, data.status, datetime.utcnow(), rules.pricing.default_deposit_percent)
        logger.info(f"🔄 Booking {booking_id} status: {current} → {updated.status}")
        return self.repo.save_booking(self.db, booking, updated)

    # ------------------------------------------------------------------
    # Staff assignment
    # ------------------------------------------------------------------

    def assign_staff(self, booking_id: str, data: StaffAssignmentRequest) -> Booking:
        """
        Replace the booking's staff assignments.

        Raises:
            HTTPException 404: A staff member does not exist
            HTTPException 409: A staff member is inactive or unavailable for the event
        """
        booking = self.get_booking(booking_id)
        record = self.repo.to_record(booking)
        self._ensure_unlocked(record)

        staff_ids = [item.staffId for item in data.assignments]
        staff = StaffService(self.db).get_staff_records(staff_ids)

        assignments = []
        for item in data.assignments:
            member = staff.get(item.staffId)
            if member is None:
                raise HTTPException(status_code=404, detail=f"Staff member {item.staffId} not found")
            if member.status != "active":
                raise HTTPException(status_code=409, detail=f"{member.name} is not active")
            if not is_staff_available_for_event(member, record.event_date, record.event_time):
                logger.info(f"⚠️ {member.name} unavailable for booking {booking_id} on {record.event_date}")
                raise HTTPException(
                    status_code=409,
                    detail=f"{member.name} is not available on {record.event_date.isoformat()} at {record.event_time}",
                )
            assignments.append(
                StaffAssignment(
                    staff_id=item.staffId,
                    role=item.role,
                    estimated_pay=item.estimatedPay,
                    status=item.status,
                )
            )

        rules = self._rules()
        updated = record.model_copy(update={"staff_assignments": assignments})
        logger.info(f"👥 Booking {booking_id}: {len(assignments)} staff assigned")
        return self._persist(booking, updated, datetime.utcnow().date(), rules)
