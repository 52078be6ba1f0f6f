"""
Booking workflow normalization

Derived workflow fields (status pair, payment status, pipeline stage, deposit
and balance figures, prep dates, lock flag) are recomputed here from a
booking's authoritative data. Every create and mutation path runs the booking
through normalize_booking_workflow_fields before it is persisted.

All functions are pure: the "today" used for date-based derivations is passed in.
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from ...shared.money import round_money, to_finite_number
from .schemas import BookingRecord

DEFAULT_DEPOSIT_PERCENT = 30
DEFAULT_PURCHASE_LEAD_DAYS = 2

# Tolerance for float drift when comparing amounts paid against amounts due
MONEY_EPSILON = 0.009

# Manual transitions; cancelled and completed are terminal
VALID_STATUS_TRANSITIONS = {
    "pending": ["confirmed", "cancelled"],
    "confirmed": ["completed", "cancelled"],
    "completed": [],
    "cancelled": [],
}


def _non_negative(value: Any, fallback: Optional[float] = 0.0) -> Optional[float]:
    if value is None:
        return fallback
    number = to_finite_number(value, fallback=None)
    if number is None:
        return fallback
    return max(0.0, number)


def get_service_status(booking: BookingRecord) -> str:
    return booking.service_status or booking.status


def calculate_prep_purchase_by_date(event_date: date, lead_days: int = DEFAULT_PURCHASE_LEAD_DAYS) -> date:
    """Date by which groceries must be bought for the event"""
    return event_date - timedelta(days=lead_days)


def derive_payment_status(
    service_status: str,
    event_date: date,
    total: float,
    amount_paid: float,
    deposit_amount: float,
    as_of: date,
) -> str:
    if amount_paid + MONEY_EPSILON >= max(0.0, total):
        return "paid-in-full"

    if service_status == "cancelled":
        return "refunded" if amount_paid > MONEY_EPSILON else "unpaid"

    if amount_paid + MONEY_EPSILON >= deposit_amount:
        return "balance-due" if as_of >= event_date else "deposit-paid"

    return "deposit-due"


def derive_pipeline_status(
    service_status: str,
    source: Optional[str],
    proposal_sent: bool,
    proposal_accepted: bool,
) -> str:
    if service_status == "completed":
        return "completed"
    if service_status in ("confirmed", "cancelled"):
        return "booked"
    if proposal_accepted:
        return "deposit_pending"
    if proposal_sent:
        return "quote_sent"
    if source == "inquiry":
        return "inquiry"
    return "quote_sent"


def normalize_booking_workflow_fields(
    booking: BookingRecord,
    as_of: date,
    default_deposit_percent: float = DEFAULT_DEPOSIT_PERCENT,
) -> BookingRecord:
    """
    Return a copy of the booking with every derived workflow field recomputed.

    Idempotent for a fixed as_of date. Never raises; unusable numbers fall back
    to their defaults.
    """
    service_status = get_service_status(booking)

    # An accepted proposal never leaves the booking pending
    if booking.proposal_accepted and service_status == "pending":
        service_status = "confirmed"

    total = _non_negative(booking.total)
    deposit_percent = min(100.0, _non_negative(booking.deposit_percent, default_deposit_percent))
    computed_deposit = round_money(total * deposit_percent / 100)
    deposit_amount = round_money(_non_negative(booking.deposit_amount, computed_deposit))
    amount_paid = round_money(_non_negative(booking.amount_paid))
    balance_due_amount = round_money(max(0.0, total - amount_paid))

    prep_purchase_by_date = booking.prep_purchase_by_date or calculate_prep_purchase_by_date(booking.event_date)

    deposit_due_date = booking.deposit_due_date
    if deposit_due_date is None and service_status in ("confirmed", "completed"):
        deposit_due_date = booking.confirmed_at.date() if booking.confirmed_at else as_of
    balance_due_date = booking.balance_due_date or booking.event_date

    payment_status = derive_payment_status(
        service_status=service_status,
        event_date=booking.event_date,
        total=total,
        amount_paid=amount_paid,
        deposit_amount=deposit_amount,
        as_of=as_of,
    )
    pipeline_status = derive_pipeline_status(
        service_status=service_status,
        source=booking.source,
        proposal_sent=booking.proposal_sent_at is not None,
        proposal_accepted=booking.proposal_accepted,
    )

    return booking.model_copy(
        update={
            "status": service_status,
            "service_status": service_status,
            "payment_status": payment_status,
            "pipeline_status": pipeline_status,
            "total": total,
            "deposit_percent": deposit_percent,
            "deposit_amount": deposit_amount,
            "deposit_due_date": deposit_due_date,
            "balance_due_date": balance_due_date,
            "amount_paid": amount_paid,
            "balance_due_amount": balance_due_amount,
            "prep_purchase_by_date": prep_purchase_by_date,
            "locked": service_status == "completed",
        }
    )


def apply_confirmation_payment_terms(
    booking: BookingRecord,
    confirmed_at: datetime,
    default_deposit_percent: float = DEFAULT_DEPOSIT_PERCENT,
) -> BookingRecord:
    """Confirm the booking and fix its deposit terms as of the confirmation time"""
    deposit_percent = min(100.0, _non_negative(booking.deposit_percent, default_deposit_percent))
    confirmed = booking.model_copy(
        update={
            "status": "confirmed",
            "service_status": "confirmed",
            "confirmed_at": booking.confirmed_at or confirmed_at,
            "deposit_percent": deposit_percent,
            "deposit_amount": round_money(_non_negative(booking.total) * deposit_percent / 100),
            "deposit_due_date": booking.deposit_due_date or confirmed_at.date(),
        }
    )
    return normalize_booking_workflow_fields(confirmed, confirmed_at.date(), default_deposit_percent)


def apply_payment(booking: BookingRecord, amount: float, payment_date: date) -> BookingRecord:
    """Record a customer payment; negative amounts are ignored"""
    current = normalize_booking_workflow_fields(booking, payment_date)
    amount_paid = round_money(current.amount_paid + max(0.0, to_finite_number(amount)))
    return normalize_booking_workflow_fields(current.model_copy(update={"amount_paid": amount_paid}), payment_date)


def apply_refund(booking: BookingRecord, amount: float, refund_date: date) -> BookingRecord:
    """Refund part or all of the amount paid; a refund cancels the booking"""
    current = normalize_booking_workflow_fields(booking, refund_date)
    amount_paid = round_money(max(0.0, current.amount_paid - max(0.0, to_finite_number(amount))))
    cancelled = current.model_copy(
        update={"status": "cancelled", "service_status": "cancelled", "amount_paid": amount_paid}
    )
    return normalize_booking_workflow_fields(cancelled, refund_date)


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Validate if a booking status transition is allowed

    Booking statuses: pending → confirmed → completed, cancelled from pending/confirmed
    """
    if current_status == new_status:
        return True
    return new_status in VALID_STATUS_TRANSITIONS.get(current_status, [])


def apply_status_change(
    booking: BookingRecord,
    new_status: str,
    changed_at: datetime,
    default_deposit_percent: float = DEFAULT_DEPOSIT_PERCENT,
) -> BookingRecord:
    """Move the booking to new_status; callers check validate_status_transition first"""
    if new_status == "confirmed" and get_service_status(booking) != "confirmed":
        return apply_confirmation_payment_terms(booking, changed_at, default_deposit_percent)

    changed = booking.model_copy(update={"status": new_status, "service_status": new_status})
    return normalize_booking_workflow_fields(changed, changed_at.date(), default_deposit_percent)
