from datetime import date, datetime

import pytest

from catering.domain.bookings.schemas import BookingRecord
from catering.domain.bookings.workflow import (
    apply_confirmation_payment_terms,
    apply_payment,
    apply_refund,
    apply_status_change,
    derive_payment_status,
    normalize_booking_workflow_fields,
    validate_status_transition,
)

EVENT_DATE = date(2099, 6, 6)
TODAY = date(2026, 10, 19)


def _booking(**overrides):
    return BookingRecord(event_date=EVENT_DATE, total=1080, **overrides)


def test_new_booking_defaults():
    booking = normalize_booking_workflow_fields(_booking(), TODAY)

    assert booking.status == "pending"
    assert booking.service_status == "pending"
    assert booking.payment_status == "deposit-due"
    assert booking.pipeline_status == "quote_sent"
    assert booking.deposit_percent == 30
    assert booking.deposit_amount == 324
    assert booking.amount_paid == 0
    assert booking.balance_due_amount == 1080
    assert booking.deposit_due_date is None
    assert booking.balance_due_date == EVENT_DATE
    assert booking.prep_purchase_by_date == date(2099, 6, 4)
    assert booking.locked is False


def test_normalize_is_idempotent():
    once = normalize_booking_workflow_fields(_booking(amount_paid=100, source="inquiry"), TODAY)
    assert normalize_booking_workflow_fields(once, TODAY) == once


def test_inquiry_source():
    booking = normalize_booking_workflow_fields(_booking(source="inquiry"), TODAY)
    assert booking.pipeline_status == "inquiry"


def test_sent_proposal_is_quote_sent():
    booking = normalize_booking_workflow_fields(
        _booking(source="inquiry", proposal_sent_at=datetime(2026, 10, 1, 9)), TODAY
    )
    assert booking.pipeline_status == "quote_sent"


def test_accepted_proposal_confirms_booking():
    booking = normalize_booking_workflow_fields(_booking(proposal_accepted=True), TODAY)

    assert booking.status == "confirmed"
    assert booking.service_status == "confirmed"
    assert booking.pipeline_status == "booked"
    assert booking.deposit_due_date == TODAY


def test_existing_deposit_amount_is_kept():
    booking = normalize_booking_workflow_fields(_booking(deposit_amount=100), TODAY)
    assert booking.deposit_amount == 100


def test_custom_deposit_percent():
    booking = normalize_booking_workflow_fields(_booking(deposit_percent=50), TODAY)
    assert booking.deposit_amount == 540


def test_bad_numbers_fall_back():
    booking = normalize_booking_workflow_fields(
        _booking(deposit_percent=-10, amount_paid=float("nan")), TODAY
    )

    assert booking.deposit_percent == 0
    assert booking.deposit_amount == 0
    assert booking.amount_paid == 0


def test_deposit_percent_capped_at_total():
    booking = normalize_booking_workflow_fields(_booking(deposit_percent=150), TODAY)

    assert booking.deposit_percent == 100
    assert booking.deposit_amount == 1080


def test_zero_total_is_paid_in_full():
    booking = normalize_booking_workflow_fields(BookingRecord(event_date=EVENT_DATE), TODAY)
    assert booking.payment_status == "paid-in-full"


@pytest.mark.parametrize(
    "service_status, paid, as_of, expected",
    [
        ("pending", 0, TODAY, "deposit-due"),
        ("confirmed", 324, TODAY, "deposit-paid"),
        ("confirmed", 324, EVENT_DATE, "balance-due"),
        ("confirmed", 1079.995, TODAY, "paid-in-full"),
        ("cancelled", 0, TODAY, "unpaid"),
        ("cancelled", 200, TODAY, "refunded"),
        ("cancelled", 1080, TODAY, "paid-in-full"),
    ],
)
def test_derive_payment_status(service_status, paid, as_of, expected):
    assert derive_payment_status(service_status, EVENT_DATE, 1080, paid, 324, as_of) == expected


def test_payments():
    booking = normalize_booking_workflow_fields(_booking(status="confirmed"), TODAY)

    booking = apply_payment(booking, 324, TODAY)
    assert booking.payment_status == "deposit-paid"
    assert booking.balance_due_amount == 756

    assert normalize_booking_workflow_fields(booking, EVENT_DATE).payment_status == "balance-due"

    booking = apply_payment(booking, 756, TODAY)
    assert booking.payment_status == "paid-in-full"
    assert booking.balance_due_amount == 0


def test_partial_refund_cancels_booking():
    booking = apply_payment(_booking(status="confirmed"), 324, TODAY)
    booking = apply_refund(booking, 100, TODAY)

    assert booking.status == "cancelled"
    assert booking.payment_status == "refunded"
    assert booking.amount_paid == 224
    assert booking.pipeline_status == "booked"


def test_full_refund_is_unpaid():
    booking = apply_payment(_booking(status="confirmed"), 324, TODAY)
    booking = apply_refund(booking, 324, TODAY)

    assert booking.amount_paid == 0
    assert booking.payment_status == "unpaid"


def test_confirmation_terms():
    confirmed_at = datetime(2026, 10, 19, 15, 45)
    booking = apply_confirmation_payment_terms(_booking(deposit_amount=50), confirmed_at)

    assert booking.status == "confirmed"
    assert booking.confirmed_at == confirmed_at
    assert booking.deposit_amount == 324
    assert booking.deposit_due_date == date(2026, 10, 19)
    assert booking.pipeline_status == "booked"


@pytest.mark.parametrize(
    "current, new, allowed",
    [
        ("pending", "confirmed", True),
        ("pending", "cancelled", True),
        ("pending", "completed", False),
        ("confirmed", "completed", True),
        ("confirmed", "pending", False),
        ("completed", "cancelled", False),
        ("cancelled", "confirmed", False),
        ("completed", "completed", True),
    ],
)
def test_status_transitions(current, new, allowed):
    assert validate_status_transition(current, new) is allowed


def test_completed_booking_is_locked():
    confirmed = apply_status_change(_booking(), "confirmed", datetime(2026, 10, 19, 9))
    completed = apply_status_change(confirmed, "completed", datetime(2099, 6, 7, 9))

    assert confirmed.locked is False
    assert completed.status == "completed"
    assert completed.pipeline_status == "completed"
    assert completed.locked is True
    assert completed.deposit_due_date == date(2026, 10, 19)
