"""
Automated workflow refresh for bookings
Re-normalizes open bookings so date-driven fields (balance due, prep dates)
follow the calendar without anyone editing the booking
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ..domain.bookings.repository import BookingRepository
from ..domain.bookings.workflow import normalize_booking_workflow_fields
from ..domain.rules.service import RulesService

logger = logging.getLogger(__name__)


def refresh_booking_workflows(db: Session, as_of: Optional[date] = None) -> dict:
    """
    Normalize every pending or confirmed booking against as_of (default today).
    Should be run as a scheduled job (e.g., daily cron)

    Returns:
        dict: Summary of changes made
    """
    as_of = as_of or date.today()
    summary = {
        "checked": 0,
        "payment_status_changed": 0,
        "to_balance_due": 0,
        "total_updated": 0,
    }

    try:
        rules = RulesService(db).load_rules()
        repo = BookingRepository()

        for booking in repo.get_open_bookings(db):
            summary["checked"] += 1
            record = repo.to_record(booking)
            normalized = normalize_booking_workflow_fields(record, as_of, rules.pricing.default_deposit_percent)
            if normalized == record:
                continue

            if normalized.payment_status != record.payment_status:
                summary["payment_status_changed"] += 1
                if normalized.payment_status == "balance-due":
                    summary["to_balance_due"] += 1
                logger.info(
                    f"✅ Booking {booking.id} payment status: {record.payment_status} → {normalized.payment_status}"
                )

            repo.apply_record(booking, normalized)
            summary["total_updated"] += 1

        db.commit()
        logger.info(f"🔄 Booking workflow refresh complete: {summary}")
        return summary

    except Exception as e:
        logger.error(f"❌ Error refreshing booking workflows: {str(e)}")
        db.rollback()
        raise
