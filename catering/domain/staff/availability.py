"""
Staff availability checks for event scheduling.

Rules are evaluated in order and the first failing rule wins:
blackout date, then the weekly day flag, then the per-day hour window.
"""

import logging
from datetime import date
from typing import Iterable, Union

from ...shared.validators import parse_time_to_minutes, validate_iso_date
from .schemas import DAYS_OF_WEEK, StaffAvailability, StaffRecord

logger = logging.getLogger(__name__)


def day_of_week(event_date: date) -> str:
    return DAYS_OF_WEEK[event_date.weekday()]


def _within_window(availability: StaffAvailability, day: str, event_time: str) -> bool:
    window = availability.for_day(day).window
    if window is None:
        return True

    event_minutes = parse_time_to_minutes(event_time)
    if event_minutes is None:
        # Nothing to compare against; the day itself is open
        logger.debug(f"Unparseable event time {event_time!r}; skipping hour window check")
        return True

    return parse_time_to_minutes(window.start) <= event_minutes <= parse_time_to_minutes(window.end)


def is_available(availability: StaffAvailability, event_date: date, event_time: str) -> bool:
    if event_date in availability.unavailable_dates:
        return False

    day = day_of_week(event_date)
    if not availability.for_day(day).available:
        return False

    return _within_window(availability, day, event_time)


def is_staff_available_for_event(
    staff: StaffRecord,
    event_date: Union[date, str],
    event_time: str,
) -> bool:
    """
    Return True if the staff member can work an event starting at event_time
    on event_date. Hour windows are inclusive at both ends.
    """
    if isinstance(event_date, str):
        try:
            event_date = validate_iso_date(event_date)
        except ValueError:
            logger.warning(f"Invalid event date {event_date!r} for staff {staff.id}")
            return False

    return is_available(staff.availability, event_date, event_time)


def filter_available_staff(
    staff: Iterable[StaffRecord],
    event_date: Union[date, str],
    event_time: str,
) -> list[StaffRecord]:
    """Active staff members who can work the given slot"""
    return [
        member
        for member in staff
        if member.status == "active" and is_staff_available_for_event(member, event_date, event_time)
    ]
