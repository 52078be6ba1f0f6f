from .availability import filter_available_staff, is_staff_available_for_event
from .router import router
from .schemas import DayAvailability, StaffAvailability, StaffRecord, TimeWindow

__all__ = [
    "router",
    "DayAvailability",
    "StaffAvailability",
    "StaffRecord",
    "TimeWindow",
    "filter_available_staff",
    "is_staff_available_for_event",
]
