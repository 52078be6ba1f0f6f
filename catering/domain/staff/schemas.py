"""Staff domain schemas - Pydantic models for staff records and availability"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import parse_time_to_minutes, validate_email, validate_time_of_day

DayOfWeek = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

DAYS_OF_WEEK: tuple[DayOfWeek, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

StaffRole = Literal["lead-chef", "full-chef", "buffet-chef", "assistant", "contractor"]
StaffStatus = Literal["active", "inactive", "on-leave"]
OwnerRole = Literal["owner-a", "owner-b"]


class TimeWindow(BaseModel):
    """Inclusive window of availability within one day"""

    start: str  # HH:MM
    end: str  # HH:MM

    @field_validator("start", "end")
    @classmethod
    def check_time(cls, v):
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def check_order(self):
        if parse_time_to_minutes(self.start) > parse_time_to_minutes(self.end):
            raise ValueError("Window start must not be after its end")
        return self


class DayAvailability(BaseModel):
    """
    Availability for one weekday. available=True with no window is the
    explicit "unrestricted" value.
    """

    available: bool = True
    window: Optional[TimeWindow] = None

    @model_validator(mode="before")
    @classmethod
    def accept_day_flag(cls, data):
        # Older records store each weekday as a bare true/false
        if isinstance(data, bool):
            return {"available": data}
        return data


def unrestricted_week() -> dict[str, DayAvailability]:
    return {day: DayAvailability() for day in DAYS_OF_WEEK}


class StaffAvailability(BaseModel):
    weekly: dict[DayOfWeek, DayAvailability] = Field(default_factory=unrestricted_week)
    unavailable_dates: list[date] = Field(default_factory=list)

    def for_day(self, day: str) -> DayAvailability:
        # A weekday that was never configured is unrestricted
        return self.weekly.get(day) or DayAvailability()


class StaffRecord(BaseModel):
    """A staff member as the availability matcher and booking service see it"""

    id: str
    name: str
    email: Optional[str] = None
    primary_role: str
    secondary_roles: list[str] = Field(default_factory=list)
    status: str = "active"
    availability: StaffAvailability = Field(default_factory=StaffAvailability)


class StaffCreate(BaseModel):
    """Schema for creating a staff member"""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    primaryRole: StaffRole
    secondaryRoles: list[StaffRole] = Field(default_factory=list)
    status: StaffStatus = "active"
    isOwner: bool = False
    ownerRole: Optional[OwnerRole] = None
    weeklyAvailability: Optional[dict[DayOfWeek, DayAvailability]] = None
    unavailableDates: list[date] = Field(default_factory=list)
    hourlyRate: Optional[float] = None
    notes: Optional[str] = None
    hireDate: Optional[date] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class StaffUpdate(BaseModel):
    """Schema for updating a staff member; omitted fields are unchanged"""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    primaryRole: Optional[StaffRole] = None
    secondaryRoles: Optional[list[StaffRole]] = None
    status: Optional[StaffStatus] = None
    isOwner: Optional[bool] = None
    ownerRole: Optional[OwnerRole] = None
    weeklyAvailability: Optional[dict[DayOfWeek, DayAvailability]] = None
    unavailableDates: Optional[list[date]] = None
    hourlyRate: Optional[float] = None
    notes: Optional[str] = None
    hireDate: Optional[date] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class StaffResponse(BaseModel):
    """Schema for staff response"""

    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    primaryRole: str
    secondaryRoles: list[str]
    status: str
    isOwner: bool
    ownerRole: Optional[str]
    weeklyAvailability: dict[str, DayAvailability]
    unavailableDates: list[date]
    hourlyRate: Optional[float]
    notes: Optional[str]
    hireDate: Optional[date]
    createdAt: Optional[datetime]
    updatedAt: Optional[datetime]
