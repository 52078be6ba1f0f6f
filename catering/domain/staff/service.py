"""Staff service - Business logic for staff members and availability lookup"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...models import StaffMember
from ...shared.validators import validate_iso_date
from .availability import filter_available_staff
from .repository import StaffRepository
from .schemas import (
    DayAvailability,
    StaffAvailability,
    StaffCreate,
    StaffRecord,
    StaffResponse,
    StaffUpdate,
    unrestricted_week,
)

logger = logging.getLogger(__name__)


def _dump_weekly(weekly: Optional[dict[str, DayAvailability]]) -> Optional[dict]:
    if weekly is None:
        return None
    return {day: value.model_dump(mode="json") for day, value in weekly.items()}


def _dump_dates(dates: list[date]) -> list[str]:
    return sorted({d.isoformat() for d in dates})


def _stored_weekly(member: StaffMember) -> dict[str, DayAvailability]:
    weekly = unrestricted_week()
    stored = member.weekly_availability or {}
    if not isinstance(stored, dict):
        logger.warning(f"Staff {member.id} has unreadable stored weekly availability, treating it as unrestricted")
        return weekly
    for day, value in stored.items():
        if day not in weekly:
            logger.warning(f"Staff {member.id} has unknown weekday {day!r} in stored availability, ignoring it")
            continue
        try:
            weekly[day] = DayAvailability.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Staff {member.id} has invalid stored availability for {day}, treating it as unrestricted: {e}")
    return weekly


def _stored_blackouts(member: StaffMember) -> list[date]:
    dates = []
    for value in member.unavailable_dates or []:
        if isinstance(value, date):
            dates.append(value)
            continue
        try:
            dates.append(validate_iso_date(value))
        except ValueError:
            logger.warning(f"Staff {member.id} has unreadable blackout date {value!r}, ignoring it")
    return dates


def staff_availability(member: StaffMember) -> StaffAvailability:
    """Build the availability record for a row; each unreadable weekday falls back to unrestricted"""
    return StaffAvailability(weekly=_stored_weekly(member), unavailable_dates=_stored_blackouts(member))


def staff_to_record(member: StaffMember) -> StaffRecord:
    return StaffRecord(
        id=member.id,
        name=member.name,
        email=member.email,
        primary_role=member.primary_role,
        secondary_roles=member.secondary_roles or [],
        status=member.status,
        availability=staff_availability(member),
    )


def staff_to_response(member: StaffMember) -> StaffResponse:
    availability = staff_availability(member)
    return StaffResponse(
        id=member.id,
        name=member.name,
        email=member.email,
        phone=member.phone,
        primaryRole=member.primary_role,
        secondaryRoles=member.secondary_roles or [],
        status=member.status,
        isOwner=bool(member.is_owner),
        ownerRole=member.owner_role,
        weeklyAvailability=availability.weekly,
        unavailableDates=availability.unavailable_dates,
        hourlyRate=member.hourly_rate,
        notes=member.notes,
        hireDate=member.hire_date,
        createdAt=member.created_at,
        updatedAt=member.updated_at,
    )


class StaffService:
    """Service layer for staff business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StaffRepository()

    def get_staff(self, status: Optional[str] = None) -> list[StaffMember]:
        return self.repo.get_staff(self.db, status)

    def get_staff_member(self, staff_id: str) -> StaffMember:
        member = self.repo.get_staff_by_id(self.db, staff_id)
        if not member:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return member

    def get_staff_records(self, staff_ids: list[str]) -> dict[str, StaffRecord]:
        """Look up staff by id for assignment checks"""
        return {m.id: staff_to_record(m) for m in self.repo.get_staff_by_ids(self.db, staff_ids)}

    def create_staff(self, data: StaffCreate) -> StaffMember:
        logger.info(f"📥 Creating staff member: {data.name} ({data.primaryRole})")
        staff_data = {
            "name": data.name.strip(),
            "email": data.email,
            "phone": data.phone,
            "primary_role": data.primaryRole,
            "secondary_roles": list(data.secondaryRoles),
            "status": data.status,
            "is_owner": data.isOwner,
            "owner_role": data.ownerRole,
            "weekly_availability": _dump_weekly(data.weeklyAvailability),
            "unavailable_dates": _dump_dates(data.unavailableDates),
            "hourly_rate": data.hourlyRate,
            "notes": data.notes,
            "hire_date": data.hireDate,
        }
        return self.repo.create_staff(self.db, **staff_data)

    def update_staff(self, staff_id: str, data: StaffUpdate) -> StaffMember:
        member = self.get_staff_member(staff_id)

        updates = {}
        if data.name is not None:
            updates["name"] = data.name.strip()
        if data.email is not None:
            updates["email"] = data.email
        if data.phone is not None:
            updates["phone"] = data.phone
        if data.primaryRole is not None:
            updates["primary_role"] = data.primaryRole
        if data.secondaryRoles is not None:
            updates["secondary_roles"] = list(data.secondaryRoles)
        if data.status is not None:
            updates["status"] = data.status
        if data.isOwner is not None:
            updates["is_owner"] = data.isOwner
        if data.ownerRole is not None:
            updates["owner_role"] = data.ownerRole
        if data.weeklyAvailability is not None:
            updates["weekly_availability"] = _dump_weekly(data.weeklyAvailability)
        if data.unavailableDates is not None:
            updates["unavailable_dates"] = _dump_dates(data.unavailableDates)
        if data.hourlyRate is not None:
            updates["hourly_rate"] = data.hourlyRate
        if data.notes is not None:
            updates["notes"] = data.notes
        if data.hireDate is not None:
            updates["hire_date"] = data.hireDate

        return self.repo.update_staff(self.db, member, **updates)

    def delete_staff(self, staff_id: str) -> dict:
        member = self.get_staff_member(staff_id)
        self.repo.delete_staff(self.db, member)
        logger.info(f"🗑️ Deleted staff member {staff_id}")
        return {"message": "Staff member deleted"}

    def get_available_staff(self, event_date: date, event_time: str) -> list[StaffMember]:
        """Active staff who can work an event at the given date and time"""
        members = self.repo.get_staff(self.db)
        available_ids = {r.id for r in filter_available_staff(map(staff_to_record, members), event_date, event_time)}
        return [m for m in members if m.id in available_ids]
