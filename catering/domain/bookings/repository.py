"""Booking repository - Database operations for bookings"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking
from .schemas import BookingRecord

# Columns copied between the ORM row and BookingRecord
BOOKING_FIELDS = [name for name in BookingRecord.model_fields if name not in ("id", "created_at", "updated_at")]


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_bookings(
        db: Session,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Booking]:
        """Get bookings ordered by event date, with optional filters"""
        query = db.query(Booking)
        if status:
            query = query.filter(Booking.status == status)
        if start_date:
            query = query.filter(Booking.event_date >= start_date)
        if end_date:
            query = query.filter(Booking.event_date <= end_date)
        return query.order_by(Booking.event_date.asc(), Booking.event_time.asc()).all()

    @staticmethod
    def get_open_bookings(db: Session) -> list[Booking]:
        """Bookings whose workflow fields can still change with the calendar"""
        return db.query(Booking).filter(Booking.status.in_(["pending", "confirmed"])).all()

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def to_record(booking: Booking) -> BookingRecord:
        data = {name: getattr(booking, name) for name in BOOKING_FIELDS}
        data["staff_assignments"] = booking.staff_assignments or []
        return BookingRecord(id=booking.id, created_at=booking.created_at, updated_at=booking.updated_at, **data)

    @staticmethod
    def apply_record(booking: Booking, record: BookingRecord) -> Booking:
        """Copy a (normalized) record onto the ORM row"""
        dumped = record.model_dump(mode="python")
        for name in BOOKING_FIELDS:
            setattr(booking, name, dumped[name])
        booking.staff_assignments = [a.model_dump(mode="json") for a in record.staff_assignments]
        return booking

    @staticmethod
    def create_booking(db: Session, record: BookingRecord) -> Booking:
        booking = Booking()
        if record.id:
            booking.id = record.id
        BookingRepository.apply_record(booking, record)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def save_booking(db: Session, booking: Booking, record: BookingRecord) -> Booking:
        BookingRepository.apply_record(booking, record)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()
