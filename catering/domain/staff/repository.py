"""Staff repository - Database operations for staff members"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import StaffMember


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def get_staff(db: Session, status: Optional[str] = None) -> list[StaffMember]:
        """Get all staff members, optionally filtered by status"""
        query = db.query(StaffMember)
        if status:
            query = query.filter(StaffMember.status == status)
        return query.order_by(StaffMember.name.asc()).all()

    @staticmethod
    def get_staff_by_id(db: Session, staff_id: str) -> Optional[StaffMember]:
        return db.query(StaffMember).filter(StaffMember.id == staff_id).first()

    @staticmethod
    def get_staff_by_ids(db: Session, staff_ids: list[str]) -> list[StaffMember]:
        if not staff_ids:
            return []
        return db.query(StaffMember).filter(StaffMember.id.in_(staff_ids)).all()

    @staticmethod
    def create_staff(db: Session, **staff_data) -> StaffMember:
        """Create a new staff member"""
        member = StaffMember(**staff_data)
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def update_staff(db: Session, member: StaffMember, **updates) -> StaffMember:
        """Update a staff member with provided fields"""
        for key, value in updates.items():
            if hasattr(member, key):
                setattr(member, key, value)

        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def delete_staff(db: Session, member: StaffMember) -> None:
        db.delete(member)
        db.commit()
