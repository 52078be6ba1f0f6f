import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class MoneyRulesRecord(Base):
    """Single-row rules configuration table (id = 'default')"""

    __tablename__ = "money_rules"

    id = Column(String(32), primary_key=True, default="default")
    rules = Column(JSON, nullable=False, default=dict)  # RulesConfiguration as JSON
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class StaffMember(Base):
    __tablename__ = "staff"

    id = Column(String(64), primary_key=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    primary_role = Column(String(50), nullable=False)  # lead-chef, full-chef, buffet-chef, assistant, contractor
    secondary_roles = Column(JSON, default=list, nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active, inactive, on-leave
    is_owner = Column(Boolean, default=False, nullable=False)
    owner_role = Column(String(20), nullable=True)  # owner-a, owner-b
    # {"monday": {"available": true, "window": {"start": "10:00", "end": "22:00"}}, ...}
    weekly_availability = Column(JSON, nullable=True)
    unavailable_dates = Column(JSON, default=list, nullable=False)  # ["2026-07-04", ...]
    hourly_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    hire_date = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(64), primary_key=True, default=generate_public_id)
    event_type = Column(String(50), nullable=False)  # private-dinner, buffet
    pricing_slot = Column(String(20), nullable=True)  # primary, secondary
    event_date = Column(Date, nullable=False, index=True)
    event_time = Column(String(10), nullable=False)  # HH:MM format

    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)

    adults = Column(Integer, default=0, nullable=False)
    children = Column(Integer, default=0, nullable=False)
    location = Column(String(500), nullable=True)
    distance_miles = Column(Float, default=0, nullable=False)
    premium_add_on = Column(Float, default=0, nullable=False)
    staffing_profile_id = Column(String(64), nullable=True)
    discount_type = Column(String(10), nullable=True)  # percent, amount
    discount_value = Column(Float, nullable=True)

    # Derived financials (written by the booking service only)
    subtotal = Column(Float, default=0, nullable=False)
    gratuity = Column(Float, default=0, nullable=False)
    distance_fee = Column(Float, default=0, nullable=False)
    total = Column(Float, default=0, nullable=False)
    pricing_snapshot = Column(JSON, nullable=True)  # rates locked at save time

    # Workflow fields (written by the workflow normalizer only)
    status = Column(String(20), default="pending", nullable=False, index=True)
    service_status = Column(String(20), default="pending", nullable=False)
    payment_status = Column(String(20), nullable=True)  # unpaid, deposit-due, ..., refunded
    pipeline_status = Column(String(20), nullable=True)  # inquiry, quote_sent, ..., completed
    deposit_percent = Column(Float, nullable=True)
    deposit_amount = Column(Float, nullable=True)
    deposit_due_date = Column(Date, nullable=True)
    balance_due_date = Column(Date, nullable=True)
    amount_paid = Column(Float, default=0, nullable=False)
    balance_due_amount = Column(Float, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    prep_purchase_by_date = Column(Date, nullable=True)
    locked = Column(Boolean, default=False, nullable=False)

    staff_assignments = Column(JSON, default=list, nullable=False)
    notes = Column(Text, nullable=True)
    source = Column(String(20), nullable=True)  # null = admin-created, inquiry = public form

    # Proposal (client-facing quote link)
    proposal_token = Column(String(64), nullable=True)
    proposal_sent_at = Column(DateTime, nullable=True)
    proposal_accepted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ProposalToken(Base):
    __tablename__ = "proposal_tokens"

    id = Column(String(64), primary_key=True, default=generate_public_id)
    token = Column(String(64), unique=True, index=True, nullable=False)  # public URL slug
    booking_id = Column(String(64), index=True, nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, accepted
    snapshot = Column(JSON, nullable=False, default=dict)  # point-in-time booking terms
    created_at = Column(DateTime, server_default=func.now())
    accepted_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)  # null = no expiry
