"""Booking domain schemas - Pydantic models for bookings and their workflow"""

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_email, validate_time_of_day

BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]
PaymentStatus = Literal["unpaid", "deposit-due", "deposit-paid", "balance-due", "paid-in-full", "refunded"]
PipelineStatus = Literal["inquiry", "quote_sent", "deposit_pending", "booked", "completed"]
DiscountType = Literal["percent", "amount"]
AssignmentRole = Literal["lead-chef", "full-chef", "buffet-chef", "assistant", "contractor"]
AssignmentStatus = Literal["scheduled", "confirmed", "declined", "completed"]


class StaffAssignment(BaseModel):
    staff_id: str
    role: AssignmentRole
    estimated_pay: Optional[float] = None
    status: AssignmentStatus = "scheduled"


class BookingRecord(BaseModel):
    """
    A booking as the workflow normalizer sees it.

    status/service_status, payment_status, pipeline_status, balance_due_amount
    and locked are derived; only the normalizer writes them.
    """

    id: Optional[str] = None
    event_type: str = "private-dinner"
    pricing_slot: Optional[str] = None
    event_date: date
    event_time: str = "18:00"

    customer_name: str = ""
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    adults: int = 0
    children: int = 0
    location: Optional[str] = None
    distance_miles: float = 0
    premium_add_on: float = 0
    staffing_profile_id: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = None

    subtotal: float = 0
    gratuity: float = 0
    distance_fee: float = 0
    total: float = 0
    pricing_snapshot: Optional[dict[str, Any]] = None

    status: BookingStatus = "pending"
    service_status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    pipeline_status: Optional[PipelineStatus] = None
    deposit_percent: Optional[float] = None
    deposit_amount: Optional[float] = None
    deposit_due_date: Optional[date] = None
    balance_due_date: Optional[date] = None
    amount_paid: Optional[float] = None
    balance_due_amount: Optional[float] = None
    confirmed_at: Optional[datetime] = None
    prep_purchase_by_date: Optional[date] = None
    locked: bool = False

    staff_assignments: list[StaffAssignment] = Field(default_factory=list)
    notes: Optional[str] = None
    source: Optional[str] = None

    proposal_token: Optional[str] = None
    proposal_sent_at: Optional[datetime] = None
    proposal_accepted: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# API SCHEMAS
# ============================================================================


class BookingCreate(BaseModel):
    """Schema for creating a booking; financials are computed server-side"""

    eventType: str = "private-dinner"
    pricingSlot: Optional[str] = None
    eventDate: date
    eventTime: str
    customerName: str
    customerEmail: Optional[str] = None
    customerPhone: Optional[str] = None
    adults: int = Field(default=0, ge=0)
    children: int = Field(default=0, ge=0)
    location: Optional[str] = None
    distanceMiles: float = Field(default=0, ge=0)
    premiumAddOn: float = Field(default=0, ge=0)
    staffingProfileId: Optional[str] = None
    discountType: Optional[DiscountType] = None
    discountValue: Optional[float] = Field(default=None, ge=0)
    depositPercent: Optional[float] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None
    source: Optional[str] = None

    @field_validator("eventTime")
    @classmethod
    def check_event_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("customerEmail")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class BookingUpdate(BaseModel):
    """Schema for updating a booking; omitted fields are unchanged"""

    eventType: Optional[str] = None
    pricingSlot: Optional[str] = None
    eventDate: Optional[date] = None
    eventTime: Optional[str] = None
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    customerPhone: Optional[str] = None
    adults: Optional[int] = Field(default=None, ge=0)
    children: Optional[int] = Field(default=None, ge=0)
    location: Optional[str] = None
    distanceMiles: Optional[float] = Field(default=None, ge=0)
    premiumAddOn: Optional[float] = Field(default=None, ge=0)
    staffingProfileId: Optional[str] = None
    discountType: Optional[DiscountType] = None
    discountValue: Optional[float] = Field(default=None, ge=0)
    depositPercent: Optional[float] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None

    @field_validator("eventTime")
    @classmethod
    def check_event_time(cls, v):
        if v is None:
            return v
        return validate_time_of_day(v)

    @field_validator("customerEmail")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class StaffAssignmentItem(BaseModel):
    staffId: str
    role: AssignmentRole
    estimatedPay: Optional[float] = None
    status: AssignmentStatus = "scheduled"


class StaffAssignmentRequest(BaseModel):
    """Replace the staff assigned to a booking"""

    assignments: list[StaffAssignmentItem]


class PaymentRequest(BaseModel):
    amount: float = Field(gt=0)
    paymentDate: Optional[date] = None  # defaults to today


class RefundRequest(BaseModel):
    amount: float = Field(gt=0)
    refundDate: Optional[date] = None  # defaults to today


class StatusChangeRequest(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: str
    eventType: str
    pricingSlot: Optional[str]
    eventDate: date
    eventTime: str
    customerName: str
    customerEmail: Optional[str]
    customerPhone: Optional[str]
    adults: int
    children: int
    location: Optional[str]
    distanceMiles: float
    premiumAddOn: float
    staffingProfileId: Optional[str]
    discountType: Optional[str]
    discountValue: Optional[float]
    subtotal: float
    gratuity: float
    distanceFee: float
    total: float
    pricingSnapshot: Optional[dict[str, Any]]
    status: str
    serviceStatus: str
    paymentStatus: Optional[str]
    pipelineStatus: Optional[str]
    depositPercent: Optional[float]
    depositAmount: Optional[float]
    depositDueDate: Optional[date]
    balanceDueDate: Optional[date]
    amountPaid: float
    balanceDueAmount: Optional[float]
    confirmedAt: Optional[datetime]
    prepPurchaseByDate: Optional[date]
    locked: bool
    staffAssignments: list[StaffAssignmentItem]
    notes: Optional[str]
    source: Optional[str]
    proposalToken: Optional[str]
    proposalSentAt: Optional[datetime]
    proposalAccepted: bool
    createdAt: Optional[datetime]
    updatedAt: Optional[datetime]
