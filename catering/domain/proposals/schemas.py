"""Proposal domain schemas - shareable quote links and their snapshots"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

ProposalStatus = Literal["pending", "accepted", "expired"]


class ProposalSnapshot(BaseModel):
    """Point-in-time copy of the booking terms shown to the client"""

    customerName: str
    customerEmail: Optional[str] = None
    eventDate: str  # YYYY-MM-DD
    eventTime: str
    location: Optional[str] = None
    adults: int = 0
    children: int = 0
    eventType: str
    subtotal: float
    gratuity: float
    distanceFee: float
    total: float
    depositAmount: Optional[float] = None
    depositDueDate: Optional[str] = None
    balanceDueDate: Optional[str] = None
    notes: Optional[str] = None
    menuSummary: Optional[str] = None
    businessName: str
    sentAt: str  # ISO timestamp


class ProposalCreateRequest(BaseModel):
    """Snapshot is built from the booking when omitted"""

    bookingId: Optional[str] = None
    snapshot: Optional[ProposalSnapshot] = None
    sendEmail: bool = False  # email the link to the customer


class ProposalCreateResponse(BaseModel):
    token: str
    url: str


class ProposalAcceptRequest(BaseModel):
    token: Optional[str] = None


class ProposalAcceptResponse(BaseModel):
    success: bool
    bookingId: str
    alreadyAccepted: bool = False


class ProposalResponse(BaseModel):
    """Public view of a proposal"""

    token: str
    bookingId: str
    status: ProposalStatus
    snapshot: ProposalSnapshot
    createdAt: Optional[datetime]
    acceptedAt: Optional[datetime]
    expiresAt: Optional[datetime]
