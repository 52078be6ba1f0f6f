"""Pricing domain schemas - engine inputs and outputs"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

StaffRoleSlot = Literal["lead", "full", "buffet", "assistant"]


class StaffPayOverride(BaseModel):
    """Event-level pay adjustment for one staffing role"""

    role: StaffRoleSlot
    base_pay_percent: float  # % of subtotal
    gratuity_split_percent: float  # % of the gratuity pool for this person
    cap_percent: Optional[float] = None  # % of subtotal + gratuity, None = no cap


class EventFinancialInput(BaseModel):
    """
    Raw event parameters. Counts and distance are expected to be >= 0;
    missing numbers are treated as zero.
    """

    adults: int = 0
    children: int = 0
    event_type: str = "private-dinner"
    pricing_slot: Optional[str] = None
    event_date: Optional[date] = None
    distance_miles: float = 0
    premium_add_on: float = 0  # $ per guest, 0 = no add-on
    staffing_profile_id: Optional[str] = None
    subtotal_override: Optional[float] = None  # menu-derived subtotal
    food_cost_override: Optional[float] = None
    staff_pay_overrides: list[StaffPayOverride] = Field(default_factory=list)


class StaffingSlot(BaseModel):
    role: StaffRoleSlot
    base_pay_percent: float
    cap_percent: Optional[float] = None


class StaffingPlan(BaseModel):
    chef_roles: list[StaffRoleSlot]
    assistant_needed: bool
    total_staff_count: int
    staff: list[StaffingSlot]
    matched_profile_id: Optional[str] = None
    matched_profile_name: Optional[str] = None


class LaborCompensation(BaseModel):
    role: StaffRoleSlot
    base_pay: float
    gratuity_share: float
    total_calculated: float
    cap_percent: Optional[float]
    cap_amount: Optional[float]
    final_pay: float
    was_capped: bool
    excess_to_profit: float


class OwnerDistribution(BaseModel):
    owner_id: str
    owner_name: str
    amount: float


class EventFinancials(BaseModel):
    # Revenue
    pricing_slot: str
    guest_count: int
    adult_count: int
    child_count: int
    base_price: float
    child_price: float
    premium_add_on: float
    subtotal: float
    gratuity: float
    gratuity_percent: float
    distance_fee: float
    total_charged: float

    # Costs
    food_cost: float
    food_cost_percent: float
    supplies_cost: float
    transportation_cost: float
    total_costs: float

    # Labor
    staffing_plan: StaffingPlan
    labor_compensation: list[LaborCompensation]
    total_labor_paid: float
    total_excess_to_profit: float
    labor_percent_of_revenue: float

    # Profit
    gross_profit: float
    retained_amount: float
    retained_percent: float
    distribution_amount: float
    distribution_percent: float
    owner_distributions: list[OwnerDistribution]

    warnings: list[str]


class FinancialSnapshot(BaseModel):
    """Rates and totals locked onto a booking so later rule edits never rewrite it"""

    pricing_slot: str
    adult_base_price: float
    child_base_price: float
    gratuity_percent: float
    subtotal: float
    gratuity: float
    distance_fee: float
    total_charged: float
    captured_at: datetime
