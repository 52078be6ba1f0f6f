"""Rules domain schemas - Pydantic models for the business rules configuration"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

PricingSlot = Literal["primary", "secondary"]
StaffingRole = Literal["lead", "full", "buffet", "assistant"]


class PricingRules(BaseModel):
    primary_base_price: float = 60  # $ per adult
    secondary_base_price: float = 32  # $ per adult
    child_discount_percent: float = 50
    premium_add_on_min_per_guest: float = 5
    premium_add_on_max_per_guest: float = 20
    default_gratuity_percent: float = 20
    default_deposit_percent: float = 30
    default_pricing_slot: PricingSlot = "secondary"


class DistanceRules(BaseModel):
    free_distance_miles: float = 20
    base_distance_fee: float = 50  # $ once past the free radius
    additional_fee_per_increment: float = 25
    increment_miles: float = 5


class StaffingProfile(BaseModel):
    """Named staffing composition matched by event type and guest range"""

    id: str
    name: str
    event_type: str = "any"  # an event type, or "any"
    min_guests: int = 0
    max_guests: int = 9999  # 9999 = no upper limit
    roles: list[StaffingRole] = Field(default_factory=list)


class StaffingRules(BaseModel):
    max_guests_per_chef_primary: int = 15
    max_guests_per_chef_secondary: int = 25
    assistant_required: bool = True
    profiles: list[StaffingProfile] = Field(default_factory=list)


class PrivateLaborRules(BaseModel):
    """Percent of subtotal; caps are percent of subtotal + gratuity (None = no cap)"""

    lead_chef_base_percent: float = 15
    lead_chef_cap_percent: Optional[float] = None
    full_chef_base_percent: float = 10
    full_chef_cap_percent: Optional[float] = None
    assistant_base_percent: float = 8
    assistant_cap_percent: Optional[float] = None
    chef_gratuity_split_percent: float = 55
    assistant_gratuity_split_percent: float = 45


class BuffetLaborRules(BaseModel):
    chef_base_percent: float = 12
    chef_cap_percent: Optional[float] = None


class CostRules(BaseModel):
    primary_food_cost_percent: float = 18
    secondary_food_cost_percent: float = 20
    supplies_cost_percent: float = 7
    transportation_stipend: float = 50  # $ flat per event


class Owner(BaseModel):
    id: str
    name: str
    equity_percent: float


def _default_owners() -> list[Owner]:
    return [
        Owner(id="owner-a", name="Owner A", equity_percent=40),
        Owner(id="owner-b", name="Owner B", equity_percent=60),
    ]


class ProfitDistributionRules(BaseModel):
    business_retained_percent: float = 30
    owner_distribution_percent: float = 70
    owners: list[Owner] = Field(default_factory=_default_owners)


class RevenueTreatment(BaseModel):
    gratuity_is_tip_pool: bool = True
    sales_tax_is_pass_through: bool = True


class SafetyLimits(BaseModel):
    max_total_labor_percent: float = 30
    max_food_cost_percent: float = 30
    warn_when_exceeded: bool = True


class RulesConfiguration(BaseModel):
    """Process-wide business rules; always passed explicitly to the engine"""

    pricing: PricingRules = Field(default_factory=PricingRules)
    distance: DistanceRules = Field(default_factory=DistanceRules)
    staffing: StaffingRules = Field(default_factory=StaffingRules)
    private_labor: PrivateLaborRules = Field(default_factory=PrivateLaborRules)
    buffet_labor: BuffetLaborRules = Field(default_factory=BuffetLaborRules)
    costs: CostRules = Field(default_factory=CostRules)
    profit_distribution: ProfitDistributionRules = Field(default_factory=ProfitDistributionRules)
    revenue_treatment: RevenueTreatment = Field(default_factory=RevenueTreatment)
    safety_limits: SafetyLimits = Field(default_factory=SafetyLimits)


DEFAULT_RULES = RulesConfiguration()


class RulesValidationResult(BaseModel):
    ok: bool
    issues: list[str]
