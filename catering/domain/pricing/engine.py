"""
Event pricing engine

Turns raw event parameters and a rules configuration into a full financial
breakdown. Every function here is pure: no I/O, no clock reads, and the same
input and rules always produce the same output.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from ...shared.money import percent_of, round_money, to_finite_number
from ..rules.schemas import RulesConfiguration, StaffingProfile
from .schemas import (
    EventFinancialInput,
    EventFinancials,
    FinancialSnapshot,
    LaborCompensation,
    OwnerDistribution,
    StaffingPlan,
    StaffingSlot,
    StaffPayOverride,
)

logger = logging.getLogger(__name__)

PRICING_SLOTS = ("primary", "secondary")

# Event types that imply a slot when the input does not name one
EVENT_TYPE_SLOTS = {
    "private-dinner": "primary",
    "buffet": "secondary",
}


def resolve_pricing_slot(event_input: EventFinancialInput, rules: RulesConfiguration) -> str:
    """Pick the pricing tier; unknown slots fall back to the configured default"""
    requested = event_input.pricing_slot or EVENT_TYPE_SLOTS.get(event_input.event_type)
    if requested in PRICING_SLOTS:
        return requested

    fallback = rules.pricing.default_pricing_slot
    logger.warning(
        f"Unrecognized pricing slot {requested!r} for event type "
        f"{event_input.event_type!r}; using default slot {fallback!r}"
    )
    return fallback


def base_price_for_slot(slot: str, rules: RulesConfiguration) -> float:
    if slot == "primary":
        return rules.pricing.primary_base_price
    return rules.pricing.secondary_base_price


def child_price_for(base_price: float, rules: RulesConfiguration) -> float:
    return base_price * (1 - rules.pricing.child_discount_percent / 100)


def clamp_premium_add_on(value: float, rules: RulesConfiguration) -> float:
    """Clamp a selected add-on into the configured range; zero means none selected."""
    amount = to_finite_number(value)
    if amount <= 0:
        return 0.0
    low = rules.pricing.premium_add_on_min_per_guest
    high = rules.pricing.premium_add_on_max_per_guest
    return min(max(amount, low), high)


def compute_distance_fee(distance_miles: float, rules: RulesConfiguration) -> float:
    """Flat fee past the free radius plus a fee per started increment beyond it"""
    schedule = rules.distance
    miles = to_finite_number(distance_miles)
    if miles <= schedule.free_distance_miles:
        return 0.0

    extra_miles = miles - schedule.free_distance_miles
    increments = math.ceil(extra_miles / schedule.increment_miles) if schedule.increment_miles > 0 else 0
    return schedule.base_distance_fee + increments * schedule.additional_fee_per_increment


def apply_discount(subtotal: float, discount_type: Optional[str], discount_value: Optional[float]) -> float:
    """Apply a booking discount to the subtotal only (gratuity is unaffected)"""
    value = to_finite_number(discount_value)
    if value <= 0:
        return subtotal
    if discount_type == "percent":
        return max(0.0, subtotal - subtotal * value / 100)
    if discount_type == "amount":
        return max(0.0, subtotal - value)
    return subtotal


# ---------------------------------------------------------------------------
# Staffing
# ---------------------------------------------------------------------------


def find_matching_profile(
    profiles: list[StaffingProfile],
    event_type: str,
    guest_count: int,
    staffing_profile_id: Optional[str] = None,
) -> Optional[StaffingProfile]:
    """
    Explicit profile id wins; otherwise match by event type and guest range,
    preferring an exact event type and then the narrowest range.
    """
    if staffing_profile_id:
        for profile in profiles:
            if profile.id == staffing_profile_id:
                return profile
        # Profile was deleted - fall through to auto-match

    candidates = [
        p
        for p in profiles
        if p.event_type in (event_type, "any") and p.min_guests <= guest_count <= p.max_guests
    ]
    if not candidates:
        return None

    candidates.sort(key=lambda p: (0 if p.event_type == event_type else 1, p.max_guests - p.min_guests))
    return candidates[0]


def _slot_pay(role: str, rules: RulesConfiguration) -> StaffingSlot:
    if role == "assistant":
        return StaffingSlot(
            role=role,
            base_pay_percent=rules.private_labor.assistant_base_percent,
            cap_percent=rules.private_labor.assistant_cap_percent,
        )
    if role == "buffet":
        return StaffingSlot(
            role=role,
            base_pay_percent=rules.buffet_labor.chef_base_percent,
            cap_percent=rules.buffet_labor.chef_cap_percent,
        )
    if role == "lead":
        return StaffingSlot(
            role=role,
            base_pay_percent=rules.private_labor.lead_chef_base_percent,
            cap_percent=rules.private_labor.lead_chef_cap_percent,
        )
    return StaffingSlot(
        role=role,
        base_pay_percent=rules.private_labor.full_chef_base_percent,
        cap_percent=rules.private_labor.full_chef_cap_percent,
    )


def determine_staffing(
    guest_count: int,
    event_type: str,
    slot: str,
    rules: RulesConfiguration,
    staffing_profile_id: Optional[str] = None,
) -> StaffingPlan:
    profile = find_matching_profile(rules.staffing.profiles, event_type, guest_count, staffing_profile_id)
    if profile:
        staff = [_slot_pay(role, rules) for role in profile.roles]
        return StaffingPlan(
            chef_roles=[s.role for s in staff if s.role != "assistant"],
            assistant_needed="assistant" in profile.roles,
            total_staff_count=len(staff),
            staff=staff,
            matched_profile_id=profile.id,
            matched_profile_name=profile.name,
        )

    if slot == "secondary":
        max_per_chef = max(1, rules.staffing.max_guests_per_chef_secondary)
        chefs_needed = math.ceil(guest_count / max_per_chef)
        staff = [_slot_pay("buffet", rules) for _ in range(chefs_needed)]
        return StaffingPlan(
            chef_roles=["buffet"] * chefs_needed,
            assistant_needed=False,
            total_staff_count=len(staff),
            staff=staff,
        )

    # Primary: a lead chef always, full chefs for each further block of guests
    max_per_chef = max(1, rules.staffing.max_guests_per_chef_primary)
    chef_roles = ["lead"]
    if guest_count > max_per_chef:
        chef_roles += ["full"] * math.ceil((guest_count - max_per_chef) / max_per_chef)

    staff = [_slot_pay(role, rules) for role in chef_roles]
    if rules.staffing.assistant_required:
        staff.append(_slot_pay("assistant", rules))

    return StaffingPlan(
        chef_roles=chef_roles,
        assistant_needed=rules.staffing.assistant_required,
        total_staff_count=len(staff),
        staff=staff,
    )


# ---------------------------------------------------------------------------
# Labor
# ---------------------------------------------------------------------------


def _find_override(overrides: list[StaffPayOverride], role: str) -> Optional[StaffPayOverride]:
    return next((o for o in overrides if o.role == role), None)


def calculate_labor(
    subtotal: float,
    gratuity: float,
    slot: str,
    plan: StaffingPlan,
    rules: RulesConfiguration,
    overrides: Optional[list[StaffPayOverride]] = None,
) -> list[LaborCompensation]:
    """
    Base pay is a percent of subtotal; the gratuity pool is split equally for
    buffet service and by the configured chef/assistant split otherwise. Caps
    are a percent of subtotal + gratuity and any excess returns to profit.
    """
    overrides = overrides or []
    total_revenue = subtotal + gratuity
    chef_count = len(plan.chef_roles)
    compensation = []

    for member in plan.staff:
        override = _find_override(overrides, member.role)
        base_pay_percent = override.base_pay_percent if override else member.base_pay_percent
        cap_percent = override.cap_percent if override else member.cap_percent
        cap_amount = percent_of(total_revenue, cap_percent) if cap_percent and cap_percent > 0 else None

        if override:
            gratuity_share = percent_of(gratuity, override.gratuity_split_percent)
        elif slot == "secondary":
            gratuity_share = gratuity / len(plan.staff)
        elif member.role == "assistant":
            gratuity_share = percent_of(gratuity, rules.private_labor.assistant_gratuity_split_percent)
        else:
            gratuity_share = percent_of(gratuity, rules.private_labor.chef_gratuity_split_percent) / max(1, chef_count)

        base_pay = percent_of(subtotal, base_pay_percent)
        total_calculated = base_pay + gratuity_share
        was_capped = cap_amount is not None and total_calculated > cap_amount
        final_pay = cap_amount if was_capped else total_calculated

        compensation.append(
            LaborCompensation(
                role=member.role,
                base_pay=round_money(base_pay),
                gratuity_share=round_money(gratuity_share),
                total_calculated=round_money(total_calculated),
                cap_percent=cap_percent,
                cap_amount=round_money(cap_amount) if cap_amount is not None else None,
                final_pay=round_money(final_pay),
                was_capped=was_capped,
                excess_to_profit=round_money(total_calculated - final_pay) if was_capped else 0.0,
            )
        )

    return compensation


# ---------------------------------------------------------------------------
# Event financials
# ---------------------------------------------------------------------------


def calculate_event_financials(event_input: EventFinancialInput, rules: RulesConfiguration) -> EventFinancials:
    """Compute the complete financial breakdown for one event"""
    adults = int(to_finite_number(event_input.adults))
    children = int(to_finite_number(event_input.children))
    guest_count = adults + children

    slot = resolve_pricing_slot(event_input, rules)
    base_price = base_price_for_slot(slot, rules)
    child_price = child_price_for(base_price, rules)
    premium_add_on = clamp_premium_add_on(event_input.premium_add_on, rules)

    override = event_input.subtotal_override
    if override is not None and math.isfinite(override) and override >= 0:
        subtotal = round_money(override)
    else:
        subtotal = round_money(adults * base_price + children * child_price + guest_count * premium_add_on)

    # Gratuity is a tip pool on service revenue: never charged on the distance fee
    gratuity_percent = rules.pricing.default_gratuity_percent
    gratuity = round_money(percent_of(subtotal, gratuity_percent))
    distance_fee = round_money(compute_distance_fee(event_input.distance_miles, rules))
    total_charged = round_money(subtotal + gratuity + distance_fee)

    # Costs
    food_override = event_input.food_cost_override
    if food_override is not None and math.isfinite(food_override) and food_override >= 0:
        food_cost = food_override
    else:
        food_cost_rate = (
            rules.costs.primary_food_cost_percent if slot == "primary" else rules.costs.secondary_food_cost_percent
        )
        food_cost = percent_of(subtotal, food_cost_rate)
    food_cost_percent = food_cost / subtotal * 100 if subtotal > 0 else 0.0
    supplies_cost = percent_of(subtotal, rules.costs.supplies_cost_percent)
    transportation_cost = rules.costs.transportation_stipend
    total_costs = food_cost + supplies_cost + transportation_cost

    # Labor
    plan = determine_staffing(guest_count, event_input.event_type, slot, rules, event_input.staffing_profile_id)
    labor = calculate_labor(subtotal, gratuity, slot, plan, rules, event_input.staff_pay_overrides)
    total_labor_paid = sum(c.final_pay for c in labor)
    total_excess = sum(c.excess_to_profit for c in labor)
    total_revenue = subtotal + gratuity
    labor_percent = total_labor_paid / total_revenue * 100 if total_revenue > 0 else 0.0

    # Profit
    distribution = rules.profit_distribution
    gross_profit = total_revenue - total_costs - total_labor_paid
    retained_amount = percent_of(gross_profit, distribution.business_retained_percent)
    distribution_amount = percent_of(gross_profit, distribution.owner_distribution_percent)
    owner_distributions = [
        OwnerDistribution(
            owner_id=owner.id,
            owner_name=owner.name,
            amount=round_money(percent_of(distribution_amount, owner.equity_percent)),
        )
        for owner in distribution.owners
    ]

    warnings = []
    limits = rules.safety_limits
    if limits.warn_when_exceeded:
        if labor_percent > limits.max_total_labor_percent:
            warnings.append(
                f"Labor cost ({labor_percent:.1f}%) exceeds maximum "
                f"({limits.max_total_labor_percent:g}%) of total revenue"
            )
        if food_cost_percent > limits.max_food_cost_percent:
            warnings.append(
                f"Food cost ({food_cost_percent:.1f}%) exceeds maximum ({limits.max_food_cost_percent:g}%)"
            )

    return EventFinancials(
        pricing_slot=slot,
        guest_count=guest_count,
        adult_count=adults,
        child_count=children,
        base_price=base_price,
        child_price=round_money(child_price),
        premium_add_on=premium_add_on,
        subtotal=subtotal,
        gratuity=gratuity,
        gratuity_percent=gratuity_percent,
        distance_fee=distance_fee,
        total_charged=total_charged,
        food_cost=round_money(food_cost),
        food_cost_percent=round(food_cost_percent, 2),
        supplies_cost=round_money(supplies_cost),
        transportation_cost=round_money(transportation_cost),
        total_costs=round_money(total_costs),
        staffing_plan=plan,
        labor_compensation=labor,
        total_labor_paid=round_money(total_labor_paid),
        total_excess_to_profit=round_money(total_excess),
        labor_percent_of_revenue=round(labor_percent, 2),
        gross_profit=round_money(gross_profit),
        retained_amount=round_money(retained_amount),
        retained_percent=distribution.business_retained_percent,
        distribution_amount=round_money(distribution_amount),
        distribution_percent=distribution.owner_distribution_percent,
        owner_distributions=owner_distributions,
        warnings=warnings,
    )


def build_financial_snapshot(financials: EventFinancials, captured_at: datetime) -> FinancialSnapshot:
    """Lock the rates and totals used for a booking; the timestamp comes from the caller"""
    return FinancialSnapshot(
        pricing_slot=financials.pricing_slot,
        adult_base_price=financials.base_price,
        child_base_price=financials.child_price,
        gratuity_percent=financials.gratuity_percent,
        subtotal=financials.subtotal,
        gratuity=financials.gratuity,
        distance_fee=financials.distance_fee,
        total_charged=financials.total_charged,
        captured_at=captured_at,
    )
