from datetime import datetime

import pytest

from catering.domain.pricing.engine import (
    apply_discount,
    build_financial_snapshot,
    calculate_event_financials,
    clamp_premium_add_on,
    compute_distance_fee,
    determine_staffing,
    find_matching_profile,
)
from catering.domain.pricing.schemas import EventFinancialInput, StaffPayOverride
from catering.domain.rules.schemas import (
    DEFAULT_RULES,
    DistanceRules,
    PricingRules,
    PrivateLaborRules,
    RulesConfiguration,
    StaffingProfile,
    StaffingRules,
)
from catering.shared.money import round_money


def test_private_dinner_totals():
    rules = RulesConfiguration(pricing=PricingRules(primary_base_price=70, default_gratuity_percent=18))
    result = calculate_event_financials(
        EventFinancialInput(adults=15, event_type="private-dinner", pricing_slot="primary"), rules
    )

    assert result.subtotal == 1050
    assert result.gratuity == 189
    assert result.distance_fee == 0
    assert result.total_charged == 1239


def test_gratuity_excludes_distance_fee():
    rules = RulesConfiguration(distance=DistanceRules(additional_fee_per_increment=0))
    result = calculate_event_financials(
        EventFinancialInput(adults=10, distance_miles=25, subtotal_override=1000), rules
    )

    assert result.subtotal == 1000
    assert result.distance_fee == 50
    assert result.gratuity == 200
    assert result.total_charged == 1250


def test_same_input_same_output():
    event = EventFinancialInput(adults=12, children=3, distance_miles=31, premium_add_on=8)
    assert calculate_event_financials(event, DEFAULT_RULES) == calculate_event_financials(event, DEFAULT_RULES)


@pytest.mark.parametrize(
    "miles, fee",
    [(0, 0), (20, 0), (21, 75), (25, 75), (26, 100), (float("nan"), 0)],
)
def test_distance_fee(miles, fee):
    assert compute_distance_fee(miles, DEFAULT_RULES) == fee


def test_unknown_slot_falls_back_to_default():
    result = calculate_event_financials(EventFinancialInput(adults=1, event_type="vip"), DEFAULT_RULES)
    assert result.pricing_slot == "secondary"
    assert result.base_price == 32

    result = calculate_event_financials(EventFinancialInput(adults=1, pricing_slot="vip"), DEFAULT_RULES)
    assert result.pricing_slot == "secondary"


def test_event_type_implies_slot():
    buffet = calculate_event_financials(EventFinancialInput(adults=1, event_type="buffet"), DEFAULT_RULES)
    dinner = calculate_event_financials(EventFinancialInput(adults=1, event_type="private-dinner"), DEFAULT_RULES)
    assert buffet.pricing_slot == "secondary"
    assert dinner.pricing_slot == "primary"


def test_children_priced_at_discount():
    result = calculate_event_financials(
        EventFinancialInput(adults=2, children=2, pricing_slot="primary"), DEFAULT_RULES
    )
    assert result.child_price == 30
    assert result.subtotal == 180
    assert result.guest_count == 4


def test_premium_add_on_applies_per_guest():
    result = calculate_event_financials(
        EventFinancialInput(adults=10, pricing_slot="primary", premium_add_on=10), DEFAULT_RULES
    )
    assert result.premium_add_on == 10
    assert result.subtotal == 700


@pytest.mark.parametrize("selected, clamped", [(50, 20), (1, 5), (12, 12), (0, 0), (-3, 0)])
def test_clamp_premium_add_on(selected, clamped):
    assert clamp_premium_add_on(selected, DEFAULT_RULES) == clamped


def test_zero_guests():
    result = calculate_event_financials(EventFinancialInput(), DEFAULT_RULES)

    assert result.subtotal == 0
    assert result.gratuity == 0
    assert result.total_charged == 0
    assert result.food_cost_percent == 0
    assert result.labor_percent_of_revenue == 0
    assert result.gross_profit == -DEFAULT_RULES.costs.transportation_stipend


def test_primary_staffing_adds_full_chef_per_block():
    plan = determine_staffing(16, "private-dinner", "primary", DEFAULT_RULES)
    assert plan.chef_roles == ["lead", "full"]
    assert plan.assistant_needed is True
    assert plan.total_staff_count == 3

    plan = determine_staffing(15, "private-dinner", "primary", DEFAULT_RULES)
    assert plan.chef_roles == ["lead"]


def test_secondary_staffing_is_buffet_chefs():
    plan = determine_staffing(30, "buffet", "secondary", DEFAULT_RULES)
    assert plan.chef_roles == ["buffet", "buffet"]
    assert plan.assistant_needed is False
    assert plan.total_staff_count == 2


def test_primary_labor_split():
    result = calculate_event_financials(
        EventFinancialInput(adults=15, pricing_slot="primary"), DEFAULT_RULES
    )
    lead, assistant = result.labor_compensation

    assert (result.subtotal, result.gratuity) == (900, 180)
    assert lead.role == "lead"
    assert lead.base_pay == 135
    assert lead.gratuity_share == 99
    assert lead.final_pay == 234
    assert assistant.base_pay == 72
    assert assistant.gratuity_share == 81
    assert assistant.final_pay == 153
    assert result.total_labor_paid == 387


def test_buffet_gratuity_split_equally():
    result = calculate_event_financials(
        EventFinancialInput(adults=30, event_type="buffet"), DEFAULT_RULES
    )
    assert result.subtotal == 960
    assert [c.gratuity_share for c in result.labor_compensation] == [96, 96]
    assert [c.final_pay for c in result.labor_compensation] == [211.2, 211.2]


def test_capped_pay_returns_excess_to_profit():
    rules = RulesConfiguration(private_labor=PrivateLaborRules(lead_chef_cap_percent=10))
    result = calculate_event_financials(EventFinancialInput(adults=15, pricing_slot="primary"), rules)
    lead = result.labor_compensation[0]

    assert lead.was_capped is True
    assert lead.cap_amount == 108
    assert lead.final_pay == 108
    assert lead.excess_to_profit == 126
    assert result.total_excess_to_profit == 126


def test_staff_pay_override():
    result = calculate_event_financials(
        EventFinancialInput(
            adults=15,
            pricing_slot="primary",
            staff_pay_overrides=[StaffPayOverride(role="lead", base_pay_percent=20, gratuity_split_percent=50)],
        ),
        DEFAULT_RULES,
    )
    lead = result.labor_compensation[0]
    assert lead.base_pay == 180
    assert lead.gratuity_share == 90


def test_profit_distribution():
    result = calculate_event_financials(
        EventFinancialInput(adults=15, pricing_slot="primary"), DEFAULT_RULES
    )

    assert result.food_cost == 162
    assert result.supplies_cost == 63
    assert result.total_costs == 275
    assert result.gross_profit == 418
    assert result.retained_amount == 125.4
    assert result.distribution_amount == 292.6
    assert [o.amount for o in result.owner_distributions] == [117.04, 175.56]


def test_labor_warning():
    result = calculate_event_financials(
        EventFinancialInput(adults=15, pricing_slot="primary"), DEFAULT_RULES
    )
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Labor cost (35.8%)")


def test_profile_matching():
    profiles = [
        StaffingProfile(id="big", name="Big party", event_type="any", min_guests=0, max_guests=9999, roles=["buffet"]),
        StaffingProfile(
            id="dinner", name="Dinner", event_type="private-dinner", min_guests=10, max_guests=20, roles=["lead", "full"]
        ),
    ]

    assert find_matching_profile(profiles, "private-dinner", 15).id == "dinner"
    assert find_matching_profile(profiles, "buffet", 15).id == "big"
    assert find_matching_profile(profiles, "private-dinner", 15, "big").id == "big"
    assert find_matching_profile(profiles, "private-dinner", 15, "deleted").id == "dinner"
    assert find_matching_profile([], "buffet", 15) is None


def test_profile_drives_staffing_plan():
    rules = RulesConfiguration(
        staffing=StaffingRules(
            profiles=[
                StaffingProfile(id="duo", name="Duo", event_type="private-dinner", roles=["lead", "assistant"]),
            ]
        )
    )
    plan = determine_staffing(40, "private-dinner", "primary", rules)

    assert plan.matched_profile_id == "duo"
    assert plan.chef_roles == ["lead"]
    assert plan.assistant_needed is True
    assert plan.total_staff_count == 2


@pytest.mark.parametrize(
    "discount_type, value, expected",
    [
        ("percent", 10, 810),
        ("amount", 100, 800),
        ("amount", 1000, 0),
        (None, 10, 900),
        ("percent", None, 900),
    ],
)
def test_apply_discount(discount_type, value, expected):
    assert apply_discount(900, discount_type, value) == expected


def test_snapshot_uses_given_timestamp():
    captured_at = datetime(2026, 3, 1, 12, 30)
    financials = calculate_event_financials(
        EventFinancialInput(adults=15, pricing_slot="primary"), DEFAULT_RULES
    )
    snapshot = build_financial_snapshot(financials, captured_at)

    assert snapshot.captured_at == captured_at
    assert snapshot.adult_base_price == 60
    assert snapshot.child_base_price == 30
    assert snapshot.total_charged == 1080


@pytest.mark.parametrize("value, rounded", [(0.125, 0.13), (2.675, 2.68), (-1.005, -1.01), (float("inf"), 0)])
def test_round_money(value, rounded):
    assert round_money(value) == rounded


def test_quote_endpoint(client):
    response = client.post("/pricing/quote", json={"adults": 15, "event_type": "private-dinner"})

    assert response.status_code == 200
    body = response.json()
    assert body["subtotal"] == 900
    assert body["total_charged"] == 1080
    assert body["staffing_plan"]["chef_roles"] == ["lead"]
