"""Rules invariants and loading helpers

Saved configurations must satisfy every invariant checked here; stored JSON is
merged over defaults so missing or corrupt fields never reach the engine.
"""

import logging
import math
from typing import Any, Optional

from pydantic import ValidationError

from .schemas import DEFAULT_RULES, RulesConfiguration

logger = logging.getLogger(__name__)


def _percent_fields(rules: RulesConfiguration) -> list[tuple[str, float]]:
    fields = []
    for section_name, section in rules:
        for field_name, value in section:
            if field_name.endswith("_percent") and value is not None:
                fields.append((f"{section_name}.{field_name}", value))
    for owner in rules.profit_distribution.owners:
        fields.append((f"profit_distribution.owners.{owner.id}.equity_percent", owner.equity_percent))
    return fields


def _must_total_100(label: str, total: float) -> Optional[str]:
    # Half-up rounding so 100.5 reads as 101
    if math.floor(total + 0.5) != 100:
        return f"{label} must total 100%. Current: {total:g}%"
    return None


def validate_rules(rules: RulesConfiguration) -> list[str]:
    """Return the list of invariant violations; empty means the rules may be saved."""
    issues: list[str] = []

    for path, value in _percent_fields(rules):
        if value < 0 or value > 100:
            issues.append(f"{path} must be between 0 and 100. Current: {value:g}")

    labor = rules.private_labor
    split_checks = [
        (
            "Gratuity split (chef + assistant)",
            labor.chef_gratuity_split_percent + labor.assistant_gratuity_split_percent,
        ),
        (
            "Ownership split",
            sum(owner.equity_percent for owner in rules.profit_distribution.owners),
        ),
        (
            "Owner distribution + business retained",
            rules.profit_distribution.owner_distribution_percent
            + rules.profit_distribution.business_retained_percent,
        ),
    ]
    for label, total in split_checks:
        issue = _must_total_100(label, total)
        if issue:
            issues.append(issue)

    if not rules.revenue_treatment.gratuity_is_tip_pool:
        issues.append("Gratuity must remain Tip Pool (not business revenue).")

    if rules.pricing.premium_add_on_min_per_guest > rules.pricing.premium_add_on_max_per_guest:
        issues.append("Premium add-on min cannot be greater than max.")

    if rules.distance.increment_miles <= 0:
        issues.append("Distance increment must be greater than 0 miles.")

    return issues


def _strip_invalid(values: Any) -> dict:
    """Drop null and non-finite values so defaults are not overridden by bad data"""
    if not isinstance(values, dict):
        return {}
    clean = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, float) and not math.isfinite(value):
            continue
        clean[key] = value
    return clean


def merge_rules(stored: Optional[dict]) -> RulesConfiguration:
    """
    Merge a stored rules document over the defaults, one section deep.

    A section that still fails validation after merging falls back to its
    default rather than failing the whole load.
    """
    if not stored:
        return DEFAULT_RULES.model_copy(deep=True)

    defaults = DEFAULT_RULES.model_dump()
    merged: dict[str, Any] = {}
    for section_name, section_defaults in defaults.items():
        candidate = {**section_defaults, **_strip_invalid(stored.get(section_name))}
        if section_name == "profit_distribution" and not candidate.get("owners"):
            candidate["owners"] = section_defaults["owners"]
        if section_name == "staffing" and not isinstance(candidate.get("profiles"), list):
            candidate["profiles"] = []
        merged[section_name] = candidate

    try:
        return RulesConfiguration.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"Stored rules failed validation, repairing sections: {e.error_count()} errors")

    repaired = {}
    for section_name, candidate in merged.items():
        field_type = RulesConfiguration.model_fields[section_name].annotation
        try:
            repaired[section_name] = field_type.model_validate(candidate)
        except ValidationError:
            logger.warning(f"Rules section '{section_name}' is corrupt; using defaults")
            repaired[section_name] = getattr(DEFAULT_RULES, section_name).model_copy(deep=True)
    return RulesConfiguration(**repaired)
