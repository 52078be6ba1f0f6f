from .engine import (
    apply_discount,
    build_financial_snapshot,
    calculate_event_financials,
    compute_distance_fee,
)
from .router import router
from .schemas import EventFinancialInput, EventFinancials, FinancialSnapshot

__all__ = [
    "router",
    "apply_discount",
    "build_financial_snapshot",
    "calculate_event_financials",
    "compute_distance_fee",
    "EventFinancialInput",
    "EventFinancials",
    "FinancialSnapshot",
]
