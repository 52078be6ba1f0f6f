"""Pricing router - quote an event under the current rules"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from ..rules.service import RulesService
from .engine import calculate_event_financials
from .schemas import EventFinancialInput, EventFinancials

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/quote", response_model=EventFinancials)
async def quote_event(
    event_input: EventFinancialInput,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Compute the financial breakdown for an event without saving anything"""
    rules = RulesService(db).load_rules()
    return calculate_event_financials(event_input, rules)
