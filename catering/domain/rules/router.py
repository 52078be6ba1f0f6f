"""Rules router - FastAPI endpoints for the business rules configuration"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from .schemas import RulesConfiguration, RulesValidationResult
from .service import RulesService

router = APIRouter(prefix="/rules", tags=["Rules"])


def get_rules_service(db: Session = Depends(get_db)) -> RulesService:
    """Dependency injection for RulesService"""
    return RulesService(db)


@router.get("", response_model=RulesConfiguration)
async def get_rules(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: RulesService = Depends(get_rules_service),
):
    """Get the current rules configuration"""
    return service.load_rules()


@router.put("", response_model=RulesConfiguration)
async def save_rules(
    rules: RulesConfiguration,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: RulesService = Depends(get_rules_service),
):
    """Replace the rules configuration (rejected with 422 on invariant violations)"""
    return service.save_rules(rules)


@router.post("/validate", response_model=RulesValidationResult)
async def validate_rules(
    rules: RulesConfiguration,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: RulesService = Depends(get_rules_service),
):
    """Check a configuration without saving it"""
    return service.validate(rules)
