from .router import router
from .schemas import DEFAULT_RULES, RulesConfiguration
from .service import RulesService, RulesValidationError
from .validation import merge_rules, validate_rules

__all__ = [
    "router",
    "DEFAULT_RULES",
    "RulesConfiguration",
    "RulesService",
    "RulesValidationError",
    "merge_rules",
    "validate_rules",
]
