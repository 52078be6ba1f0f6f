"""Rules service - Loading and validated saving of the rules configuration"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from .repository import RulesRepository
from .schemas import RulesConfiguration, RulesValidationResult
from .validation import merge_rules, validate_rules

logger = logging.getLogger(__name__)


class RulesValidationError(HTTPException):
    """Raised when a configuration violates a standing invariant"""

    def __init__(self, issues: list[str]) -> None:
        super().__init__(
            status_code=422,
            detail={"message": "Rules configuration is invalid", "issues": issues},
        )
        self.issues = issues


class RulesService:
    """Service layer for the rules configuration"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RulesRepository()

    def load_rules(self) -> RulesConfiguration:
        """Read the current configuration, merged over defaults"""
        return merge_rules(self.repo.get_rules_document(self.db))

    def validate(self, rules: RulesConfiguration) -> RulesValidationResult:
        issues = validate_rules(rules)
        return RulesValidationResult(ok=not issues, issues=issues)

    def save_rules(self, rules: RulesConfiguration) -> RulesConfiguration:
        """
        Persist a full configuration.

        Raises:
            RulesValidationError: If any invariant is violated; nothing is written.
        """
        issues = validate_rules(rules)
        if issues:
            logger.warning(f"Rejected rules save with {len(issues)} issue(s): {issues}")
            raise RulesValidationError(issues)

        self.repo.save_rules_document(self.db, rules.model_dump(mode="json"))
        logger.info("Rules configuration saved")
        return rules
