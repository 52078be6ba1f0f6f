"""Rules repository - Database operations for the rules configuration"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import MoneyRulesRecord

RULES_ROW_ID = "default"


class RulesRepository:
    """Repository for the single-row rules table"""

    @staticmethod
    def get_rules_document(db: Session) -> Optional[dict]:
        """Get the stored rules JSON, or None if never saved"""
        record = db.query(MoneyRulesRecord).filter(MoneyRulesRecord.id == RULES_ROW_ID).first()
        if not record or not record.rules:
            return None
        return record.rules

    @staticmethod
    def save_rules_document(db: Session, document: dict) -> MoneyRulesRecord:
        """Replace the stored rules JSON in one transaction"""
        record = db.query(MoneyRulesRecord).filter(MoneyRulesRecord.id == RULES_ROW_ID).first()
        if record:
            record.rules = document
        else:
            record = MoneyRulesRecord(id=RULES_ROW_ID, rules=document)
            db.add(record)
        db.commit()
        db.refresh(record)
        return record
