"""Proposal repository - Database operations for proposal tokens"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ProposalToken


class ProposalRepository:
    """Repository for proposal token database operations"""

    @staticmethod
    def get_by_token(db: Session, token: str) -> Optional[ProposalToken]:
        return db.query(ProposalToken).filter(ProposalToken.token == token).first()

    @staticmethod
    def create_token(
        db: Session,
        token: str,
        booking_id: str,
        snapshot: dict,
        expires_at: Optional[datetime] = None,
    ) -> ProposalToken:
        proposal = ProposalToken(
            token=token,
            booking_id=booking_id,
            status="pending",
            snapshot=snapshot,
            expires_at=expires_at,
        )
        db.add(proposal)
        db.commit()
        db.refresh(proposal)
        return proposal

    @staticmethod
    def mark_accepted(db: Session, token: str, accepted_at: datetime) -> bool:
        """
        Move a pending token to accepted in a single conditional UPDATE.

        Returns False when the token was not pending, so at most one caller
        ever sees True for a given token.
        """
        updated = (
            db.query(ProposalToken)
            .filter(ProposalToken.token == token, ProposalToken.status == "pending")
            .update({"status": "accepted", "accepted_at": accepted_at}, synchronize_session=False)
        )
        db.commit()
        return updated == 1
