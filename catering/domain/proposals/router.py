"""Proposal router - authenticated creation, public review and acceptance"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from .schemas import (
    ProposalAcceptRequest,
    ProposalAcceptResponse,
    ProposalCreateRequest,
    ProposalCreateResponse,
    ProposalResponse,
)
from .service import ProposalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["Proposals"])


def get_proposal_service(db: Session = Depends(get_db)) -> ProposalService:
    """Dependency injection for ProposalService"""
    return ProposalService(db)


# ============================================================
# PROVIDER ENDPOINTS
# ============================================================


@router.post("/create", response_model=ProposalCreateResponse)
async def create_proposal(
    data: ProposalCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    """Issue a shareable proposal link for a booking"""
    return service.create_proposal(data)


# ============================================================
# CLIENT ENDPOINTS (PUBLIC)
# ============================================================


@router.post("/accept", response_model=ProposalAcceptResponse)
async def accept_proposal(
    data: ProposalAcceptRequest,
    service: ProposalService = Depends(get_proposal_service),
):
    """Client accepts a proposal; repeat calls report alreadyAccepted"""
    logger.info("👀 Client accepting proposal with token")
    return service.accept_proposal(data.token)


@router.get("/{token}", response_model=ProposalResponse)
async def get_proposal(
    token: str,
    service: ProposalService = Depends(get_proposal_service),
):
    """Client views a proposal via its link"""
    return service.get_proposal(token)
