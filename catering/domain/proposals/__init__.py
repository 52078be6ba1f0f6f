from .router import router
from .schemas import ProposalSnapshot
from .service import ProposalService

__all__ = ["router", "ProposalService", "ProposalSnapshot"]
