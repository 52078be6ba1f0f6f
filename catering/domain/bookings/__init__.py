from .router import router
from .schemas import BookingRecord
from .workflow import (
    apply_confirmation_payment_terms,
    apply_payment,
    apply_refund,
    normalize_booking_workflow_fields,
)

__all__ = [
    "router",
    "BookingRecord",
    "apply_confirmation_payment_terms",
    "apply_payment",
    "apply_refund",
    "normalize_booking_workflow_fields",
]
