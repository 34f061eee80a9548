"""Payment reconciliation: on-demand checks and the periodic sweep."""

from .models import PaymentCheck, SweepSummary
from .scheduler import SweepScheduler
from .service import ReconciliationService
from .sweeper import PaymentSweeper

__all__ = [
    "PaymentCheck",
    "PaymentSweeper",
    "ReconciliationService",
    "SweepScheduler",
    "SweepSummary",
]
