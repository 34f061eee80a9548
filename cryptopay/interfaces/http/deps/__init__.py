"""Reusable FastAPI dependencies."""

from .container import get_container
from .database import get_db_session
from .services import (
    get_order_service,
    get_payment_service,
    get_reconciliation_service,
    get_sweeper,
)

__all__ = [
    "get_container",
    "get_db_session",
    "get_order_service",
    "get_payment_service",
    "get_reconciliation_service",
    "get_sweeper",
]
