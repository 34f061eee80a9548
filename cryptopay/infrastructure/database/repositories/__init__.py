"""SQLAlchemy-backed repository implementations."""

from .order_repository import SqlOrderRepository

__all__ = [
    "SqlOrderRepository",
]
