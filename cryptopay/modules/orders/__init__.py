"""Order payment state and the storage gateway contract."""

from .exceptions import ConflictError, NotFoundError, OrderError
from .models import Order, PaymentStatus
from .repository import OrderRepository

__all__ = [
    "ConflictError",
    "NotFoundError",
    "Order",
    "OrderError",
    "OrderRepository",
    "PaymentStatus",
]
