"""Repository protocol for order storage (the order gateway)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Protocol, Sequence

from .models import Order, PaymentStatus


class OrderRepository(Protocol):
    async def get(self, order_id: str) -> Order | None:
        ...

    async def update(
        self,
        order_id: str,
        patch: Mapping[str, Any],
        *,
        if_status: PaymentStatus | None = None,
    ) -> Order:
        """Apply ``patch``; raise ``ConflictError`` when ``if_status`` no longer holds."""
        ...

    async def list_pending_bound(
        self,
        *,
        quoted_after: datetime | None = None,
        limit: int | None = None,
    ) -> Sequence[Order]:
        ...

    async def create(self, *, fiat_amount: Decimal, fiat_currency: str = "EUR") -> Order:
        ...
