"""Read-side order service."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from cryptopay.infrastructure.database.repositories.order_repository import SqlOrderRepository

from .exceptions import NotFoundError
from .models import Order
from .repository import OrderRepository


@dataclass(slots=True)
class OrderService:
    repository: OrderRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "OrderService":
        return cls(SqlOrderRepository(session))

    async def get_order(self, order_id: str) -> Order:
        order = await self.repository.get(order_id)
        if order is None:
            raise NotFoundError(order_id)
        return order
