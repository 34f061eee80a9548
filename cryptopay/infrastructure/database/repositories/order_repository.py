"""SQLAlchemy implementation of the order gateway."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cryptopay.db.models import Order as OrderModel
from cryptopay.modules.common import CurrencyKind, utcnow
from cryptopay.modules.orders import ConflictError, NotFoundError, Order, PaymentStatus

_WRITABLE_FIELDS = frozenset(
    {
        "payment_currency",
        "payment_address",
        "expected_amount",
        "quoted_at",
        "payment_status",
        "payment_confirmed_at",
    }
)


class SqlOrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, fiat_amount: Decimal, fiat_currency: str = "EUR") -> Order:
        order = OrderModel(
            fiat_amount=fiat_amount,
            fiat_currency=fiat_currency,
            payment_status=PaymentStatus.PENDING.value,
        )
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return self._to_domain(order)

    async def get(self, order_id: str) -> Order | None:
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def update(
        self,
        order_id: str,
        patch: Mapping[str, Any],
        *,
        if_status: PaymentStatus | None = None,
    ) -> Order:
        unknown = set(patch) - _WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"fields not writable through the gateway: {sorted(unknown)}")

        values = {key: self._to_column(value) for key, value in patch.items()}
        values["updated_at"] = utcnow()
        stmt = update(OrderModel).where(OrderModel.id == order_id)
        if if_status is not None:
            stmt = stmt.where(OrderModel.payment_status == if_status.value)
        stmt = (
            stmt.values(**values)
            .execution_options(synchronize_session="fetch")
            .returning(OrderModel)
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        if model is not None:
            return self._to_domain(model)

        exists = await self.session.scalar(select(OrderModel.id).where(OrderModel.id == order_id))
        if exists is None:
            raise NotFoundError(order_id)
        raise ConflictError(f"order {order_id} is no longer {if_status.value if if_status else 'writable'}")

    async def list_pending_bound(
        self,
        *,
        quoted_after: datetime | None = None,
        limit: int | None = None,
    ) -> Sequence[Order]:
        stmt = select(OrderModel).where(
            OrderModel.payment_status == PaymentStatus.PENDING.value,
            OrderModel.payment_currency.in_([kind.value for kind in CurrencyKind]),
            OrderModel.payment_address.is_not(None),
            OrderModel.expected_amount.is_not(None),
        )
        if quoted_after is not None:
            stmt = stmt.where(OrderModel.quoted_at >= quoted_after)
        stmt = stmt.order_by(OrderModel.quoted_at)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    @staticmethod
    def _to_column(value: Any) -> Any:
        if isinstance(value, (PaymentStatus, CurrencyKind)):
            return value.value
        return value

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            fiat_amount=Decimal(model.fiat_amount),
            fiat_currency=model.fiat_currency,
            payment_status=PaymentStatus(model.payment_status),
            payment_currency=CurrencyKind(model.payment_currency) if model.payment_currency else None,
            payment_address=model.payment_address,
            expected_amount=Decimal(model.expected_amount) if model.expected_amount is not None else None,
            quoted_at=model.quoted_at,
            payment_confirmed_at=model.payment_confirmed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
