"""Reconciliation service: the only writer of the pending to confirmed transition."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from cryptopay.infrastructure.database.repositories.order_repository import SqlOrderRepository
from cryptopay.modules.common import ExternalSourceError, utcnow
from cryptopay.modules.ledger import LedgerScanner
from cryptopay.modules.orders import ConflictError, NotFoundError, Order, OrderRepository, PaymentStatus

from .models import PaymentCheck

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationService:
    repository: OrderRepository
    scanner: LedgerScanner

    @classmethod
    def with_session(cls, session: AsyncSession, scanner: LedgerScanner) -> "ReconciliationService":
        return cls(SqlOrderRepository(session), scanner)

    async def check_payment(self, order_id: str) -> PaymentCheck:
        order = await self.repository.get(order_id)
        if order is None:
            raise NotFoundError(order_id)
        return await self.reconcile(order)

    async def reconcile(self, order: Order) -> PaymentCheck:
        if order.is_confirmed:
            return self._confirmed(order)
        if not order.has_binding:
            logger.info("Skipping order %s - no payment details", order.id)
            return PaymentCheck(order_id=order.id, paid=False, status=order.payment_status)

        logger.info(
            "Checking %s payment for order %s: %s to %s",
            order.payment_currency.value,
            order.id,
            order.expected_amount,
            order.payment_address,
        )
        try:
            paid = await self.scanner.is_paid(order.payment_address, order.payment_currency, order.expected_amount)
        except ExternalSourceError as exc:
            logger.warning("Payment check deferred for order %s: %s", order.id, exc)
            paid = False

        if not paid:
            return PaymentCheck(order_id=order.id, paid=False, status=PaymentStatus.PENDING)
        return await self._confirm(order)

    async def _confirm(self, order: Order) -> PaymentCheck:
        try:
            updated = await self.repository.update(
                order.id,
                {"payment_status": PaymentStatus.CONFIRMED, "payment_confirmed_at": utcnow()},
                if_status=PaymentStatus.PENDING,
            )
        except ConflictError:
            current = await self.repository.get(order.id)
            if current is None or not current.is_confirmed:
                raise
            logger.info("Order %s was already confirmed by a concurrent check", order.id)
            return self._confirmed(current)

        logger.info("Payment confirmed for order %s", order.id)
        return PaymentCheck(
            order_id=updated.id,
            paid=True,
            status=updated.payment_status,
            confirmed_at=updated.payment_confirmed_at,
            newly_confirmed=True,
        )

    @staticmethod
    def _confirmed(order: Order) -> PaymentCheck:
        return PaymentCheck(
            order_id=order.id,
            paid=True,
            status=PaymentStatus.CONFIRMED,
            confirmed_at=order.payment_confirmed_at,
        )
