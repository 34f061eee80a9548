"""Batch reconciliation over every pending bound order."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cryptopay.core.config import ReconciliationSettings
from cryptopay.infrastructure.database.repositories.order_repository import SqlOrderRepository
from cryptopay.modules.common import utcnow
from cryptopay.modules.ledger import LedgerScanner

from .models import SweepSummary
from .service import ReconciliationService

logger = logging.getLogger(__name__)


class PaymentSweeper:
    """Runs the reconciliation check for each pending order in its own session."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        scanner: LedgerScanner,
        settings: ReconciliationSettings,
    ) -> None:
        self._session_factory = session_factory
        self._scanner = scanner
        self._max_age = timedelta(hours=settings.sweep_max_age_hours)
        self._limit = settings.sweep_batch_limit

    async def run_once(self) -> SweepSummary:
        async with self._session_factory() as session:
            orders = await SqlOrderRepository(session).list_pending_bound(
                quoted_after=utcnow() - self._max_age,
                limit=self._limit,
            )
        logger.info("Found %d pending orders", len(orders))

        confirmed = 0
        failed = 0
        for order in orders:
            try:
                async with self._session_factory() as session:
                    service = ReconciliationService.with_session(session, self._scanner)
                    result = await service.reconcile(order)
                    await session.commit()
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Error checking order %s: %s", order.id, exc, exc_info=True)
                failed += 1
                continue
            if result.newly_confirmed:
                confirmed += 1

        logger.info(
            "Crypto monitor completed. Confirmed %d orders out of %d pending orders (%d failed).",
            confirmed,
            len(orders),
            failed,
        )
        return SweepSummary(total_checked=len(orders), confirmed_count=confirmed, failed_count=failed)
