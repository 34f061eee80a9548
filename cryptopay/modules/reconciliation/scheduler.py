"""In-process periodic trigger for the payment sweep."""

from __future__ import annotations

import asyncio
import logging

from .sweeper import PaymentSweeper

logger = logging.getLogger(__name__)


class SweepScheduler:
    def __init__(self, sweeper: PaymentSweeper, interval_seconds: int) -> None:
        self._sweeper = sweeper
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="payment-sweep")
        logger.info("Payment sweep scheduled every %s seconds", self.interval_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await task

    async def _run(self) -> None:
        try:
            while True:
                try:
                    await self._sweeper.run_once()
                except Exception as exc:  # pylint: disable=broad-except
                    logger.error("Payment sweep failed: %s", exc, exc_info=True)
                await asyncio.sleep(self.interval_seconds)
        except asyncio.CancelledError:
            logger.debug("Payment sweep task cancelled")
