"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cryptopay.core.config import Settings, get_settings
from cryptopay.infrastructure.database import build_engine, init_db
from cryptopay.infrastructure.http import build_async_client
from cryptopay.modules.ledger import LedgerScanner
from cryptopay.modules.rates import RateOracle
from cryptopay.modules.reconciliation import PaymentSweeper, SweepScheduler


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    http_client: httpx.AsyncClient
    rate_oracle: RateOracle
    ledger_scanner: LedgerScanner
    sweeper: PaymentSweeper
    scheduler: SweepScheduler

    async def init_infrastructure(self) -> None:
        """Ensure the schema exists (development convenience; migrations preferred)."""
        await init_db(self.engine)

    async def aclose(self) -> None:
        await self.scheduler.stop()
        await self.http_client.aclose()
        await self.engine.dispose()


def build_container(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ApplicationContainer:
    settings = settings or get_settings()
    engine = engine or build_engine(settings)
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    client = http_client or build_async_client(settings.http)

    oracle = RateOracle.from_settings(settings.rates, client)
    scanner = LedgerScanner.from_settings(settings.explorers, client)
    sweeper = PaymentSweeper(session_factory, scanner, settings.reconciliation)
    return ApplicationContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        http_client=client,
        rate_oracle=oracle,
        ledger_scanner=scanner,
        sweeper=sweeper,
        scheduler=SweepScheduler(sweeper, settings.reconciliation.sweep_interval_seconds),
    )


__all__ = ["ApplicationContainer", "build_container"]
