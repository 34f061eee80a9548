"""Ledger scanner: dispatches payment checks to the explorers of each currency."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Sequence

import httpx

from cryptopay.core.config import ExplorerSettings
from cryptopay.modules.common import CurrencyKind, ExternalSourceError, to_minor_units

from .explorers import BlockchairExplorer, EsploraExplorer, Explorer, ExplorerError
from .models import AddressBalanceSnapshot

logger = logging.getLogger(__name__)


class LedgerScanner:
    def __init__(self, explorers: Mapping[CurrencyKind, Sequence[Explorer]]) -> None:
        self._explorers = {currency: list(chain) for currency, chain in explorers.items()}

    @classmethod
    def from_settings(cls, settings: ExplorerSettings, client: httpx.AsyncClient) -> "LedgerScanner":
        tolerance = settings.tolerance_minor_units
        return cls(
            {
                CurrencyKind.BITCOIN: [
                    EsploraExplorer(
                        client,
                        settings.blockstream_url,
                        name="blockstream",
                        currency=CurrencyKind.BITCOIN,
                        tolerance_minor=tolerance,
                    ),
                    EsploraExplorer(
                        client,
                        settings.mempool_url,
                        name="mempool",
                        currency=CurrencyKind.BITCOIN,
                        tolerance_minor=tolerance,
                    ),
                ],
                CurrencyKind.LITECOIN: [
                    BlockchairExplorer(
                        client,
                        settings.blockchair_url,
                        currency=CurrencyKind.LITECOIN,
                        tolerance_minor=tolerance,
                        api_key=settings.blockchair_api_key,
                    ),
                    EsploraExplorer(
                        client,
                        settings.litecoinspace_url,
                        name="litecoinspace",
                        currency=CurrencyKind.LITECOIN,
                        tolerance_minor=tolerance,
                    ),
                ],
            }
        )

    async def is_paid(self, address: str, currency: CurrencyKind, expected_amount: Decimal) -> bool:
        """Report whether ``expected_amount`` has arrived at ``address`` in confirmed transactions.

        Returns ``False`` for ordinary non-payment. Raises ``ExternalSourceError``
        only when no explorer for the currency produced an answer.
        """
        expected_minor = to_minor_units(expected_amount)
        if expected_minor <= 0:
            raise ValueError(f"expected amount must be positive, got {expected_amount}")

        for explorer in self._chain(currency):
            try:
                return await explorer.is_paid(address, expected_minor)
            except ExplorerError as exc:
                logger.warning("Explorer %s failed for %s %s: %s", explorer.name, currency.value, address, exc)
        raise ExternalSourceError(f"no {currency.value} explorer reachable for {address}")

    async def snapshot(self, address: str, currency: CurrencyKind) -> AddressBalanceSnapshot:
        for explorer in self._chain(currency):
            try:
                return await explorer.snapshot(address)
            except ExplorerError as exc:
                logger.warning("Explorer %s snapshot failed for %s: %s", explorer.name, address, exc)
        raise ExternalSourceError(f"no {currency.value} explorer reachable for {address}")

    def _chain(self, currency: CurrencyKind) -> Sequence[Explorer]:
        chain = self._explorers.get(CurrencyKind(currency))
        if not chain:
            raise ValueError(f"no explorer configured for {currency}")
        return chain
