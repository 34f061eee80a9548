"""Explorer backends.

Esplora (blockstream.info, mempool.space, litecoinspace.org) lists transactions
with per-output values and a confirmation flag. Blockchair only exposes
cumulative totals per address, so each backend applies its own matching rule
and they share nothing beyond ``is_paid`` / ``snapshot``.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Iterator, Protocol

import httpx

from cryptopay.infrastructure.http import fetch_json
from cryptopay.modules.common import CurrencyKind, ExternalSourceError

from .models import AddressBalanceSnapshot, covers_cumulative, matches_output

logger = logging.getLogger(__name__)

ESPLORA_CHAIN_PAGE_SIZE = 25


class ExplorerError(ExternalSourceError):
    """A single explorer could not be queried or returned an unexpected payload."""


class Explorer(Protocol):
    name: str

    async def is_paid(self, address: str, expected_minor: int) -> bool:
        ...

    async def snapshot(self, address: str) -> AddressBalanceSnapshot:
        ...


class EsploraExplorer:
    """Matches individual confirmed outputs against the expected amount."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        name: str,
        currency: CurrencyKind,
        tolerance_minor: int,
        max_pages: int = 4,
    ) -> None:
        self.name = name
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._currency = currency
        self._tolerance = tolerance_minor
        self._max_pages = max_pages

    async def is_paid(self, address: str, expected_minor: int) -> bool:
        async for tx in self._confirmed_transactions(address):
            for value in _outputs_to(tx, address):
                if matches_output(value, expected_minor, self._tolerance):
                    logger.info(
                        "%s: matching %s output of %s (expected %s) in tx %s",
                        self.name,
                        self._currency.symbol,
                        value,
                        expected_minor,
                        tx.get("txid"),
                    )
                    return True
        logger.info("%s: no confirmed output of ~%s to %s", self.name, expected_minor, address)
        return False

    async def snapshot(self, address: str) -> AddressBalanceSnapshot:
        data = await fetch_json(self._client, f"{self._base_url}/address/{address}", error=ExplorerError)
        try:
            funded = int(data["chain_stats"]["funded_txo_sum"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExplorerError(f"{self.name}: address payload lacks chain_stats.funded_txo_sum") from exc
        return AddressBalanceSnapshot(
            address=address,
            currency=self._currency,
            received_minor=funded,
            explorer=self.name,
        )

    async def _confirmed_transactions(self, address: str) -> AsyncIterator[dict[str, Any]]:
        url = f"{self._base_url}/address/{address}/txs"
        for _ in range(self._max_pages):
            page = await fetch_json(self._client, url, error=ExplorerError)
            if not isinstance(page, list):
                raise ExplorerError(f"{self.name}: expected a transaction list, got {type(page).__name__}")
            confirmed = [tx for tx in page if _is_confirmed(tx, self.name)]
            for tx in confirmed:
                yield tx
            if len(confirmed) < ESPLORA_CHAIN_PAGE_SIZE:
                return
            url = f"{self._base_url}/address/{address}/txs/chain/{confirmed[-1].get('txid')}"


class BlockchairExplorer:
    """Compares the cumulative confirmed total received by the address."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        currency: CurrencyKind,
        tolerance_minor: int,
        api_key: str | None = None,
    ) -> None:
        self.name = "blockchair"
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._currency = currency
        self._tolerance = tolerance_minor
        self._api_key = api_key

    async def is_paid(self, address: str, expected_minor: int) -> bool:
        snapshot = await self.snapshot(address)
        logger.info(
            "%s: %s address %s expected %s, confirmed received %s",
            self.name,
            self._currency.value,
            address,
            expected_minor,
            snapshot.received_minor,
        )
        return covers_cumulative(snapshot.received_minor, expected_minor, self._tolerance)

    async def snapshot(self, address: str) -> AddressBalanceSnapshot:
        params = {"key": self._api_key} if self._api_key else None
        payload = await fetch_json(
            self._client,
            f"{self._base_url}/{self._currency.value}/dashboards/address/{address}",
            params=params,
            error=ExplorerError,
        )
        entry = _blockchair_entry(payload, address)
        if entry is None:
            received = 0
        else:
            try:
                total = int(entry["address"]["received"] or 0)
                pending = sum(
                    int(utxo.get("value") or 0)
                    for utxo in entry.get("utxo") or []
                    if not utxo.get("block_id") or int(utxo["block_id"]) <= 0
                )
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise ExplorerError(f"{self.name}: malformed address dashboard for {address}") from exc
            received = max(total - pending, 0)
        return AddressBalanceSnapshot(
            address=address,
            currency=self._currency,
            received_minor=received,
            explorer=self.name,
        )


def _is_confirmed(tx: Any, explorer: str) -> bool:
    if not isinstance(tx, dict) or not isinstance(tx.get("status"), dict):
        raise ExplorerError(f"{explorer}: malformed transaction entry")
    return tx["status"].get("confirmed") is True


def _outputs_to(tx: dict[str, Any], address: str) -> Iterator[int]:
    for vout in tx.get("vout") or []:
        if isinstance(vout, dict) and vout.get("scriptpubkey_address") == address:
            try:
                yield int(vout["value"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping output without an integer value in tx %s", tx.get("txid"))


def _blockchair_entry(payload: Any, address: str) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        raise ExplorerError("blockchair: response is not an object")
    data = payload.get("data")
    if not data:
        return None
    if not isinstance(data, dict):
        raise ExplorerError("blockchair: data is not an object")
    return data.get(address) or data.get(address.lower())
