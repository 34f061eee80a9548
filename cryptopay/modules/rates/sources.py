"""HTTP price sources.

Each source answers "how many units of fiat buy one coin". Any failure is
reported as ``RateSourceError`` so the oracle can move on to the next source.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

import httpx

from cryptopay.infrastructure.http import fetch_json
from cryptopay.modules.common import CurrencyKind, ExternalSourceError


class RateSourceError(ExternalSourceError):
    """A single price source could not produce a usable price."""


class RateSource(Protocol):
    name: str

    def supports(self, currency: CurrencyKind) -> bool:
        ...

    async def fetch_price(self, currency: CurrencyKind, fiat_currency: str) -> Decimal:
        ...


def _positive_decimal(value: Any, source: str) -> Decimal:
    try:
        price = Decimal(str(value).replace(",", ""))
    except (InvalidOperation, ValueError) as exc:
        raise RateSourceError(f"{source} returned an unparsable price {value!r}") from exc
    if not price.is_finite() or price <= 0:
        raise RateSourceError(f"{source} returned a non-positive price {value!r}")
    return price


class CoinGeckoSource:
    name = "coingecko"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def supports(self, currency: CurrencyKind) -> bool:
        return True

    async def fetch_price(self, currency: CurrencyKind, fiat_currency: str) -> Decimal:
        fiat_key = fiat_currency.lower()
        data = await fetch_json(
            self._client,
            f"{self._base_url}/simple/price",
            params={"ids": currency.value, "vs_currencies": fiat_key},
            error=RateSourceError,
        )
        try:
            raw = data[currency.value][fiat_key]
        except (KeyError, TypeError) as exc:
            raise RateSourceError(f"coingecko response lacks {currency.value}.{fiat_key}") from exc
        return _positive_decimal(raw, self.name)


class CoinDeskSource:
    """CoinDesk BPI; quotes bitcoin only and formats the rate as ``"90,000.1234"``."""

    name = "coindesk"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def supports(self, currency: CurrencyKind) -> bool:
        return currency is CurrencyKind.BITCOIN

    async def fetch_price(self, currency: CurrencyKind, fiat_currency: str) -> Decimal:
        fiat_key = fiat_currency.upper()
        data = await fetch_json(
            self._client,
            f"{self._base_url}/bpi/currentprice/{fiat_key}.json",
            error=RateSourceError,
        )
        try:
            raw = data["bpi"][fiat_key]["rate"]
        except (KeyError, TypeError) as exc:
            raise RateSourceError(f"coindesk response lacks bpi.{fiat_key}.rate") from exc
        return _positive_decimal(raw, self.name)
