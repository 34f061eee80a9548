"""Rate oracle with a source fallback chain and a static last-resort price."""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Sequence

import httpx

from cryptopay.core.config import RateSettings
from cryptopay.modules.common import CurrencyKind, utcnow

from .models import RateQuote
from .sources import CoinDeskSource, CoinGeckoSource, RateSource, RateSourceError

logger = logging.getLogger(__name__)


class RateOracle:
    """Resolves fiat-per-coin prices.

    Sources are tried in order. When every source fails the configured default
    price is returned with ``degraded=True`` so checkout keeps working; the
    degraded quote is logged at WARNING and never cached.
    """

    def __init__(
        self,
        settings: RateSettings,
        sources: Sequence[RateSource],
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._sources = list(sources)
        self._clock = clock
        self._cache: dict[CurrencyKind, tuple[float, RateQuote]] = {}

    @classmethod
    def from_settings(cls, settings: RateSettings, client: httpx.AsyncClient) -> "RateOracle":
        return cls(
            settings,
            [
                CoinGeckoSource(client, settings.coingecko_url),
                CoinDeskSource(client, settings.coindesk_url),
            ],
        )

    @property
    def fiat_currency(self) -> str:
        return self._settings.fiat_currency

    async def get_rate(self, currency: CurrencyKind) -> Decimal:
        quote = await self.get_quote(currency)
        return quote.price

    async def get_quote(self, currency: CurrencyKind) -> RateQuote:
        cached = self._cached(currency)
        if cached is not None:
            return cached

        for source in self._sources:
            if not source.supports(currency):
                continue
            try:
                price = await source.fetch_price(currency, self.fiat_currency)
            except RateSourceError as exc:
                logger.warning("Rate source %s failed for %s: %s", source.name, currency.value, exc)
                continue
            quote = RateQuote(
                currency=currency,
                fiat_currency=self.fiat_currency,
                price=price,
                source=source.name,
                fetched_at=utcnow(),
            )
            logger.info("%s price from %s: %s %s", currency.symbol, source.name, price, self.fiat_currency)
            self._store(quote)
            return quote

        price = self._settings.default_price_for(currency.value)
        logger.warning(
            "All rate sources failed for %s, using static default %s %s (degraded)",
            currency.value,
            price,
            self.fiat_currency,
        )
        return RateQuote(
            currency=currency,
            fiat_currency=self.fiat_currency,
            price=price,
            source="default",
            fetched_at=utcnow(),
            degraded=True,
        )

    def _cached(self, currency: CurrencyKind) -> RateQuote | None:
        ttl = self._settings.cache_ttl_seconds
        if ttl <= 0:
            return None
        entry = self._cache.get(currency)
        if entry is None:
            return None
        stored_at, quote = entry
        if self._clock() - stored_at > ttl:
            self._cache.pop(currency, None)
            return None
        return quote

    def _store(self, quote: RateQuote) -> None:
        if self._settings.cache_ttl_seconds > 0:
            self._cache[quote.currency] = (self._clock(), quote)
