from decimal import Decimal

import pytest
from pydantic import ValidationError

from cryptopay.core.config import RateSettings
from cryptopay.modules.common import CurrencyKind
from cryptopay.modules.rates import CoinGeckoSource, RateOracle

from .conftest import COINDESK, COINGECKO


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def coingecko_price(coin: str, price) -> dict:
    return {coin: {"eur": price}}


def coindesk_price(rate: str) -> dict:
    return {"bpi": {"EUR": {"code": "EUR", "rate": rate, "rate_float": float(rate.replace(",", ""))}}}


async def test_primary_source_price(network, http_client):
    network.add(COINGECKO, coingecko_price("bitcoin", 50000))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    quote = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert quote.price == Decimal("50000")
    assert quote.source == "coingecko"
    assert quote.fiat_currency == "EUR"
    assert not quote.degraded
    assert network.requested(COINDESK) == 0
    request = network.requests[0]
    assert request.url.params["ids"] == "bitcoin"
    assert request.url.params["vs_currencies"] == "eur"


async def test_falls_back_to_coindesk_when_coingecko_fails(network, http_client):
    network.add(COINGECKO, {"error": "rate limited"}, status=429)
    network.add(COINDESK, coindesk_price("48,123.4567"))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    quote = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert quote.price == Decimal("48123.4567")
    assert quote.source == "coindesk"
    assert not quote.degraded


async def test_missing_price_field_counts_as_failure(network, http_client):
    network.add(COINGECKO, {"bitcoin": {}})
    network.add(COINDESK, coindesk_price("47,000.00"))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    assert await oracle.get_rate(CurrencyKind.BITCOIN) == Decimal("47000.00")


async def test_non_positive_price_counts_as_failure(network, http_client):
    network.add(COINGECKO, coingecko_price("bitcoin", 0))
    network.add(COINDESK, coindesk_price("47,000.00"))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    quote = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert quote.source == "coindesk"


async def test_static_default_when_every_source_fails(network, http_client, caplog):
    network.fail(COINGECKO)
    network.add_text(COINDESK, "<html>maintenance</html>")
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    with caplog.at_level("WARNING", logger="cryptopay.modules.rates"):
        quote = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert quote.price == Decimal("90000")
    assert quote.source == "default"
    assert quote.degraded
    assert any("degraded" in record.getMessage() for record in caplog.records)


async def test_litecoin_skips_bitcoin_only_source(network, http_client):
    network.fail(COINGECKO)
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    quote = await oracle.get_quote(CurrencyKind.LITECOIN)

    assert quote.price == Decimal("120")
    assert quote.degraded
    assert network.requested(COINDESK) == 0


async def test_configured_default_price(network, http_client):
    network.fail(COINGECKO)
    settings = RateSettings(cache_ttl_seconds=0, litecoin_default_price=Decimal("95.50"))
    oracle = RateOracle.from_settings(settings, http_client)

    assert await oracle.get_rate(CurrencyKind.LITECOIN) == Decimal("95.50")


async def test_cached_quote_is_reused_within_ttl(network, http_client):
    network.add(COINGECKO, coingecko_price("bitcoin", 50000))
    clock = FakeClock()
    oracle = RateOracle(RateSettings(cache_ttl_seconds=30), [CoinGeckoSource(http_client, RateSettings().coingecko_url)], clock=clock)

    first = await oracle.get_quote(CurrencyKind.BITCOIN)
    network.add(COINGECKO, coingecko_price("bitcoin", 51000))
    clock.now += 29
    second = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert second == first
    assert network.requested(COINGECKO) == 1

    clock.now += 2
    third = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert third.price == Decimal("51000")
    assert network.requested(COINGECKO) == 2


async def test_cache_is_per_currency(network, http_client):
    network.add(COINGECKO, coingecko_price("bitcoin", 50000))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=30), http_client)
    await oracle.get_quote(CurrencyKind.BITCOIN)

    network.add(COINGECKO, coingecko_price("litecoin", 80))
    quote = await oracle.get_quote(CurrencyKind.LITECOIN)

    assert quote.price == Decimal("80")
    assert network.requested(COINGECKO) == 2


async def test_zero_ttl_always_refetches(network, http_client):
    network.add(COINGECKO, coingecko_price("bitcoin", 50000))
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=0), http_client)

    await oracle.get_quote(CurrencyKind.BITCOIN)
    await oracle.get_quote(CurrencyKind.BITCOIN)

    assert network.requested(COINGECKO) == 2


async def test_degraded_quote_is_not_cached(network, http_client):
    network.fail(COINGECKO)
    network.fail(COINDESK)
    oracle = RateOracle.from_settings(RateSettings(cache_ttl_seconds=30), http_client)

    assert (await oracle.get_quote(CurrencyKind.BITCOIN)).degraded

    network.add(COINGECKO, coingecko_price("bitcoin", 52000))
    quote = await oracle.get_quote(CurrencyKind.BITCOIN)

    assert not quote.degraded
    assert quote.price == Decimal("52000")


def test_cache_ttl_is_capped_at_one_minute():
    with pytest.raises(ValidationError):
        RateSettings(cache_ttl_seconds=61)
