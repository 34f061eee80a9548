"""Fiat exchange rates for supported cryptocurrencies."""

from .models import RateQuote
from .oracle import RateOracle
from .sources import CoinDeskSource, CoinGeckoSource, RateSource, RateSourceError

__all__ = [
    "CoinDeskSource",
    "CoinGeckoSource",
    "RateOracle",
    "RateQuote",
    "RateSource",
    "RateSourceError",
]
