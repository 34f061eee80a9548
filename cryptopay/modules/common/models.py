"""Currency kinds and unit conversion."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_FLOOR, Decimal
from enum import Enum

MINOR_UNITS_PER_COIN = 100_000_000


class CurrencyKind(str, Enum):
    BITCOIN = "bitcoin"
    LITECOIN = "litecoin"

    @property
    def symbol(self) -> str:
        return {"bitcoin": "BTC", "litecoin": "LTC"}[self.value]

    @property
    def uri_scheme(self) -> str:
        return self.value


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to satoshi-equivalents, rounding down."""
    return int((Decimal(amount) * MINOR_UNITS_PER_COIN).to_integral_value(rounding=ROUND_FLOOR))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
