"""Rate quote value object."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from cryptopay.modules.common import CurrencyKind


@dataclass(slots=True, frozen=True)
class RateQuote:
    currency: CurrencyKind
    fiat_currency: str
    price: Decimal
    source: str
    fetched_at: datetime
    degraded: bool = False
