"""Domain models for payment quotes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from cryptopay.modules.common import CurrencyKind


@dataclass(slots=True, frozen=True)
class PaymentQuote:
    order_id: str
    currency: CurrencyKind
    address: str
    expected_amount: Decimal
    fiat_amount: Decimal
    fiat_currency: str
    rate: Decimal
    rate_source: str
    payment_uri: str
    quoted_at: datetime
    expires_at: datetime


def build_payment_uri(currency: CurrencyKind, address: str, amount: Decimal) -> str:
    """Wallet handoff URI, e.g. ``bitcoin:bc1q...?amount=0.00200000``."""
    return f"{currency.uri_scheme}:{address}?amount={amount:.8f}"
