"""Domain models for orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from cryptopay.modules.common import CurrencyKind


class PaymentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass(slots=True)
class Order:
    id: str
    fiat_amount: Decimal
    fiat_currency: str
    payment_status: PaymentStatus
    payment_currency: Optional[CurrencyKind] = None
    payment_address: Optional[str] = None
    expected_amount: Optional[Decimal] = None
    quoted_at: Optional[datetime] = None
    payment_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.payment_status is PaymentStatus.CONFIRMED

    @property
    def has_binding(self) -> bool:
        return (
            self.payment_currency is not None
            and bool(self.payment_address)
            and self.expected_amount is not None
            and self.expected_amount > 0
        )
