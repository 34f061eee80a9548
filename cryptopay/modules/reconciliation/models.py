"""Domain models for reconciliation results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from cryptopay.modules.orders import PaymentStatus


@dataclass(slots=True, frozen=True)
class PaymentCheck:
    order_id: str
    paid: bool
    status: PaymentStatus
    confirmed_at: Optional[datetime] = None
    newly_confirmed: bool = False


@dataclass(slots=True, frozen=True)
class SweepSummary:
    total_checked: int
    confirmed_count: int
    failed_count: int = 0
