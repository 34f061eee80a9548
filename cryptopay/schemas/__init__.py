"""Pydantic schemas used by the HTTP interface."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cryptopay.modules.common import CurrencyKind
from cryptopay.modules.orders import PaymentStatus


class PaymentCreateRequest(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=36)
    amount: Decimal = Field(..., description="Order total in EUR")
    currency: CurrencyKind = CurrencyKind.BITCOIN


class PaymentQuoteResponse(BaseModel):
    order_id: str
    currency: CurrencyKind
    address: str
    expected_amount: Decimal
    fiat_amount: Decimal
    fiat_currency: str
    rate: Decimal
    rate_source: str
    qr_uri: str
    quoted_at: datetime
    expires_at: datetime


class PaymentCheckResponse(BaseModel):
    order_id: str
    paid: bool
    status: PaymentStatus
    confirmed_at: Optional[datetime] = None


class OrderResponse(BaseModel):
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

    model_config = ConfigDict(from_attributes=True)


class SweepSummaryResponse(BaseModel):
    total_checked: int
    confirmed_count: int
    failed_count: int

    model_config = ConfigDict(from_attributes=True)


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
