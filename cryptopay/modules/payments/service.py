"""Payment quoting service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession

from cryptopay.core.config import Settings, WalletSettings
from cryptopay.infrastructure.database.repositories.order_repository import SqlOrderRepository
from cryptopay.modules.common import CurrencyKind, utcnow
from cryptopay.modules.orders import ConflictError, NotFoundError, OrderRepository, PaymentStatus
from cryptopay.modules.rates import RateOracle

from .exceptions import ConfigurationError, InvalidAmountError, UnsupportedCurrencyError
from .models import PaymentQuote, build_payment_uri

logger = logging.getLogger(__name__)

CRYPTO_QUANTUM = Decimal("0.00000001")


@dataclass(slots=True)
class PaymentService:
    repository: OrderRepository
    oracle: RateOracle
    wallets: WalletSettings
    binding_ttl: timedelta = timedelta(minutes=60)

    @classmethod
    def with_session(cls, session: AsyncSession, oracle: RateOracle, settings: Settings) -> "PaymentService":
        return cls(
            SqlOrderRepository(session),
            oracle,
            settings.wallets,
            timedelta(minutes=settings.reconciliation.binding_ttl_minutes),
        )

    async def create_payment(
        self,
        order_id: str,
        fiat_amount: Decimal | str | int,
        currency: CurrencyKind | str = CurrencyKind.BITCOIN,
    ) -> PaymentQuote:
        """Quote ``fiat_amount`` in ``currency`` and bind the result to the order.

        Re-quoting a pending order overwrites its binding and restarts the
        payment deadline. A confirmed order cannot be re-quoted.
        """
        amount = self._validate_amount(fiat_amount)
        kind = self._resolve_currency(currency)
        address = self.wallets.address_for(kind.value)
        if not address:
            raise ConfigurationError(f"{kind.value} wallet address not configured")

        order = await self.repository.get(order_id)
        if order is None:
            raise NotFoundError(order_id)
        if order.is_confirmed:
            raise ConflictError(f"order {order_id} is already confirmed")
        if order.fiat_amount != amount:
            raise InvalidAmountError(
                f"amount {amount} does not match order total {order.fiat_amount} {order.fiat_currency}"
            )

        logger.info("Creating %s payment for order %s, amount: %s %s", kind.value, order_id, amount, order.fiat_currency)
        quote = await self.oracle.get_quote(kind)
        expected = (amount / quote.price).quantize(CRYPTO_QUANTUM, rounding=ROUND_HALF_UP)
        if expected <= 0:
            raise InvalidAmountError(f"amount {amount} is below the smallest {kind.symbol} unit")
        quoted_at = utcnow()

        await self.repository.update(
            order_id,
            {
                "payment_currency": kind,
                "payment_address": address,
                "expected_amount": expected,
                "quoted_at": quoted_at,
                "payment_status": PaymentStatus.PENDING,
            },
            if_status=PaymentStatus.PENDING,
        )
        logger.info("%s payment created: %s %s to %s", kind.value, expected, kind.symbol, address)

        return PaymentQuote(
            order_id=order_id,
            currency=kind,
            address=address,
            expected_amount=expected,
            fiat_amount=amount,
            fiat_currency=order.fiat_currency,
            rate=quote.price,
            rate_source=quote.source,
            payment_uri=build_payment_uri(kind, address, expected),
            quoted_at=quoted_at,
            expires_at=quoted_at + self.binding_ttl,
        )

    @staticmethod
    def _validate_amount(fiat_amount: Decimal | str | int) -> Decimal:
        try:
            amount = Decimal(str(fiat_amount))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmountError(f"invalid amount {fiat_amount!r}") from exc
        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError(f"amount must be positive, got {fiat_amount}")
        return amount

    @staticmethod
    def _resolve_currency(currency: CurrencyKind | str) -> CurrencyKind:
        try:
            return CurrencyKind(currency)
        except ValueError as exc:
            raise UnsupportedCurrencyError(f"unsupported currency {currency!r}") from exc
