"""Service dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cryptopay.core.container import ApplicationContainer
from cryptopay.modules.orders.service import OrderService
from cryptopay.modules.payments import PaymentService
from cryptopay.modules.reconciliation import PaymentSweeper, ReconciliationService

from .container import get_container
from .database import get_db_session


def get_payment_service(
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> PaymentService:
    return PaymentService.with_session(db, container.rate_oracle, container.settings)


def get_reconciliation_service(
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> ReconciliationService:
    return ReconciliationService.with_session(db, container.ledger_scanner)


def get_order_service(db: AsyncSession = Depends(get_db_session)) -> OrderService:
    return OrderService.with_session(db)


def get_sweeper(container: ApplicationContainer = Depends(get_container)) -> PaymentSweeper:
    return container.sweeper
