"""Create-payment and check-payment endpoints used by the checkout UI."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from cryptopay.interfaces.http.deps import get_payment_service, get_reconciliation_service
from cryptopay.modules.orders import ConflictError, NotFoundError
from cryptopay.modules.payments import (
    ConfigurationError,
    InvalidAmountError,
    PaymentService,
    UnsupportedCurrencyError,
)
from cryptopay.modules.reconciliation import ReconciliationService
from cryptopay.schemas import PaymentCheckResponse, PaymentCreateRequest, PaymentQuoteResponse

router = APIRouter()


@router.post(
    "",
    response_model=PaymentQuoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Quote an order in crypto and bind a receiving address",
)
async def create_payment(
    payload: PaymentCreateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentQuoteResponse:
    try:
        quote = await service.create_payment(payload.order_id, payload.amount, payload.currency)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except (InvalidAmountError, UnsupportedCurrencyError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return PaymentQuoteResponse(
        order_id=quote.order_id,
        currency=quote.currency,
        address=quote.address,
        expected_amount=quote.expected_amount,
        fiat_amount=quote.fiat_amount,
        fiat_currency=quote.fiat_currency,
        rate=quote.rate,
        rate_source=quote.rate_source,
        qr_uri=quote.payment_uri,
        quoted_at=quote.quoted_at,
        expires_at=quote.expires_at,
    )


@router.post(
    "/{order_id}/check",
    response_model=PaymentCheckResponse,
    summary="Check the blockchain for the order's payment",
)
async def check_payment(
    order_id: str,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> PaymentCheckResponse:
    try:
        result = await service.check_payment(order_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    return PaymentCheckResponse(
        order_id=result.order_id,
        paid=result.paid,
        status=result.status,
        confirmed_at=result.confirmed_at,
    )
