"""Read-only order payment state."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from cryptopay.interfaces.http.deps import get_order_service
from cryptopay.modules.orders import NotFoundError
from cryptopay.modules.orders.service import OrderService
from cryptopay.schemas import OrderResponse

router = APIRouter()


@router.get("/{order_id}", response_model=OrderResponse, summary="Get an order's payment state")
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    try:
        order = await service.get_order(order_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc
    return OrderResponse.model_validate(order)
