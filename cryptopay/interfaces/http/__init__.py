from fastapi import APIRouter

from cryptopay.interfaces.http.routers import orders, payments, reconciliation


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(payments.router, prefix="/payments", tags=["payments"])
    router.include_router(orders.router, prefix="/orders", tags=["orders"])
    router.include_router(reconciliation.router, prefix="/reconciliation", tags=["reconciliation"])
    return router


__all__ = [
    "create_api_router",
]
