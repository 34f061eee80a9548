"""Manual trigger for the pending-order sweep."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptopay.interfaces.http.deps import get_sweeper
from cryptopay.modules.reconciliation import PaymentSweeper
from cryptopay.schemas import SweepSummaryResponse

router = APIRouter()


@router.post("/sweep", response_model=SweepSummaryResponse, summary="Reconcile all pending orders now")
async def run_sweep(sweeper: PaymentSweeper = Depends(get_sweeper)) -> SweepSummaryResponse:
    summary = await sweeper.run_once()
    return SweepSummaryResponse.model_validate(summary)
