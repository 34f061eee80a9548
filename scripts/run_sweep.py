#!/usr/bin/env python3
"""
Run one reconciliation sweep over all pending crypto orders and exit.

Intended for cron or any external scheduler when the in-process sweep is off:
    python scripts/run_sweep.py
    python scripts/run_sweep.py --max-age-hours 24 --limit 200
"""

from __future__ import annotations

import argparse
import asyncio
import json

from cryptopay.core.config import get_settings
from cryptopay.core.container import build_container
from cryptopay.core.logging import configure_logging


async def run(max_age_hours: int | None, limit: int | None) -> dict[str, int]:
    settings = get_settings()
    overrides = {}
    if max_age_hours is not None:
        overrides["sweep_max_age_hours"] = max_age_hours
    if limit is not None:
        overrides["sweep_batch_limit"] = limit
    if overrides:
        reconciliation = settings.reconciliation.model_copy(update=overrides)
        settings = settings.model_copy(update={"reconciliation": reconciliation})

    configure_logging(settings.logging)
    container = build_container(settings)
    try:
        await container.init_infrastructure()
        summary = await container.sweeper.run_once()
    finally:
        await container.aclose()
    return {
        "total_checked": summary.total_checked,
        "confirmed_count": summary.confirmed_count,
        "failed_count": summary.failed_count,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Reconcile pending crypto payments once")
    parser.add_argument("--max-age-hours", type=int, default=None, help="Only orders quoted within this window")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of orders to check")
    args = parser.parse_args()

    result = asyncio.run(run(args.max_age_hours, args.limit))
    print(json.dumps(result))


if __name__ == "__main__":
    main()
