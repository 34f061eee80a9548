#!/usr/bin/env python3
"""
Create a pending order for local development (checkout normally owns this).

    python scripts/seed_order.py --amount 100.00
"""

from __future__ import annotations

import argparse
import asyncio
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cryptopay.core.config import get_settings
from cryptopay.infrastructure.database import build_engine, init_db
from cryptopay.infrastructure.database.repositories import SqlOrderRepository


async def create_order(amount: Decimal) -> str:
    engine = build_engine(get_settings())
    try:
        await init_db(engine)
        session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            order = await SqlOrderRepository(session).create(fiat_amount=amount)
            await session.commit()
        return order.id
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a development order")
    parser.add_argument("--amount", type=Decimal, required=True, help="Order total in EUR")
    args = parser.parse_args()

    order_id = asyncio.run(create_order(args.amount))
    print(f"Order created: {order_id} ({args.amount} EUR)")


if __name__ == "__main__":
    main()
