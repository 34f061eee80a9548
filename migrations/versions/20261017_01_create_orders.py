"""create orders table with crypto payment binding

Revision ID: 3f9c2a7d1b40
Revises: 
Create Date: 2026-10-17 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2a7d1b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("fiat_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("fiat_currency", sa.String(length=3), nullable=False, server_default="EUR"),
        sa.Column("payment_currency", sa.String(length=20)),
        sa.Column("payment_address", sa.String(length=128)),
        sa.Column("expected_amount", sa.Numeric(20, 8)),
        sa.Column("quoted_at", sa.DateTime(timezone=True)),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("payment_confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "ix_orders_payment_status_quoted_at",
        "orders",
        ["payment_status", "quoted_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_orders_payment_status_quoted_at", table_name="orders")
    op.drop_table("orders")
