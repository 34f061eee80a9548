"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Column, DateTime, Index, Numeric, String
from sqlalchemy.sql import func

from cryptopay.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    fiat_amount = Column(Numeric(12, 2), nullable=False)
    fiat_currency = Column(String(3), nullable=False, default="EUR")
    payment_currency = Column(String(20))  # bitcoin, litecoin
    payment_address = Column(String(128))
    expected_amount = Column(Numeric(20, 8))
    quoted_at = Column(DateTime(timezone=True))
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, confirmed
    payment_confirmed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_orders_payment_status_quoted_at", "payment_status", "quoted_at"),
    )
