"""Payment Transaction Domain Entity

Immutable append-only record of money received against a MonthlyPayment.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType


class PaymentTransaction(BaseModel, table=True):
    """
    Payment Transaction - one received payment

    Domain Rules:
    - Transactions are immutable (append-only, never deleted)
    - idempotency_key, when given, is unique (prevents double recording)
    - Created in the same database transaction as the MonthlyPayment update
    """

    __tablename__ = "payment_transactions"
    __table_args__ = (
        Index('ix_payment_transactions_recorded_at', 'recorded_at'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    monthly_payment_id: int = Field(
        sa_column=Column(
            IdType, ForeignKey("monthly_payments.id", ondelete="RESTRICT"), nullable=False, index=True
        ),
        description="Foreign key to MonthlyPayment"
    )

    customer_id: str = Field(
        index=True,
        description="Customer ID for query optimization"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount received (> 0)"
    )

    payment_method: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Payment method (e.g. cash, bank_transfer, card)"
    )

    reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External reference (receipt or transfer number)"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form notes"
    )

    recorded_by: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Operator who recorded the payment"
    )

    recorded_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Recording timestamp (immutable)"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
        description="Caller-supplied key preventing duplicate recording on retry"
    )
