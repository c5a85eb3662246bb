"""Monthly Payment Domain Entity

Per-customer, per-period payment summary. Created lazily on the first
payment attempt and extended only through the payment ledger use cases.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, UniqueConstraint, Numeric, String
from src.domain.base import BaseModel, IdType


class PaymentStatus(str, Enum):
    """Period payment status"""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class MonthlyPayment(BaseModel, table=True):
    """
    Monthly Payment - payment summary for one customer and billing period

    Domain Rules:
    - One summary per (customer_id, month, year), enforced by the database
    - total_amount_paid >= 0 and equals the sum of its PaymentTransactions
    - total_amount_due is recomputed from bookings on every write
    - status follows derive_payment_status(total_amount_due, total_amount_paid)
    - marked_paid_by/marked_paid_at record the last time full payment was
      reached and are never cleared
    """

    __tablename__ = "monthly_payments"
    __table_args__ = (
        UniqueConstraint('customer_id', 'month', 'year', name='uq_monthly_payment_customer_period'),
        CheckConstraint('total_amount_paid >= 0', name='total_amount_paid_non_negative'),
        CheckConstraint('month >= 1 AND month <= 12', name='month_range'),
        Index('ix_monthly_payments_period', 'year', 'month'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique summary identifier (auto-increment)"
    )

    customer_id: str = Field(
        index=True,
        description="Customer being billed"
    )

    month: int = Field(
        description="Billing month (1-12)"
    )

    year: int = Field(
        description="Billing year"
    )

    total_amount_due: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Amount due as of the last write"
    )

    total_amount_paid: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Sum of all transactions for the period"
    )

    sessions_count: int = Field(
        default=0,
        description="Billable sessions (one-off + recurring occurrences)"
    )

    total_hours: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Billable hours"
    )

    status: PaymentStatus = Field(
        default=PaymentStatus.UNPAID,
        description="Payment status (unpaid, partial, paid)"
    )

    marked_paid_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Operator who recorded the payment that settled the period"
    )

    marked_paid_at: Optional[datetime] = Field(
        default=None,
        description="When the period was last fully settled"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Summary creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def unpaid_amount(self) -> Decimal:
        remaining = (self.total_amount_due or Decimal("0")) - (self.total_amount_paid or Decimal("0"))
        return max(remaining, Decimal("0.00"))

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": "c0ffee00-0000-4000-8000-000000000001",
                "month": 2,
                "year": 2026,
                "total_amount_due": "480.00",
                "total_amount_paid": "200.00",
                "sessions_count": 4,
                "total_hours": "6.00",
                "status": "partial",
                "marked_paid_by": None,
                "marked_paid_at": None,
            }
        }
