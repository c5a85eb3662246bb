"""Recurring Booking Payment Domain Entity

Per-slot payment record for one RecurringBooking and one billing period.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, UniqueConstraint, Numeric, String, Text
from src.domain.base import BaseModel, IdType


class SlotPaymentStatus(str, Enum):
    """Raw slot payment status"""
    PENDING = "pending"
    PAID = "paid"


class RecurringBookingPayment(BaseModel, table=True):
    """
    Recurring Booking Payment - slot-level payment record

    Domain Rules:
    - One record per (recurring_booking_id, month, year), enforced by the database
    - Materialized on demand, never overwritten and never deleted
    - status moves pending -> paid exactly once
    """

    __tablename__ = "recurring_booking_payments"
    __table_args__ = (
        UniqueConstraint('recurring_booking_id', 'month', 'year', name='uq_slot_payment_period'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique record identifier (auto-increment)"
    )

    recurring_booking_id: str = Field(
        sa_column=Column(String(36), ForeignKey("recurring_bookings.id"), nullable=False, index=True),
        description="Foreign key to RecurringBooking"
    )

    month: int = Field(
        description="Billing month (1-12)"
    )

    year: int = Field(
        description="Billing year"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="sessions_count x amount per session"
    )

    sessions_count: int = Field(
        description="Occurrences of the slot's weekday in the period"
    )

    status: SlotPaymentStatus = Field(
        default=SlotPaymentStatus.PENDING,
        description="Raw status (pending, paid)"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="When the record was marked paid"
    )

    payment_method: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Payment method used"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form notes"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Record creation timestamp"
    )
