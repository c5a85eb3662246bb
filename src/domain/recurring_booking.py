"""Recurring Booking Domain Entity

A weekly recurring court slot. Created and end-dated by the scheduling
flow; billing only reads it. Several rows may describe the same logical
weekly commitment across time (e.g. after a rate change).
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String, Date
from src.domain.base import BaseModel, generate_uuid


class RecurringBooking(BaseModel, table=True):
    """
    Recurring Booking - weekly commitment billed per calendar month

    Domain Rules:
    - day_of_week: 0=Sunday .. 6=Saturday
    - hourly_rate overrides the rate table for the whole session when set
    - end_date is optional (None = open-ended)
    - Either customer_id or guest_name identifies the payer
    """

    __tablename__ = "recurring_bookings"
    __table_args__ = (
        CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='day_of_week_range'),
        Index('ix_recurring_bookings_customer_active', 'customer_id', 'is_active'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Recurring booking identifier"
    )

    customer_id: Optional[str] = Field(
        default=None,
        description="Paying customer (None for walk-in guests)"
    )

    guest_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Guest payer name when there is no customer account"
    )

    guest_phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Guest payer phone"
    )

    label: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Free-form label (e.g. club or training group name)"
    )

    court_id: int = Field(
        description="Booked court"
    )

    sport: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Sport played (rate table key)"
    )

    day_of_week: int = Field(
        description="Day of week (0=Sunday .. 6=Saturday)"
    )

    start_time: str = Field(
        sa_column=Column(String(5), nullable=False),
        description="Start time (HH:MM)"
    )

    end_time: str = Field(
        sa_column=Column(String(5), nullable=False),
        description="End time (HH:MM)"
    )

    hourly_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True),
        description="Flat hourly rate override (None = use rate table)"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First date the commitment applies"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last date the commitment applies (None = open-ended)"
    )

    is_active: bool = Field(
        default=True,
        description="Inactive commitments are never billed"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )
