"""Booking Domain Entity

A single, non-recurring court booking. Billing reads confirmed bookings as
one-off charges; cancelled bookings are never billed.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Date
from src.domain.base import BaseModel, generate_uuid


class BookingStatus(str, Enum):
    """Booking status types"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(BaseModel, table=True):
    """
    Booking - one-off court booking

    Domain Rules:
    - total_amount is fixed when the booking is made
    - end_time is strictly after start_time on booking_date ("24:00" = midnight)
    - Cancelled bookings are excluded from billing
    """

    __tablename__ = "bookings"
    __table_args__ = (
        Index('ix_bookings_customer_date', 'customer_id', 'booking_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Booking identifier"
    )

    customer_id: str = Field(
        description="Customer who made the booking"
    )

    court_id: int = Field(
        description="Booked court"
    )

    booking_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date of play"
    )

    start_time: str = Field(
        sa_column=Column(String(5), nullable=False),
        description="Start time (HH:MM)"
    )

    end_time: str = Field(
        sa_column=Column(String(5), nullable=False),
        description="End time (HH:MM)"
    )

    sport: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Sport played (rate table key)"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount charged for the booking"
    )

    status: BookingStatus = Field(
        default=BookingStatus.CONFIRMED,
        description="Booking status"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Booking creation timestamp"
    )
