"""Period Due-Amount Calculator

Single source of truth for what a customer owes in a billing period.
Every read and write path calls ``PeriodDueCalculator.compute``; the
result is never cached because bookings may change between calls.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel
from src.app.repositories.booking_repository import BookingRepository, RecurringBookingRepository
from src.app.repositories.customer_repository import CourtRepository
from src.domain.billing_period import BillingPeriod
from src.domain.calendar_utils import count_occurrences
from src.domain.pricing import RateTable, calculate_hours, session_amount, to_money

logger = logging.getLogger(__name__)


class OneOffCharge(BaseModel):
    """A non-recurring booking falling inside the period"""

    id: str
    booking_date: date
    start_time: str
    end_time: str
    sport: str
    court: str
    hours: Decimal
    amount: Decimal


class RecurringCharge(BaseModel):
    """A recurring commitment's contribution to the period"""

    id: str
    day_of_week: int
    start_time: str
    end_time: str
    sport: str
    court: str
    hourly_rate: Optional[Decimal] = None
    hours: Decimal
    amount_per_session: Decimal
    sessions: int
    subtotal: Decimal


class DueComputation(BaseModel):
    """Freshly derived amount due with the components that produced it"""

    customer_id: str
    month: int
    year: int
    total_due: Decimal
    total_hours: Decimal
    bookings_count: int
    one_off_charges: List[OneOffCharge]
    recurring_charges: List[RecurringCharge]


class PeriodDueCalculator:
    """
    Aggregates one-off and recurring charges for a customer and period

    One-off: non-cancelled bookings dated in [first day, next first day),
    amounts summed as stored.
    Recurring: active commitments overlapping the period, each contributing
    occurrences-of-weekday x amount-per-session.
    """

    def __init__(
        self,
        booking_repo: BookingRepository,
        recurring_repo: RecurringBookingRepository,
        court_repo: CourtRepository,
        rate_table: RateTable,
    ):
        self.booking_repo = booking_repo
        self.recurring_repo = recurring_repo
        self.court_repo = court_repo
        self.rate_table = rate_table

    async def compute(self, customer_id: str, period: BillingPeriod) -> DueComputation:
        """
        Compute the amount due

        Raises:
            ConfigurationError: A commitment's sport has no configured rate
        """
        bookings = await self.booking_repo.get_billable_for_customer(
            customer_id, period.first_day, period.next_first_day
        )
        commitments = await self.recurring_repo.get_active_overlapping(
            customer_id, period.first_day, period.next_first_day
        )

        court_ids = {b.court_id for b in bookings} | {c.court_id for c in commitments}
        court_names = await self.court_repo.get_names(sorted(court_ids)) if court_ids else {}

        one_off_charges = [
            OneOffCharge(
                id=booking.id,
                booking_date=booking.booking_date,
                start_time=booking.start_time,
                end_time=booking.end_time,
                sport=booking.sport,
                court=court_names.get(booking.court_id, f"Court {booking.court_id}"),
                hours=calculate_hours(booking.start_time, booking.end_time),
                amount=to_money(booking.total_amount),
            )
            for booking in bookings
        ]

        recurring_charges = []
        for commitment in commitments:
            sessions = count_occurrences(period.year, period.month, commitment.day_of_week)
            per_session = session_amount(
                commitment.start_time,
                commitment.end_time,
                commitment.sport,
                self.rate_table,
                hourly_rate_override=commitment.hourly_rate,
            )
            recurring_charges.append(
                RecurringCharge(
                    id=commitment.id,
                    day_of_week=commitment.day_of_week,
                    start_time=commitment.start_time,
                    end_time=commitment.end_time,
                    sport=commitment.sport,
                    court=court_names.get(commitment.court_id, f"Court {commitment.court_id}"),
                    hourly_rate=commitment.hourly_rate,
                    hours=calculate_hours(commitment.start_time, commitment.end_time),
                    amount_per_session=per_session,
                    sessions=sessions,
                    subtotal=per_session * sessions,
                )
            )

        total_due = sum((c.amount for c in one_off_charges), Decimal("0.00")) + sum(
            (c.subtotal for c in recurring_charges), Decimal("0.00")
        )
        total_hours = sum((c.hours for c in one_off_charges), Decimal("0.00")) + sum(
            (c.hours * c.sessions for c in recurring_charges), Decimal("0.00")
        )
        bookings_count = len(one_off_charges) + sum(c.sessions for c in recurring_charges)

        logger.debug(
            f"Computed due for customer {customer_id} period {period}: "
            f"total_due={total_due}, sessions={bookings_count}"
        )

        return DueComputation(
            customer_id=customer_id,
            month=period.month,
            year=period.year,
            total_due=to_money(total_due),
            total_hours=total_hours,
            bookings_count=bookings_count,
            one_off_charges=one_off_charges,
            recurring_charges=recurring_charges,
        )
