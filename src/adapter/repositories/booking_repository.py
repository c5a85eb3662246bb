"""SQLAlchemy implementations of the booking read repositories

Bookings and recurring bookings belong to the scheduling side; billing
only reads them, filtered by customer and date range.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.booking_repository import BookingRepository, RecurringBookingRepository
from src.domain.booking import Booking, BookingStatus
from src.domain.recurring_booking import RecurringBooking


class SqlAlchemyBookingRepository(BookingRepository):
    """
    SQLAlchemy implementation of BookingRepository

    Cancelled bookings are never billable and are filtered here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_billable_for_customer(
        self, customer_id: str, start: date, end_exclusive: date
    ) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(
                Booking.customer_id == customer_id,
                Booking.booking_date >= start,
                Booking.booking_date < end_exclusive,
                Booking.status != BookingStatus.CANCELLED,
            )
            .order_by(Booking.booking_date, Booking.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_customer_ids_with_bookings(self, start: date, end_exclusive: date) -> List[str]:
        stmt = (
            select(Booking.customer_id)
            .where(
                Booking.booking_date >= start,
                Booking.booking_date < end_exclusive,
                Booking.status != BookingStatus.CANCELLED,
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return [customer_id for customer_id in result.scalars().all() if customer_id]


class SqlAlchemyRecurringBookingRepository(RecurringBookingRepository):
    """SQLAlchemy implementation of RecurringBookingRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _overlapping(start: date, end_exclusive: date):
        return (
            RecurringBooking.is_active == True,  # noqa: E712
            RecurringBooking.start_date < end_exclusive,
            or_(RecurringBooking.end_date.is_(None), RecurringBooking.end_date >= start),
        )

    async def get_by_id(self, recurring_booking_id: str) -> Optional[RecurringBooking]:
        stmt = select(RecurringBooking).where(RecurringBooking.id == recurring_booking_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_customer(self, customer_id: str) -> List[RecurringBooking]:
        stmt = (
            select(RecurringBooking)
            .where(RecurringBooking.customer_id == customer_id)
            .order_by(RecurringBooking.day_of_week, RecurringBooking.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_overlapping(
        self, customer_id: str, start: date, end_exclusive: date
    ) -> List[RecurringBooking]:
        stmt = (
            select(RecurringBooking)
            .where(
                RecurringBooking.customer_id == customer_id,
                *self._overlapping(start, end_exclusive),
            )
            .order_by(RecurringBooking.day_of_week, RecurringBooking.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_customer_ids_with_active(self, start: date, end_exclusive: date) -> List[str]:
        stmt = (
            select(RecurringBooking.customer_id)
            .where(
                RecurringBooking.customer_id.is_not(None),
                *self._overlapping(start, end_exclusive),
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_ids(self) -> List[str]:
        stmt = (
            select(RecurringBooking.id)
            .where(RecurringBooking.is_active == True)  # noqa: E712
            .order_by(RecurringBooking.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
