"""Booking Repository Interfaces

Read access to one-off and recurring bookings, filtered by customer and
date range.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from src.domain.booking import Booking
from src.domain.recurring_booking import RecurringBooking


class BookingRepository(ABC):
    """Repository interface for one-off Booking reads"""

    @abstractmethod
    async def get_billable_for_customer(
        self, customer_id: str, start: date, end_exclusive: date
    ) -> List[Booking]:
        """
        Retrieve a customer's non-cancelled bookings in [start, end_exclusive)

        Args:
            customer_id: Customer identifier
            start: First date included
            end_exclusive: First date excluded

        Returns:
            Bookings ordered by date and start time
        """
        pass

    @abstractmethod
    async def get_customer_ids_with_bookings(self, start: date, end_exclusive: date) -> List[str]:
        """Distinct customer IDs with a non-cancelled booking in [start, end_exclusive)"""
        pass


class RecurringBookingRepository(ABC):
    """Repository interface for RecurringBooking reads"""

    @abstractmethod
    async def get_by_id(self, recurring_booking_id: str) -> Optional[RecurringBooking]:
        """
        Retrieve recurring booking by ID

        Args:
            recurring_booking_id: Recurring booking identifier

        Returns:
            RecurringBooking if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_customer(self, customer_id: str) -> List[RecurringBooking]:
        """All recurring bookings of a customer, active or not"""
        pass

    @abstractmethod
    async def get_active_overlapping(
        self, customer_id: str, start: date, end_exclusive: date
    ) -> List[RecurringBooking]:
        """
        Retrieve a customer's active recurring bookings overlapping a date range

        A booking overlaps when start_date < end_exclusive and
        (end_date is None or end_date >= start).

        Args:
            customer_id: Customer identifier
            start: First date of the range
            end_exclusive: First date after the range

        Returns:
            Matching recurring bookings
        """
        pass

    @abstractmethod
    async def get_customer_ids_with_active(self, start: date, end_exclusive: date) -> List[str]:
        """Distinct customer IDs owning an active recurring booking overlapping the range"""
        pass

    @abstractmethod
    async def get_active_ids(self) -> List[str]:
        """IDs of every active recurring booking"""
        pass
