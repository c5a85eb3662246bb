"""Recurring Booking Payment Repository Interface

Defines the contract for slot payment record persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.recurring_booking_payment import RecurringBookingPayment


class RecurringBookingPaymentRepository(ABC):
    """
    Repository interface for RecurringBookingPayment persistence

    (recurring_booking_id, month, year) is unique in the database; a
    duplicate insert raises IntegrityError and never overwrites.
    """

    @abstractmethod
    async def get_by_slot_period(
        self, recurring_booking_id: str, month: int, year: int
    ) -> Optional[RecurringBookingPayment]:
        """
        Retrieve the record of one slot and period

        Returns:
            RecurringBookingPayment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_slots_period(
        self, recurring_booking_ids: List[str], month: int, year: int
    ) -> List[RecurringBookingPayment]:
        """Records of several slots for one period"""
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[RecurringBookingPayment]:
        """
        Retrieve record by ID

        Args:
            payment_id: Record ID
            for_update: If True, lock the row with SELECT FOR UPDATE
        """
        pass

    @abstractmethod
    async def create(self, payment: RecurringBookingPayment) -> RecurringBookingPayment:
        """
        Insert a new record

        Raises:
            IntegrityError: If a record already exists for the slot and period
        """
        pass

    @abstractmethod
    async def update(self, payment: RecurringBookingPayment) -> RecurringBookingPayment:
        """Persist changes to an existing record"""
        pass
