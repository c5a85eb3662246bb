"""Monthly Payment Repository Interface

Defines the contract for period summary persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.monthly_payment import MonthlyPayment


class MonthlyPaymentRepository(ABC):
    """
    Repository interface for MonthlyPayment persistence

    Uniqueness of (customer_id, month, year) is enforced by the database;
    a concurrent duplicate create surfaces as IntegrityError.
    """

    @abstractmethod
    async def get_by_customer_period(
        self, customer_id: str, month: int, year: int, for_update: bool = False
    ) -> Optional[MonthlyPayment]:
        """
        Retrieve the summary of one customer and period

        Args:
            customer_id: Customer identifier
            month: Billing month
            year: Billing year
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            MonthlyPayment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, monthly_payment_id: int) -> Optional[MonthlyPayment]:
        """
        Retrieve summary by ID

        Returns:
            MonthlyPayment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_period(self, month: int, year: int) -> List[MonthlyPayment]:
        """All summaries of a billing period"""
        pass

    @abstractmethod
    async def get_all(self) -> List[MonthlyPayment]:
        """All summaries, oldest period first"""
        pass

    @abstractmethod
    async def create(self, monthly_payment: MonthlyPayment) -> MonthlyPayment:
        """
        Create a new summary

        Raises:
            IntegrityError: If a summary already exists for the customer and period
        """
        pass

    @abstractmethod
    async def update(self, monthly_payment: MonthlyPayment) -> MonthlyPayment:
        """Persist changes to an existing summary and bump updated_at"""
        pass
