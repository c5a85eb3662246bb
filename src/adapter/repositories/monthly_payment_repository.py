"""SQLAlchemy implementation of MonthlyPaymentRepository

Provides persistence for period summaries with pessimistic locking support
to prevent lost updates when two payments race on the same period.
"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.domain.monthly_payment import MonthlyPayment


class SqlAlchemyMonthlyPaymentRepository(MonthlyPaymentRepository):
    """
    SQLAlchemy implementation of MonthlyPaymentRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - (customer_id, month, year) uniqueness enforced by the table constraint
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_customer_period(
        self, customer_id: str, month: int, year: int, for_update: bool = False
    ) -> Optional[MonthlyPayment]:
        """
        Retrieve summary with optional row-level locking

        Args:
            customer_id: Customer identifier
            month: Billing month
            year: Billing year
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            MonthlyPayment if found, None otherwise
        """
        stmt = select(MonthlyPayment).where(
            MonthlyPayment.customer_id == customer_id,
            MonthlyPayment.month == month,
            MonthlyPayment.year == year,
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, monthly_payment_id: int) -> Optional[MonthlyPayment]:
        stmt = select(MonthlyPayment).where(MonthlyPayment.id == monthly_payment_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_period(self, month: int, year: int) -> List[MonthlyPayment]:
        stmt = select(MonthlyPayment).where(
            MonthlyPayment.month == month,
            MonthlyPayment.year == year,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_all(self) -> List[MonthlyPayment]:
        stmt = select(MonthlyPayment).order_by(
            MonthlyPayment.year, MonthlyPayment.month, MonthlyPayment.id
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, monthly_payment: MonthlyPayment) -> MonthlyPayment:
        """
        Create a new period summary

        Raises:
            IntegrityError: If the customer already has a summary for the period
        """
        self.session.add(monthly_payment)
        await self.session.flush()
        await self.session.refresh(monthly_payment)
        return monthly_payment

    async def update(self, monthly_payment: MonthlyPayment) -> MonthlyPayment:
        """
        Persist summary changes and bump updated_at

        Note:
            Should be called within a transaction with the summary already locked
        """
        monthly_payment.updated_at = datetime.utcnow()
        self.session.add(monthly_payment)
        await self.session.flush()
        await self.session.refresh(monthly_payment)
        return monthly_payment
