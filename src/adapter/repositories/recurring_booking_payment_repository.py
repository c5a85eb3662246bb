"""SQLAlchemy implementation of RecurringBookingPaymentRepository"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recurring_booking_payment_repository import RecurringBookingPaymentRepository
from src.domain.recurring_booking_payment import RecurringBookingPayment


class SqlAlchemyRecurringBookingPaymentRepository(RecurringBookingPaymentRepository):
    """
    SQLAlchemy implementation of RecurringBookingPaymentRepository

    A duplicate (recurring_booking_id, month, year) insert fails on the
    table's unique constraint and surfaces as IntegrityError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_slot_period(
        self, recurring_booking_id: str, month: int, year: int
    ) -> Optional[RecurringBookingPayment]:
        stmt = select(RecurringBookingPayment).where(
            RecurringBookingPayment.recurring_booking_id == recurring_booking_id,
            RecurringBookingPayment.month == month,
            RecurringBookingPayment.year == year,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slots_period(
        self, recurring_booking_ids: List[str], month: int, year: int
    ) -> List[RecurringBookingPayment]:
        if not recurring_booking_ids:
            return []
        stmt = select(RecurringBookingPayment).where(
            RecurringBookingPayment.recurring_booking_id.in_(recurring_booking_ids),
            RecurringBookingPayment.month == month,
            RecurringBookingPayment.year == year,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(
        self, payment_id: int, for_update: bool = False
    ) -> Optional[RecurringBookingPayment]:
        stmt = select(RecurringBookingPayment).where(RecurringBookingPayment.id == payment_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, payment: RecurringBookingPayment) -> RecurringBookingPayment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def update(self, payment: RecurringBookingPayment) -> RecurringBookingPayment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment
