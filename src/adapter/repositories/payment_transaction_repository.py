"""SQLAlchemy implementation of PaymentTransactionRepository

Provides persistence for PaymentTransaction entities with idempotency
enforcement via unique constraint on idempotency_key.
"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.payment_transaction import PaymentTransaction


class SqlAlchemyPaymentTransactionRepository(PaymentTransactionRepository):
    """
    SQLAlchemy implementation of PaymentTransactionRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - Immutable append-only transactions
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        """
        Create a new payment transaction

        Raises:
            IntegrityError: If idempotency_key already exists (duplicate submission)
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[PaymentTransaction]:
        """
        Retrieve transaction by idempotency key

        Used to check if the payment was already recorded (idempotency check).
        """
        stmt = select(PaymentTransaction).where(
            PaymentTransaction.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_monthly_payment_id(self, monthly_payment_id: int) -> List[PaymentTransaction]:
        """Transactions of one period summary, oldest first"""
        stmt = (
            select(PaymentTransaction)
            .where(PaymentTransaction.monthly_payment_id == monthly_payment_id)
            .order_by(PaymentTransaction.recorded_at, PaymentTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
