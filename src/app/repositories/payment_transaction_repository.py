"""Payment Transaction Repository Interface

Defines the contract for payment transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.payment_transaction import PaymentTransaction


class PaymentTransactionRepository(ABC):
    """
    Repository interface for PaymentTransaction persistence

    Transactions are immutable and append-only.
    Idempotency is enforced via unique idempotency_key.
    """

    @abstractmethod
    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        """
        Create a new payment transaction

        Args:
            transaction: PaymentTransaction entity to persist

        Returns:
            Created PaymentTransaction with generated ID

        Raises:
            IntegrityError: If idempotency_key already exists (duplicate transaction)
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[PaymentTransaction]:
        """
        Retrieve transaction by idempotency key

        Args:
            idempotency_key: Unique idempotency key

        Returns:
            PaymentTransaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_monthly_payment_id(self, monthly_payment_id: int) -> List[PaymentTransaction]:
        """All transactions of a summary, oldest first"""
        pass
