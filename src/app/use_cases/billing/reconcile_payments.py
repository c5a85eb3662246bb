"""ReconcilePayments Use Case

Read-only check that a summary's total_amount_paid equals the sum of the
transactions recorded against it.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.monthly_payment import MonthlyPayment
from .dtos import PaymentDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcilePayments:
    """Use Case: Compare period summaries with their transaction history"""

    def __init__(
        self,
        uow: UnitOfWork,
        monthly_payment_repo: MonthlyPaymentRepository,
        transaction_repo: PaymentTransactionRepository,
    ):
        self.uow = uow
        self.monthly_payment_repo = monthly_payment_repo
        self.transaction_repo = transaction_repo

    async def execute(
        self, month: Optional[int] = None, year: Optional[int] = None
    ) -> Result[ReconciliationResultDTO]:
        """
        Check one period when both month and year are given, otherwise every period
        """
        started = time.time()
        checked_at = datetime.utcnow()

        try:
            if month is not None and year is not None:
                summaries = await self.monthly_payment_repo.get_by_period(month, year)
            else:
                summaries = await self.monthly_payment_repo.get_all()

            discrepancies = []
            for summary in summaries:
                discrepancy = await self._check(summary)
                if discrepancy:
                    discrepancies.append(discrepancy)

            elapsed_ms = int((time.time() - started) * 1000)
            log = logger.warning if discrepancies else logger.info
            log(
                f"Reconciled {len(summaries)} summaries in {elapsed_ms}ms, "
                f"{len(discrepancies)} out of balance"
            )

            return Return.ok(
                ReconciliationResultDTO(
                    total_summaries_checked=len(summaries),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=checked_at,
                    execution_time_ms=elapsed_ms,
                )
            )

        except Exception as e:
            logger.error(f"Payment reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile payments",
                    reason=str(e),
                )
            )

    async def _check(self, summary: MonthlyPayment) -> Optional[PaymentDiscrepancyDTO]:
        transactions = await self.transaction_repo.get_by_monthly_payment_id(summary.id)
        transaction_sum = sum((t.amount for t in transactions), Decimal("0.00"))
        if summary.total_amount_paid == transaction_sum:
            return None

        logger.warning(
            f"Customer {summary.customer_id} {summary.month}/{summary.year} out of balance: "
            f"paid={summary.total_amount_paid} transactions={transaction_sum}"
        )
        return PaymentDiscrepancyDTO(
            monthly_payment_id=summary.id,
            customer_id=summary.customer_id,
            month=summary.month,
            year=summary.year,
            recorded_paid=summary.total_amount_paid,
            transaction_sum=transaction_sum,
            discrepancy=summary.total_amount_paid - transaction_sum,
        )
