"""BulkMarkPaid Use Case

Settles many customers for one billing period. Each customer is its own
unit of work; a failure is reported for that customer and the batch
carries on.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.due_calculator import PeriodDueCalculator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.exceptions import BillingError, ConfigurationError, ValidationError
from .common import require_period, require_text, to_error
from .dtos import (
    BulkMarkPaidCommandDTO,
    BulkMarkPaidResponseDTO,
    CustomerSettlementDTO,
    MarkPeriodPaidCommandDTO,
    SettlementOutcome,
)
from .mark_period_paid import DEFAULT_NOTE_TEMPLATE, MarkPeriodPaid

logger = logging.getLogger(__name__)


class BulkMarkPaid:
    """
    Use Case: Settle a list of customers for one period

    Business Rules:
    1. No batch-wide idempotency key; each customer recomputes from scratch
    2. Already settled customers are skipped without a new transaction
    3. One customer's failure never aborts the others
    4. Duplicate customer ids are settled once, in first-seen order
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        monthly_payment_repo: MonthlyPaymentRepository,
        transaction_repo: PaymentTransactionRepository,
        due_calculator: PeriodDueCalculator,
        default_note_template: str = DEFAULT_NOTE_TEMPLATE,
    ):
        self.uow = uow
        self.mark_period_paid = MarkPeriodPaid(
            uow=uow,
            customer_repo=customer_repo,
            monthly_payment_repo=monthly_payment_repo,
            transaction_repo=transaction_repo,
            due_calculator=due_calculator,
            default_note_template=default_note_template,
        )

    async def execute(self, command: BulkMarkPaidCommandDTO) -> Result[BulkMarkPaidResponseDTO]:
        """
        Execute bulk settlement

        Returns:
            Result[BulkMarkPaidResponseDTO]: Per-customer outcomes and counts

        Errors:
            VALIDATION_ERROR: Empty customer list, missing fields or invalid period
        """
        try:
            if not command.customer_ids:
                raise ValidationError("customer_ids must not be empty")
            require_text(command.payment_method, "payment_method")
            require_text(command.recorded_by, "recorded_by")
            period = require_period(command.month, command.year)
        except BillingError as e:
            return Return.err(to_error(e))

        customer_ids = list(dict.fromkeys(command.customer_ids))
        logger.info(f"Bulk settlement of {len(customer_ids)} customers for period {period}")

        results: list[CustomerSettlementDTO] = []
        for customer_id in customer_ids:
            results.append(await self._settle(customer_id, command))

        processed = [r for r in results if r.outcome == SettlementOutcome.PAID]
        skipped = [r for r in results if r.outcome == SettlementOutcome.SKIPPED]
        failed = [r for r in results if r.outcome == SettlementOutcome.FAILED]
        total_amount = sum((r.amount for r in processed), Decimal("0.00"))

        if failed:
            logger.warning(
                f"Bulk settlement for period {period} finished with {len(failed)} failures: "
                f"{[r.customer_id for r in failed]}"
            )
        logger.info(
            f"Bulk settlement for period {period}: processed={len(processed)}, "
            f"skipped={len(skipped)}, failed={len(failed)}, total={total_amount}"
        )

        return Return.ok(
            BulkMarkPaidResponseDTO(
                month=period.month,
                year=period.year,
                processed=len(processed),
                skipped=len(skipped),
                failed=len(failed),
                total_amount=total_amount,
                results=results,
            )
        )

    async def _settle(self, customer_id: str, command: BulkMarkPaidCommandDTO) -> CustomerSettlementDTO:
        sub_command = MarkPeriodPaidCommandDTO(
            customer_id=customer_id,
            month=command.month,
            year=command.year,
            payment_method=command.payment_method,
            recorded_by=command.recorded_by,
            reference=command.reference,
            notes=command.notes,
        )

        try:
            result = await self.mark_period_paid.execute(sub_command)
        except ConfigurationError as e:
            logger.error(f"Configuration error while settling customer {customer_id}: {e.message}")
            return CustomerSettlementDTO(
                customer_id=customer_id,
                outcome=SettlementOutcome.FAILED,
                error_code=e.code,
                error_message=e.message,
            )

        if result.is_err():
            return CustomerSettlementDTO(
                customer_id=customer_id,
                outcome=SettlementOutcome.FAILED,
                error_code=result.error.code,
                error_message=result.error.message,
            )

        return result.value
