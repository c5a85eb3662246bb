"""RecordPayment Use Case

Records a payment against a customer's billing period with idempotency
guarantees. The amount due is recomputed from bookings on every call.
"""

import logging
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.due_calculator import PeriodDueCalculator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.billing_period import BillingPeriod
from src.domain.exceptions import BillingError, ConfigurationError, ConflictError, InvalidAmount
from src.domain.monthly_payment import PaymentStatus
from src.domain.payment_status import derive_payment_status
from src.domain.payment_transaction import PaymentTransaction
from src.domain.pricing import to_money
from .common import (
    apply_due,
    get_or_create_summary,
    require_customer,
    require_period,
    require_text,
    stamp_paid,
    to_error,
)
from .dtos import (
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    build_period_summary_dto,
    build_transaction_dto,
)

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment for a customer and billing period

    Business Rules:
    1. Idempotency: Same idempotency_key returns the stored summary and transaction
    2. Fresh due: total_amount_due is recomputed from bookings, never trusted from storage
    3. Atomic updates: Summary update and transaction insert commit together
    4. Pessimistic locking: SELECT FOR UPDATE on the summary prevents lost updates
    5. marked_paid_by/at are stamped when the period becomes paid and never cleared

    Flow:
    1. Validate command
    2. Check idempotency (return existing if found)
    3. Verify customer exists
    4. Recompute amount due
    5. Get or create summary with lock
    6. Apply payment and recompute status
    7. Append transaction
    8. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        monthly_payment_repo: MonthlyPaymentRepository,
        transaction_repo: PaymentTransactionRepository,
        due_calculator: PeriodDueCalculator,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.monthly_payment_repo = monthly_payment_repo
        self.transaction_repo = transaction_repo
        self.due_calculator = due_calculator

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[RecordPaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO

        Returns:
            Result[RecordPaymentResponseDTO]: Summary and transaction, or error

        Errors:
            VALIDATION_ERROR: Missing customer_id, payment_method, recorded_by or invalid period
            INVALID_AMOUNT: amount <= 0
            CUSTOMER_NOT_FOUND: Unknown customer
            CONFLICT: Concurrent write on the same summary; nothing was recorded

        Raises:
            ConfigurationError: Rate table has no entry for a booked sport
        """
        try:
            period, amount = self._validate(command)
        except BillingError as e:
            return Return.err(to_error(e))

        try:
            # Step 1: Check idempotency - if transaction exists, return it
            if command.idempotency_key:
                duplicate = await self._find_duplicate(command)
                if duplicate:
                    return Return.ok(duplicate)

            # Step 2: Customer must exist
            await require_customer(self.customer_repo, command.customer_id)

            # Step 3: Recompute what is owed
            due = await self.due_calculator.compute(command.customer_id, period)

            # Step 4: Get summary with pessimistic lock, create if not exists
            summary = await get_or_create_summary(
                self.monthly_payment_repo, command.customer_id, period
            )

            # Step 5: Apply payment
            new_paid = summary.total_amount_paid + amount
            new_status = derive_payment_status(due.total_due, new_paid)

            apply_due(summary, due)
            summary.total_amount_paid = new_paid
            summary.status = new_status
            if new_status == PaymentStatus.PAID:
                stamp_paid(summary, command.recorded_by)

            summary = await self.monthly_payment_repo.update(summary)

            # Step 6: Append transaction
            transaction = await self.transaction_repo.create(
                PaymentTransaction(
                    monthly_payment_id=summary.id,
                    customer_id=command.customer_id,
                    amount=amount,
                    payment_method=command.payment_method,
                    reference=command.reference,
                    notes=command.notes,
                    recorded_by=command.recorded_by,
                    idempotency_key=command.idempotency_key,
                )
            )

            # Step 7: Commit summary and transaction together
            await self.uow.commit()

            response = RecordPaymentResponseDTO(
                summary=build_period_summary_dto(summary),
                transaction=build_transaction_dto(transaction),
                duplicate=False,
            )

            logger.info(
                f"Recorded payment of {amount} for customer {command.customer_id} "
                f"period {period}: paid={new_paid}/{due.total_due} status={new_status.value}"
            )

            return Return.ok(response)

        except ConfigurationError:
            await self.uow.rollback()
            raise

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except IntegrityError as e:
            # Lost a race on the summary or the idempotency key
            await self.uow.rollback()
            if command.idempotency_key:
                duplicate = await self._find_duplicate(command)
                if duplicate:
                    return Return.ok(duplicate)

            logger.warning(
                f"Concurrent payment write for customer {command.customer_id} period {period}: {e}"
            )
            return Return.err(
                to_error(
                    ConflictError(
                        "Payment conflicted with a concurrent write; nothing was recorded",
                        reason=str(e),
                    )
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record payment for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )

    def _validate(self, command: RecordPaymentCommandDTO) -> tuple[BillingPeriod, Decimal]:
        require_text(command.customer_id, "customer_id")
        require_text(command.payment_method, "payment_method")
        require_text(command.recorded_by, "recorded_by")
        period = require_period(command.month, command.year)

        if command.amount is None or command.amount <= 0 or to_money(command.amount) <= 0:
            raise InvalidAmount(
                f"Payment amount must be greater than 0, got {command.amount}",
                reason=f"amount={command.amount}",
            )

        return period, to_money(command.amount)

    async def _find_duplicate(self, command: RecordPaymentCommandDTO):
        """
        Look up an already-recorded transaction for the idempotency key

        Returns:
            RecordPaymentResponseDTO with duplicate=True, or None
        """
        existing = await self.transaction_repo.get_by_idempotency_key(command.idempotency_key)
        if not existing:
            return None

        summary = await self.monthly_payment_repo.get_by_id(existing.monthly_payment_id)

        if existing.customer_id != command.customer_id or existing.amount != to_money(command.amount):
            logger.warning(
                f"Idempotency key {command.idempotency_key} reused with different arguments; "
                f"returning the original transaction {existing.id}"
            )
        else:
            logger.info(
                f"Duplicate payment submission for key {command.idempotency_key}; "
                f"returning transaction {existing.id}"
            )

        return RecordPaymentResponseDTO(
            summary=build_period_summary_dto(summary),
            transaction=build_transaction_dto(existing),
            duplicate=True,
        )
