"""MarkPeriodPaid Use Case

Settles one customer's billing period in full. Shared by the bulk
settlement flow, which runs it once per customer.
"""

import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.due_calculator import DueComputation, PeriodDueCalculator
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.domain.billing_period import BillingPeriod
from src.domain.exceptions import BillingError, ConfigurationError, ConflictError
from src.domain.monthly_payment import MonthlyPayment, PaymentStatus
from src.domain.payment_status import derive_payment_status
from src.domain.payment_transaction import PaymentTransaction
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
    CustomerSettlementDTO,
    MarkPeriodPaidCommandDTO,
    SettlementOutcome,
    build_period_summary_dto,
)

logger = logging.getLogger(__name__)

DEFAULT_NOTE_TEMPLATE = "Bulk payment for {month}/{year}"


class MarkPeriodPaid:
    """
    Use Case: Settle a customer's period

    Business Rules:
    1. Due amount is recomputed before settling
    2. remaining = total_due - total_paid; remaining <= 0 is reported as skipped,
       with the stored status recomputed and no summary created
    3. Otherwise total_amount_paid becomes total_due, status paid, marked_paid_by/at stamped
    4. Exactly one transaction for the remaining amount is appended
    5. Summary update and transaction insert commit together
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
        self.customer_repo = customer_repo
        self.monthly_payment_repo = monthly_payment_repo
        self.transaction_repo = transaction_repo
        self.due_calculator = due_calculator
        self.default_note_template = default_note_template

    async def execute(self, command: MarkPeriodPaidCommandDTO) -> Result[CustomerSettlementDTO]:
        """
        Execute settlement

        Returns:
            Result[CustomerSettlementDTO]: outcome paid or skipped, or error

        Errors:
            VALIDATION_ERROR: Missing fields or invalid period
            CUSTOMER_NOT_FOUND: Unknown customer
            CONFLICT: Concurrent write on the same summary

        Raises:
            ConfigurationError: Rate table has no entry for a booked sport
        """
        try:
            require_text(command.customer_id, "customer_id")
            require_text(command.payment_method, "payment_method")
            require_text(command.recorded_by, "recorded_by")
            period = require_period(command.month, command.year)

            await require_customer(self.customer_repo, command.customer_id)
            due = await self.due_calculator.compute(command.customer_id, period)

            summary = await self.monthly_payment_repo.get_by_customer_period(
                command.customer_id, period.month, period.year, for_update=True
            )
            already_paid = summary.total_amount_paid if summary else Decimal("0.00")

            remaining = due.total_due - already_paid
            if remaining <= 0:
                return await self._skip(command, period, summary, due)

            if summary is None:
                summary = await get_or_create_summary(
                    self.monthly_payment_repo, command.customer_id, period
                )
                remaining = due.total_due - summary.total_amount_paid

            apply_due(summary, due)
            summary.total_amount_paid = due.total_due
            summary.status = PaymentStatus.PAID
            stamp_paid(summary, command.recorded_by)
            summary = await self.monthly_payment_repo.update(summary)

            notes = command.notes or self.default_note_template.format(
                month=period.month, year=period.year
            )
            transaction = await self.transaction_repo.create(
                PaymentTransaction(
                    monthly_payment_id=summary.id,
                    customer_id=command.customer_id,
                    amount=remaining,
                    payment_method=command.payment_method,
                    reference=command.reference,
                    notes=notes,
                    recorded_by=command.recorded_by,
                )
            )

            await self.uow.commit()

            result = CustomerSettlementDTO(
                customer_id=command.customer_id,
                outcome=SettlementOutcome.PAID,
                amount=remaining,
                transaction_id=transaction.id,
                summary=build_period_summary_dto(summary),
            )

            logger.info(
                f"Settled customer {command.customer_id} period {period}: "
                f"recorded {remaining}, total paid {due.total_due}"
            )

            return Return.ok(result)

        except ConfigurationError:
            await self.uow.rollback()
            raise

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except IntegrityError as e:
            await self.uow.rollback()
            return Return.err(
                to_error(
                    ConflictError(
                        "Settlement conflicted with a concurrent write; nothing was recorded",
                        reason=str(e),
                    )
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to settle customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="MARK_PERIOD_PAID_FAILED",
                    message="Failed to mark period as paid",
                    reason=str(e),
                )
            )

    async def _skip(
        self,
        command: MarkPeriodPaidCommandDTO,
        period: BillingPeriod,
        summary: Optional[MonthlyPayment],
        due: DueComputation,
    ) -> Result[CustomerSettlementDTO]:
        """Nothing left to pay: refresh an existing summary, never create one"""
        if summary is not None:
            was_paid = summary.status == PaymentStatus.PAID
            apply_due(summary, due)
            summary.status = derive_payment_status(due.total_due, summary.total_amount_paid)
            if summary.status == PaymentStatus.PAID and not was_paid:
                stamp_paid(summary, command.recorded_by)
            summary = await self.monthly_payment_repo.update(summary)
            await self.uow.commit()

        logger.info(
            f"Skipped settlement for customer {command.customer_id} period {period}: "
            f"paid={summary.total_amount_paid if summary else Decimal('0.00')} due={due.total_due}"
        )
        return Return.ok(
            CustomerSettlementDTO(
                customer_id=command.customer_id,
                outcome=SettlementOutcome.SKIPPED,
                amount=Decimal("0.00"),
                summary=build_period_summary_dto(summary) if summary else None,
            )
        )
