"""Get Due Use Case

Read-only: what a customer owes for a billing period, freshly recomputed.
"""

from libs.result import Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.services.due_calculator import PeriodDueCalculator
from src.domain.exceptions import BillingError, ConfigurationError
from .common import require_customer, require_period, to_error
from .dtos import DueSummaryDTO, build_due_summary_dto


class GetDue:
    """
    Get Due Use Case

    Combines the freshly computed amount due with the stored paid amount.
    Never writes; a missing period summary means nothing has been paid.
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        monthly_payment_repo: MonthlyPaymentRepository,
        due_calculator: PeriodDueCalculator,
    ):
        self.customer_repo = customer_repo
        self.monthly_payment_repo = monthly_payment_repo
        self.due_calculator = due_calculator

    async def execute(self, customer_id: str, month: int, year: int) -> Result[DueSummaryDTO]:
        """
        Execute get due operation

        Args:
            customer_id: Customer identifier
            month: Billing month (1-12)
            year: Billing year

        Returns:
            Result[DueSummaryDTO]: Due summary or error

        Errors:
            VALIDATION_ERROR: Invalid period
            CUSTOMER_NOT_FOUND: Unknown customer

        Raises:
            ConfigurationError: Rate table has no entry for a booked sport
        """
        try:
            period = require_period(month, year)
            await require_customer(self.customer_repo, customer_id)
            due = await self.due_calculator.compute(customer_id, period)
        except ConfigurationError:
            raise
        except BillingError as e:
            return Return.err(to_error(e))

        summary = await self.monthly_payment_repo.get_by_customer_period(customer_id, month, year)

        return Return.ok(build_due_summary_dto(due, summary))
