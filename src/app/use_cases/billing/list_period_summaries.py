"""ListPeriodSummaries Use Case

Period overview across all customers: who owes what, who has paid.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return
from src.app.repositories.booking_repository import BookingRepository, RecurringBookingRepository
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.services.due_calculator import PeriodDueCalculator
from src.domain.exceptions import BillingError, ConfigurationError
from src.domain.monthly_payment import PaymentStatus
from src.domain.payment_status import derive_payment_status
from .common import require_period, to_error
from .dtos import PeriodCustomerSummaryDTO, PeriodOverviewDTO, PeriodTotalsDTO

logger = logging.getLogger(__name__)

STATUS_ORDER = {
    PaymentStatus.UNPAID.value: 0,
    PaymentStatus.PARTIAL.value: 1,
    PaymentStatus.PAID.value: 2,
}


class ListPeriodSummaries:
    """
    List Period Summaries Use Case

    Billable customers are those with a one-off booking in the period, an
    active recurring booking overlapping it, or a stored summary for it.
    Due amounts are recomputed for each; customers with nothing due and
    nothing paid are left out.

    Ordering: unpaid first, then partial, then paid; within a status the
    largest unpaid amount comes first.
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        booking_repo: BookingRepository,
        recurring_repo: RecurringBookingRepository,
        monthly_payment_repo: MonthlyPaymentRepository,
        due_calculator: PeriodDueCalculator,
    ):
        self.customer_repo = customer_repo
        self.booking_repo = booking_repo
        self.recurring_repo = recurring_repo
        self.monthly_payment_repo = monthly_payment_repo
        self.due_calculator = due_calculator

    async def execute(self, month: int, year: int) -> Result[PeriodOverviewDTO]:
        """
        Execute period listing

        Errors:
            VALIDATION_ERROR: Invalid period

        Raises:
            ConfigurationError: Rate table has no entry for a booked sport
        """
        try:
            period = require_period(month, year)
        except BillingError as e:
            return Return.err(to_error(e))

        summaries = {
            s.customer_id: s for s in await self.monthly_payment_repo.get_by_period(month, year)
        }
        customer_ids = set(summaries)
        customer_ids.update(
            await self.booking_repo.get_customer_ids_with_bookings(
                period.first_day, period.next_first_day
            )
        )
        customer_ids.update(
            await self.recurring_repo.get_customer_ids_with_active(
                period.first_day, period.next_first_day
            )
        )

        customers = {
            c.id: c for c in await self.customer_repo.get_by_ids(sorted(customer_ids))
        }

        rows: list[PeriodCustomerSummaryDTO] = []
        for customer_id in sorted(customer_ids):
            customer = customers.get(customer_id)
            if not customer:
                logger.warning(f"Skipping unknown customer {customer_id} in period {period}")
                continue

            try:
                due = await self.due_calculator.compute(customer_id, period)
            except ConfigurationError:
                logger.error(f"Rate configuration missing while listing customer {customer_id}")
                raise

            summary = summaries.get(customer_id)
            total_paid = summary.total_amount_paid if summary else Decimal("0.00")
            if due.total_due == 0 and total_paid == 0:
                continue

            rows.append(
                PeriodCustomerSummaryDTO(
                    customer_id=customer_id,
                    name=customer.name,
                    email=customer.email,
                    phone=customer.phone,
                    total_due=due.total_due,
                    total_paid=total_paid,
                    unpaid_amount=max(due.total_due - total_paid, Decimal("0.00")),
                    total_hours=due.total_hours,
                    bookings_count=due.bookings_count,
                    status=derive_payment_status(due.total_due, total_paid).value,
                    monthly_payment_id=summary.id if summary else None,
                )
            )

        rows.sort(key=lambda row: (STATUS_ORDER[row.status], -row.unpaid_amount, row.name))

        totals = PeriodTotalsDTO(
            total_due=sum((r.total_due for r in rows), Decimal("0.00")),
            total_paid=sum((r.total_paid for r in rows), Decimal("0.00")),
            total_unpaid=sum((r.unpaid_amount for r in rows), Decimal("0.00")),
            customers_count=len(rows),
            paid_count=len([r for r in rows if r.status == PaymentStatus.PAID.value]),
            partial_count=len([r for r in rows if r.status == PaymentStatus.PARTIAL.value]),
            unpaid_count=len([r for r in rows if r.status == PaymentStatus.UNPAID.value]),
        )

        logger.info(
            f"Listed {totals.customers_count} customers for period {period}: "
            f"due={totals.total_due} paid={totals.total_paid}"
        )

        return Return.ok(PeriodOverviewDTO(month=month, year=year, customers=rows, totals=totals))
