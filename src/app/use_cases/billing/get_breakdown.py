"""GetBreakdown Use Case

Itemizes the charges behind a period's amount due: one line per one-off
booking and one line per calendar occurrence of each recurring booking.
"""

from typing import List
from libs.result import Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.repositories.payment_transaction_repository import PaymentTransactionRepository
from src.app.services.due_calculator import DueComputation, PeriodDueCalculator
from src.domain.calendar_utils import occurrence_dates
from src.domain.exceptions import BillingError, ConfigurationError
from src.domain.pricing import effective_rate
from .common import require_customer, require_period, to_error
from .dtos import (
    BreakdownResponseDTO,
    LineItemDTO,
    LineItemType,
    build_due_summary_dto,
    build_transaction_dto,
)


def build_line_items(due: DueComputation) -> List[LineItemDTO]:
    """
    Expand a due computation into dated line items

    Recurring charges are expanded with the same per-session amount the
    calculator used, so the line items always sum to ``due.total_due``.
    """
    items = [
        LineItemDTO(
            type=LineItemType.ONE_OFF,
            charge_date=charge.booking_date,
            court=charge.court,
            sport=charge.sport,
            time_range=f"{charge.start_time} - {charge.end_time}",
            hours=charge.hours,
            rate=effective_rate(charge.amount, charge.hours),
            amount=charge.amount,
            source_id=charge.id,
        )
        for charge in due.one_off_charges
    ]

    for charge in due.recurring_charges:
        rate = charge.hourly_rate if charge.hourly_rate is not None else effective_rate(
            charge.amount_per_session, charge.hours
        )
        for day in occurrence_dates(due.year, due.month, charge.day_of_week):
            items.append(
                LineItemDTO(
                    type=LineItemType.RECURRING,
                    charge_date=day,
                    court=charge.court,
                    sport=charge.sport,
                    time_range=f"{charge.start_time} - {charge.end_time}",
                    hours=charge.hours,
                    rate=rate,
                    amount=charge.amount_per_session,
                    source_id=charge.id,
                )
            )

    items.sort(key=lambda item: (item.charge_date, item.time_range, item.court))
    return items


class GetBreakdown:
    """
    Get Breakdown Use Case

    Read-only. Returns the line items, the due summary they add up to and
    the transactions recorded against the period.
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        monthly_payment_repo: MonthlyPaymentRepository,
        transaction_repo: PaymentTransactionRepository,
        due_calculator: PeriodDueCalculator,
    ):
        self.customer_repo = customer_repo
        self.monthly_payment_repo = monthly_payment_repo
        self.transaction_repo = transaction_repo
        self.due_calculator = due_calculator

    async def execute(self, customer_id: str, month: int, year: int) -> Result[BreakdownResponseDTO]:
        """
        Execute breakdown

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

        line_items = build_line_items(due)

        summary = await self.monthly_payment_repo.get_by_customer_period(customer_id, month, year)
        transactions = []
        if summary:
            transactions = await self.transaction_repo.get_by_monthly_payment_id(summary.id)

        return Return.ok(
            BreakdownResponseDTO(
                customer_id=customer_id,
                month=month,
                year=year,
                line_items=line_items,
                summary=build_due_summary_dto(due, summary),
                transactions=[build_transaction_dto(t) for t in transactions],
            )
        )
