"""Helpers shared by the billing use cases"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import ValidationError as PydanticValidationError
from libs.result import Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.monthly_payment_repository import MonthlyPaymentRepository
from src.app.services.due_calculator import DueComputation
from src.domain.billing_period import BillingPeriod
from src.domain.customer import Customer
from src.domain.exceptions import BillingError, NotFound, ValidationError
from src.domain.monthly_payment import MonthlyPayment, PaymentStatus


def to_error(exc: BillingError) -> Error:
    return Error(code=exc.code, message=exc.message, reason=exc.reason)


def require_period(month: int, year: int) -> BillingPeriod:
    try:
        return BillingPeriod(month=month, year=year)
    except (PydanticValidationError, TypeError):
        raise ValidationError(
            f"Invalid billing period {month}/{year}",
            reason="month must be 1-12 and year a positive integer",
        )


def require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing required field: {field_name}")
    return value


async def require_customer(customer_repo: CustomerRepository, customer_id: str) -> Customer:
    customer = await customer_repo.get_by_id(customer_id)
    if not customer:
        raise NotFound(
            f"Customer {customer_id} not found",
            reason="customer may have been removed",
            code="CUSTOMER_NOT_FOUND",
        )
    return customer


async def get_or_create_summary(
    monthly_payment_repo: MonthlyPaymentRepository,
    customer_id: str,
    period: BillingPeriod,
) -> MonthlyPayment:
    """
    Fetch the period summary with a row lock, creating it first if missing

    A concurrent creator makes ``create`` raise IntegrityError, which the
    calling use case handles.
    """
    summary = await monthly_payment_repo.get_by_customer_period(
        customer_id, period.month, period.year, for_update=True
    )
    if summary:
        return summary

    await monthly_payment_repo.create(
        MonthlyPayment(
            customer_id=customer_id,
            month=period.month,
            year=period.year,
            total_amount_due=Decimal("0.00"),
            total_amount_paid=Decimal("0.00"),
            total_hours=Decimal("0.00"),
            sessions_count=0,
            status=PaymentStatus.UNPAID,
        )
    )
    # Re-fetch with lock
    return await monthly_payment_repo.get_by_customer_period(
        customer_id, period.month, period.year, for_update=True
    )


def apply_due(summary: MonthlyPayment, due: DueComputation) -> None:
    """Copy the freshly computed due figures onto the summary"""
    summary.total_amount_due = due.total_due
    summary.sessions_count = due.bookings_count
    summary.total_hours = due.total_hours


def stamp_paid(summary: MonthlyPayment, recorded_by: str) -> None:
    summary.marked_paid_by = recorded_by
    summary.marked_paid_at = datetime.utcnow()
