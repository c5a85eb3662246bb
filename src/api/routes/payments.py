"""Billing API Routes

FastAPI routes for amounts due, breakdowns and payment recording.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.schemas.payment_request import BulkMarkPaidRequestSchema, RecordPaymentRequestSchema
from src.app.services.due_calculator import PeriodDueCalculator
from src.app.use_cases.billing.dtos import (
    BreakdownResponseDTO,
    BulkMarkPaidCommandDTO,
    BulkMarkPaidResponseDTO,
    DueSummaryDTO,
    PeriodOverviewDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    RecurringGroupsResponseDTO,
)
from src.app.use_cases.billing.bulk_mark_paid import BulkMarkPaid
from src.app.use_cases.billing.get_breakdown import GetBreakdown
from src.app.use_cases.billing.get_due import GetDue
from src.app.use_cases.billing.get_recurring_groups import GetRecurringGroups
from src.app.use_cases.billing.list_period_summaries import ListPeriodSummaries
from src.app.use_cases.billing.record_payment import RecordPayment
from src.adapter.repositories.booking_repository import (
    SqlAlchemyBookingRepository,
    SqlAlchemyRecurringBookingRepository,
)
from src.adapter.repositories.customer_repository import (
    SqlAlchemyCourtRepository,
    SqlAlchemyCustomerRepository,
)
from src.adapter.repositories.monthly_payment_repository import SqlAlchemyMonthlyPaymentRepository
from src.adapter.repositories.payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from src.adapter.repositories.recurring_booking_payment_repository import (
    SqlAlchemyRecurringBookingPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_rate_table, get_session
from src.domain.pricing import RateTable

router = APIRouter(prefix="/billing", tags=["Billing"])

ERROR_EXAMPLE = {
    "application/json": {
        "example": {"error": {"code": "VALIDATION_ERROR", "message": "Invalid billing period 13/2026"}}
    }
}


def build_due_calculator(session: AsyncSession, rate_table: RateTable) -> PeriodDueCalculator:
    return PeriodDueCalculator(
        booking_repo=SqlAlchemyBookingRepository(session),
        recurring_repo=SqlAlchemyRecurringBookingRepository(session),
        court_repo=SqlAlchemyCourtRepository(session),
        rate_table=rate_table,
    )


@router.get(
    "/customers/{customer_id}/due",
    response_model=DueSummaryDTO,
    responses={404: {"description": "Customer not found"}, 400: {"content": ERROR_EXAMPLE}},
)
async def get_due(
    customer_id: str,
    month: int = Query(..., description="Billing month (1-12)"),
    year: int = Query(..., description="Billing year"),
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Amount due for a customer and period.

    Recomputed from the customer's bookings on every call; `total_paid`
    comes from the recorded payments.
    """
    use_case = GetDue(
        customer_repo=SqlAlchemyCustomerRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        due_calculator=build_due_calculator(session, rate_table),
    )
    result = await use_case.execute(customer_id, month, year)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/customers/{customer_id}/breakdown",
    response_model=BreakdownResponseDTO,
    response_model_by_alias=True,
    responses={404: {"description": "Customer not found"}},
)
async def get_breakdown(
    customer_id: str,
    month: int = Query(..., description="Billing month (1-12)"),
    year: int = Query(..., description="Billing year"),
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Itemized charges behind the amount due.

    One line per one-off booking and one per occurrence of each recurring
    booking; line amounts add up to `summary.total_due`.
    """
    use_case = GetBreakdown(
        customer_repo=SqlAlchemyCustomerRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
        due_calculator=build_due_calculator(session, rate_table),
    )
    result = await use_case.execute(customer_id, month, year)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/customers/{customer_id}/recurring-groups",
    response_model=RecurringGroupsResponseDTO,
    responses={404: {"description": "Customer not found"}},
)
async def get_recurring_groups(
    customer_id: str,
    month: int = Query(..., description="Billing month (1-12)"),
    year: int = Query(..., description="Billing year"),
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """Recurring bookings grouped into weekly commitments, with their period status."""
    use_case = GetRecurringGroups(
        customer_repo=SqlAlchemyCustomerRepository(session),
        recurring_repo=SqlAlchemyRecurringBookingRepository(session),
        slot_payment_repo=SqlAlchemyRecurringBookingPaymentRepository(session),
        rate_table=rate_table,
        timezone=ApplicationConfig.BILLING_TIMEZONE,
    )
    result = await use_case.execute(customer_id, month, year)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/periods/{year}/{month}", response_model=PeriodOverviewDTO)
async def list_period_summaries(
    year: int,
    month: int,
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """All billable customers of a period, unpaid first, with totals."""
    use_case = ListPeriodSummaries(
        customer_repo=SqlAlchemyCustomerRepository(session),
        booking_repo=SqlAlchemyBookingRepository(session),
        recurring_repo=SqlAlchemyRecurringBookingRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        due_calculator=build_due_calculator(session, rate_table),
    )
    result = await use_case.execute(month, year)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/payments",
    response_model=RecordPaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Validation error or non-positive amount",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_AMOUNT",
                            "message": "Payment amount must be greater than 0, got 0"
                        }
                    }
                }
            }
        },
        404: {"description": "Customer not found"},
        409: {"description": "Concurrent write; nothing was recorded"},
    }
)
async def record_payment(
    request: RecordPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Record a payment against a customer's billing period.

    Repeated requests with the same `idempotency_key` return the stored
    transaction with `duplicate: true` and do not change the paid amount.

    **Returns:**
    - 200: Payment recorded (or duplicate returned)
    - 400: Invalid request parameters or amount
    - 404: Customer not found
    - 409: Concurrent write conflict
    """
    use_case = RecordPayment(
        uow=SqlAlchemyUnitOfWork(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
        due_calculator=build_due_calculator(session, rate_table),
    )

    command = RecordPaymentCommandDTO(**request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/payments/bulk", response_model=BulkMarkPaidResponseDTO)
async def bulk_mark_paid(
    request: BulkMarkPaidRequestSchema,
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Settle the remaining balance of several customers for one period.

    Each customer is settled independently; check `results` for the
    outcome (`paid`, `skipped`, `failed`) of each one.
    """
    use_case = BulkMarkPaid(
        uow=SqlAlchemyUnitOfWork(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
        due_calculator=build_due_calculator(session, rate_table),
        default_note_template=ApplicationConfig.BULK_PAYMENT_NOTE,
    )

    command = BulkMarkPaidCommandDTO(**request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
