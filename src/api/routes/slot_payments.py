"""Slot Payment API Routes

FastAPI routes for per-slot payment records of recurring bookings.
"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.schemas.payment_request import (
    EnsureSlotRecordsRequestSchema,
    MarkSlotPaymentPaidRequestSchema,
)
from src.app.use_cases.billing.dtos import (
    EnsureSlotRecordsCommandDTO,
    EnsureSlotRecordsResponseDTO,
    MarkSlotPaymentPaidCommandDTO,
    SlotPaymentRecordDTO,
    SlotStatusDTO,
)
from src.app.use_cases.billing.ensure_slot_records import EnsureSlotRecords
from src.app.use_cases.billing.get_slot_status import GetSlotStatus
from src.app.use_cases.billing.mark_slot_payment_paid import MarkSlotPaymentPaid
from src.adapter.repositories.booking_repository import SqlAlchemyRecurringBookingRepository
from src.adapter.repositories.recurring_booking_payment_repository import (
    SqlAlchemyRecurringBookingPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_rate_table, get_session
from src.domain.pricing import RateTable

router = APIRouter(prefix="/billing/slot-payments", tags=["Slot Payments"])


@router.post("/ensure", response_model=EnsureSlotRecordsResponseDTO)
async def ensure_slot_records(
    request: EnsureSlotRecordsRequestSchema,
    session: AsyncSession = Depends(get_session),
    rate_table: RateTable = Depends(get_rate_table),
):
    """
    Create missing slot payment records for a period.

    Safe to call repeatedly: existing records are returned unchanged.
    Unknown or inactive slots are listed in `skipped_slot_ids`.
    """
    use_case = EnsureSlotRecords(
        uow=SqlAlchemyUnitOfWork(session),
        recurring_repo=SqlAlchemyRecurringBookingRepository(session),
        slot_payment_repo=SqlAlchemyRecurringBookingPaymentRepository(session),
        rate_table=rate_table,
        timezone=ApplicationConfig.BILLING_TIMEZONE,
    )
    result = await use_case.execute(EnsureSlotRecordsCommandDTO(**request.model_dump()))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/status", response_model=List[SlotStatusDTO])
async def get_slot_status(
    slot_ids: List[str] = Query(..., description="Recurring booking IDs"),
    month: int = Query(..., description="Billing month (1-12)"),
    year: int = Query(..., description="Billing year"),
    session: AsyncSession = Depends(get_session),
):
    """Display status (paid, unpaid, overdue) of each slot for the period."""
    use_case = GetSlotStatus(
        recurring_repo=SqlAlchemyRecurringBookingRepository(session),
        slot_payment_repo=SqlAlchemyRecurringBookingPaymentRepository(session),
        timezone=ApplicationConfig.BILLING_TIMEZONE,
    )
    result = await use_case.execute(slot_ids, month, year)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/{payment_id}/paid", response_model=SlotPaymentRecordDTO)
async def mark_slot_payment_paid(
    payment_id: int,
    request: MarkSlotPaymentPaidRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Mark a slot payment record as paid. Already paid records are returned unchanged."""
    use_case = MarkSlotPaymentPaid(
        uow=SqlAlchemyUnitOfWork(session),
        slot_payment_repo=SqlAlchemyRecurringBookingPaymentRepository(session),
        timezone=ApplicationConfig.BILLING_TIMEZONE,
    )
    command = MarkSlotPaymentPaidCommandDTO(payment_id=payment_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
