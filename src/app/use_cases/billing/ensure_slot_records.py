"""EnsureSlotRecords Use Case

Materializes one slot payment record per active recurring booking and
billing period. Safe to call repeatedly.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.booking_repository import RecurringBookingRepository
from src.app.repositories.recurring_booking_payment_repository import RecurringBookingPaymentRepository
from src.domain.billing_period import BillingPeriod
from src.domain.calendar_utils import count_occurrences, ranges_overlap
from src.domain.exceptions import BillingError, ConfigurationError
from src.domain.pricing import RateTable, session_amount
from src.domain.recurring_booking_payment import RecurringBookingPayment, SlotPaymentStatus
from .common import require_period, to_error
from .dtos import (
    EnsureSlotRecordsCommandDTO,
    EnsureSlotRecordsResponseDTO,
    SlotPaymentRecordDTO,
    build_slot_record_dto,
)

logger = logging.getLogger(__name__)


class EnsureSlotRecords:
    """
    Use Case: Ensure slot payment records exist for a period

    Business Rules:
    1. One record per (slot, month, year); an existing record is returned untouched
    2. New records start pending with amount = sessions x amount per session
    3. Unknown, inactive or out-of-range slots are skipped
    4. A concurrent creator winning the insert is treated as "already exists"
    5. Each slot commits on its own so one failure keeps earlier records
    """

    def __init__(
        self,
        uow: UnitOfWork,
        recurring_repo: RecurringBookingRepository,
        slot_payment_repo: RecurringBookingPaymentRepository,
        rate_table: RateTable,
        timezone: str,
    ):
        self.uow = uow
        self.recurring_repo = recurring_repo
        self.slot_payment_repo = slot_payment_repo
        self.rate_table = rate_table
        self.timezone = timezone

    async def execute(
        self,
        command: EnsureSlotRecordsCommandDTO,
        current_period: Optional[BillingPeriod] = None,
    ) -> Result[EnsureSlotRecordsResponseDTO]:
        """
        Execute record generation

        Args:
            command: Slot IDs and period
            current_period: Period treated as "now" for display status (defaults to today)

        Returns:
            Result[EnsureSlotRecordsResponseDTO]: Records with created/existing counts

        Raises:
            ConfigurationError: Rate table has no entry for a slot's sport
        """
        try:
            period = require_period(command.month, command.year)
        except BillingError as e:
            return Return.err(to_error(e))

        current = current_period or BillingPeriod.current(self.timezone)

        created = 0
        existing = 0
        skipped: list[str] = []
        records: list[SlotPaymentRecordDTO] = []

        try:
            for slot_id in dict.fromkeys(command.slot_ids):
                record = await self.slot_payment_repo.get_by_slot_period(
                    slot_id, period.month, period.year
                )
                if record:
                    existing += 1
                    records.append(build_slot_record_dto(record, current))
                    continue

                slot = await self.recurring_repo.get_by_id(slot_id)
                if not slot or not slot.is_active or not ranges_overlap(
                    slot.start_date, slot.end_date, period.first_day, period.next_first_day
                ):
                    skipped.append(slot_id)
                    continue

                sessions = count_occurrences(period.year, period.month, slot.day_of_week)
                per_session = session_amount(
                    slot.start_time,
                    slot.end_time,
                    slot.sport,
                    self.rate_table,
                    hourly_rate_override=slot.hourly_rate,
                )

                try:
                    record = await self.slot_payment_repo.create(
                        RecurringBookingPayment(
                            recurring_booking_id=slot_id,
                            month=period.month,
                            year=period.year,
                            amount=per_session * sessions,
                            sessions_count=sessions,
                            status=SlotPaymentStatus.PENDING,
                        )
                    )
                    dto = build_slot_record_dto(record, current)
                    await self.uow.commit()
                    created += 1
                    records.append(dto)
                except IntegrityError:
                    # Another caller created it first; keep theirs
                    await self.uow.rollback()
                    record = await self.slot_payment_repo.get_by_slot_period(
                        slot_id, period.month, period.year
                    )
                    if not record:
                        raise
                    existing += 1
                    records.append(build_slot_record_dto(record, current))

        except ConfigurationError:
            await self.uow.rollback()
            raise

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to ensure slot records for period {period}: {e}")
            return Return.err(
                Error(
                    code="ENSURE_SLOT_RECORDS_FAILED",
                    message="Failed to generate slot payment records",
                    reason=str(e),
                )
            )

        if skipped:
            logger.info(f"Skipped {len(skipped)} slots for period {period}: {skipped}")
        logger.info(f"Slot records for period {period}: created={created}, existing={existing}")

        return Return.ok(
            EnsureSlotRecordsResponseDTO(
                month=period.month,
                year=period.year,
                created=created,
                existing=existing,
                skipped_slot_ids=skipped,
                records=records,
            )
        )
