"""GetSlotStatus Use Case"""

from typing import List, Optional
from libs.result import Result, Return
from src.app.repositories.booking_repository import RecurringBookingRepository
from src.app.repositories.recurring_booking_payment_repository import RecurringBookingPaymentRepository
from src.domain.billing_period import BillingPeriod
from src.domain.exceptions import BillingError, NotFound, ValidationError
from src.domain.payment_status import derive_display_status
from src.domain.recurring_booking_payment import SlotPaymentStatus
from .common import require_period, to_error
from .dtos import SlotStatusDTO, build_slot_record_dto


class GetSlotStatus:
    """
    Display status of slots for one period

    Read-only: a slot without a record yet is reported as unpaid, or
    overdue once the period is in the past. No record is created.
    """

    def __init__(
        self,
        recurring_repo: RecurringBookingRepository,
        slot_payment_repo: RecurringBookingPaymentRepository,
        timezone: str,
    ):
        self.recurring_repo = recurring_repo
        self.slot_payment_repo = slot_payment_repo
        self.timezone = timezone

    async def execute(
        self,
        slot_ids: List[str],
        month: int,
        year: int,
        current_period: Optional[BillingPeriod] = None,
    ) -> Result[List[SlotStatusDTO]]:
        """
        Errors:
            VALIDATION_ERROR: Empty slot list or invalid period
            SLOT_NOT_FOUND: A slot id does not exist
        """
        slot_ids = list(dict.fromkeys(slot_ids or []))
        try:
            if not slot_ids:
                raise ValidationError("slot_ids must not be empty")
            period = require_period(month, year)
            for slot_id in slot_ids:
                if not await self.recurring_repo.get_by_id(slot_id):
                    raise NotFound(f"Recurring booking {slot_id} not found", code="SLOT_NOT_FOUND")
        except BillingError as e:
            return Return.err(to_error(e))

        current = current_period or BillingPeriod.current(self.timezone)
        records = {
            record.recurring_booking_id: record
            for record in await self.slot_payment_repo.get_by_slots_period(
                slot_ids, period.month, period.year
            )
        }
        no_record_status = derive_display_status(
            SlotPaymentStatus.PENDING.value, period.month, period.year, current
        )

        statuses = []
        for slot_id in slot_ids:
            record = records.get(slot_id)
            record_dto = build_slot_record_dto(record, current) if record else None
            statuses.append(
                SlotStatusDTO(
                    slot_id=slot_id,
                    month=period.month,
                    year=period.year,
                    display_status=record_dto.display_status if record_dto else no_record_status.value,
                    record=record_dto,
                )
            )

        return Return.ok(statuses)
