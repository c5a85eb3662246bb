"""MarkSlotPaymentPaid Use Case

Moves a slot payment record from pending to paid.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_booking_payment_repository import RecurringBookingPaymentRepository
from src.domain.billing_period import BillingPeriod
from src.domain.exceptions import BillingError, NotFound
from src.domain.recurring_booking_payment import SlotPaymentStatus
from .common import to_error
from .dtos import MarkSlotPaymentPaidCommandDTO, SlotPaymentRecordDTO, build_slot_record_dto

logger = logging.getLogger(__name__)


class MarkSlotPaymentPaid:
    """
    Use Case: Mark a slot payment record as paid

    Business Rules:
    1. pending -> paid happens exactly once
    2. Marking an already paid record returns it unchanged (paid_at is kept)
    3. There is no transition back to pending
    """

    def __init__(
        self,
        uow: UnitOfWork,
        slot_payment_repo: RecurringBookingPaymentRepository,
        timezone: str,
    ):
        self.uow = uow
        self.slot_payment_repo = slot_payment_repo
        self.timezone = timezone

    async def execute(
        self,
        command: MarkSlotPaymentPaidCommandDTO,
        current_period: Optional[BillingPeriod] = None,
    ) -> Result[SlotPaymentRecordDTO]:
        """
        Execute mark paid

        Errors:
            SLOT_PAYMENT_NOT_FOUND: Unknown record
        """
        current = current_period or BillingPeriod.current(self.timezone)

        try:
            record = await self.slot_payment_repo.get_by_id(command.payment_id, for_update=True)
            if not record:
                raise NotFound(
                    f"Slot payment {command.payment_id} not found",
                    code="SLOT_PAYMENT_NOT_FOUND",
                )

            if record.status == SlotPaymentStatus.PAID:
                logger.info(f"Slot payment {record.id} already paid at {record.paid_at}")
                dto = build_slot_record_dto(record, current)
                await self.uow.rollback()
                return Return.ok(dto)

            record.status = SlotPaymentStatus.PAID
            record.paid_at = datetime.utcnow()
            record.payment_method = command.payment_method
            record.notes = command.notes
            record = await self.slot_payment_repo.update(record)

            dto = build_slot_record_dto(record, current)
            await self.uow.commit()

            logger.info(
                f"Marked slot payment {record.id} paid "
                f"(slot {record.recurring_booking_id}, {record.month}/{record.year})"
            )
            return Return.ok(dto)

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to mark slot payment {command.payment_id} paid: {e}")
            return Return.err(
                Error(
                    code="MARK_SLOT_PAYMENT_FAILED",
                    message="Failed to mark slot payment as paid",
                    reason=str(e),
                )
            )
