"""GetRecurringGroups Use Case

Presents a customer's recurring bookings as logical weekly commitments,
each with the payment status of its member slots for one period.
"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.booking_repository import RecurringBookingRepository
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.recurring_booking_payment_repository import RecurringBookingPaymentRepository
from src.domain.billing_period import BillingPeriod
from src.domain.calendar_utils import ranges_overlap
from src.domain.exceptions import BillingError, ConfigurationError
from src.domain.payment_status import DisplayStatus, derive_display_status
from src.domain.pricing import RateTable
from src.domain.recurring_booking_payment import SlotPaymentStatus
from src.domain.slot_grouping import derive_group_status, group_recurring_slots
from .common import require_customer, require_period, to_error
from .dtos import (
    RecurringGroupsResponseDTO,
    SlotGroupStatusDTO,
    SlotStatusDTO,
    build_slot_record_dto,
)


class GetRecurringGroups:
    """
    Get Recurring Groups Use Case

    Member slots that neither have a record for the period nor overlap it
    are listed but do not affect the group status.
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        recurring_repo: RecurringBookingRepository,
        slot_payment_repo: RecurringBookingPaymentRepository,
        rate_table: RateTable,
        timezone: str,
    ):
        self.customer_repo = customer_repo
        self.recurring_repo = recurring_repo
        self.slot_payment_repo = slot_payment_repo
        self.rate_table = rate_table
        self.timezone = timezone

    async def execute(
        self,
        customer_id: str,
        month: int,
        year: int,
        current_period: Optional[BillingPeriod] = None,
    ) -> Result[RecurringGroupsResponseDTO]:
        """
        Errors:
            VALIDATION_ERROR: Invalid period
            CUSTOMER_NOT_FOUND: Unknown customer

        Raises:
            ConfigurationError: Rate table has no entry for a slot's sport
        """
        try:
            period = require_period(month, year)
            await require_customer(self.customer_repo, customer_id)
        except ConfigurationError:
            raise
        except BillingError as e:
            return Return.err(to_error(e))

        current = current_period or BillingPeriod.current(self.timezone)

        rows = await self.recurring_repo.get_by_customer(customer_id)
        rows_by_id = {row.id: row for row in rows}
        groups = group_recurring_slots(rows, self.rate_table)

        records = {
            record.recurring_booking_id: record
            for record in await self.slot_payment_repo.get_by_slots_period(
                list(rows_by_id), period.month, period.year
            )
        }

        results: list[SlotGroupStatusDTO] = []
        for group in groups:
            members: list[SlotStatusDTO] = []
            counted: list[DisplayStatus] = []

            for slot_id in group.member_slot_ids:
                record = records.get(slot_id)
                if record:
                    record_dto = build_slot_record_dto(record, current)
                    status = DisplayStatus(record_dto.display_status)
                    counted.append(status)
                else:
                    record_dto = None
                    status = derive_display_status(
                        SlotPaymentStatus.PENDING.value, period.month, period.year, current
                    )
                    row = rows_by_id[slot_id]
                    if row.is_active and ranges_overlap(
                        row.start_date, row.end_date, period.first_day, period.next_first_day
                    ):
                        counted.append(status)

                members.append(
                    SlotStatusDTO(
                        slot_id=slot_id,
                        month=period.month,
                        year=period.year,
                        display_status=status.value,
                        record=record_dto,
                    )
                )

            results.append(
                SlotGroupStatusDTO(
                    group=group,
                    display_status=derive_group_status(counted).value,
                    members=members,
                )
            )

        return Return.ok(
            RecurringGroupsResponseDTO(
                customer_id=customer_id,
                month=period.month,
                year=period.year,
                groups=results,
            )
        )
