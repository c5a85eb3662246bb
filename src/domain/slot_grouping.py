"""Recurring Slot Grouping

Collapses RecurringBooking rows that describe the same weekly commitment
into one SlotGroup. Rows are grouped by (day_of_week, start_time,
end_time, court_id, sport, payer identity). Payment records stay attached
to each member's own slot id.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple
from pydantic import BaseModel, Field
from src.domain.payment_status import DisplayStatus
from src.domain.pricing import RateTable, calculate_hours, session_amount
from src.domain.recurring_booking import RecurringBooking


class SlotGroup(BaseModel):
    """One user-facing weekly commitment"""

    day_of_week: int
    start_time: str
    end_time: str
    court_id: int
    sport: str
    customer_id: Optional[str] = None
    guest_name: Optional[str] = None
    label: Optional[str] = None
    duration: Decimal = Field(..., description="Hours per session")
    hourly_rate: Optional[Decimal] = Field(default=None, description="Override of the latest member")
    amount_per_session: Decimal
    start_date: date = Field(..., description="Earliest member start")
    end_date: Optional[date] = Field(default=None, description="None = open-ended")
    is_active: bool
    member_slot_ids: List[str]


def payer_identity(row: RecurringBooking) -> str:
    return row.customer_id or row.guest_name or row.label or "unknown"


def _group_key(row: RecurringBooking) -> Tuple:
    return (
        row.day_of_week,
        row.start_time,
        row.end_time,
        row.court_id,
        row.sport.strip().lower(),
        payer_identity(row),
    )


def build_slot_group(members: Sequence[RecurringBooking], rate_table: RateTable) -> SlotGroup:
    """
    Build a SlotGroup from rows sharing one grouping key

    The member with the latest start_date supplies the rate, since a rate
    change is recorded as a newer row.
    """
    latest = max(members, key=lambda row: row.start_date)
    open_ended = any(row.end_date is None for row in members)

    return SlotGroup(
        day_of_week=latest.day_of_week,
        start_time=latest.start_time,
        end_time=latest.end_time,
        court_id=latest.court_id,
        sport=latest.sport,
        customer_id=latest.customer_id,
        guest_name=latest.guest_name,
        label=latest.label,
        duration=calculate_hours(latest.start_time, latest.end_time),
        hourly_rate=latest.hourly_rate,
        amount_per_session=session_amount(
            latest.start_time,
            latest.end_time,
            latest.sport,
            rate_table,
            hourly_rate_override=latest.hourly_rate,
        ),
        start_date=min(row.start_date for row in members),
        end_date=None if open_ended else max(row.end_date for row in members),
        is_active=any(row.is_active for row in members),
        member_slot_ids=[row.id for row in sorted(members, key=lambda row: row.start_date)],
    )


def group_recurring_slots(
    rows: Iterable[RecurringBooking], rate_table: RateTable
) -> List[SlotGroup]:
    """
    Group recurring booking rows into logical weekly commitments

    Args:
        rows: RecurringBooking rows, in any order
        rate_table: Rates used when a row has no hourly override

    Returns:
        Groups ordered by day of week, court, payer and start time
    """
    ordered = sorted(
        rows,
        key=lambda row: (row.day_of_week, row.court_id, payer_identity(row), row.start_time),
    )

    buckets: "OrderedDict[Tuple, List[RecurringBooking]]" = OrderedDict()
    for row in ordered:
        buckets.setdefault(_group_key(row), []).append(row)

    return [build_slot_group(members, rate_table) for members in buckets.values()]


def derive_group_status(member_statuses: Sequence[DisplayStatus]) -> DisplayStatus:
    """
    Combine member display statuses into one group status

    All paid -> paid; some paid -> partial; otherwise overdue when any
    member is overdue, else unpaid.
    """
    if not member_statuses:
        return DisplayStatus.UNPAID

    paid = [status for status in member_statuses if status == DisplayStatus.PAID]
    if len(paid) == len(member_statuses):
        return DisplayStatus.PAID
    if paid:
        return DisplayStatus.PARTIAL
    if DisplayStatus.OVERDUE in member_statuses:
        return DisplayStatus.OVERDUE
    return DisplayStatus.UNPAID
