"""Payment status rules

Pure functions deriving stored and display statuses. Nothing here reads
the clock; callers pass the current period in.
"""

from decimal import Decimal
from enum import Enum
from src.domain.billing_period import BillingPeriod
from src.domain.monthly_payment import PaymentStatus
from src.domain.recurring_booking_payment import SlotPaymentStatus


class DisplayStatus(str, Enum):
    """Status shown for a slot payment record or slot group"""
    PAID = "paid"
    UNPAID = "unpaid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


def derive_payment_status(total_due: Decimal, total_paid: Decimal) -> PaymentStatus:
    """
    Status of a period summary

    paid    - total_paid >= total_due and total_due > 0
    partial - 0 < total_paid < total_due
    unpaid  - everything else
    """
    if total_due > 0 and total_paid >= total_due:
        return PaymentStatus.PAID
    if 0 < total_paid < total_due:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def derive_display_status(
    raw_status: str,
    record_month: int,
    record_year: int,
    current: BillingPeriod,
) -> DisplayStatus:
    """
    Display status of a slot payment record

    A record that is not paid is overdue once its period is strictly
    before the current period.
    """
    if raw_status == SlotPaymentStatus.PAID:
        return DisplayStatus.PAID

    if BillingPeriod(month=record_month, year=record_year).is_before(current):
        return DisplayStatus.OVERDUE

    return DisplayStatus.UNPAID
