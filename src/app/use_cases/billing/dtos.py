"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs, plus builder
functions turning entities into responses.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
from src.app.services.due_calculator import DueComputation
from src.domain.billing_period import BillingPeriod
from src.domain.monthly_payment import MonthlyPayment
from src.domain.payment_status import derive_display_status, derive_payment_status
from src.domain.payment_transaction import PaymentTransaction
from src.domain.recurring_booking_payment import RecurringBookingPayment
from src.domain.slot_grouping import SlotGroup


# ---------------------------------------------------------------- payments


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Used as input to RecordPayment use case. Amount and identifying fields
    are validated by the use case so that failures carry billing error codes.
    """

    customer_id: str = Field(
        ...,
        description="Customer identifier"
    )

    month: int = Field(
        ...,
        description="Billing month (1-12)"
    )

    year: int = Field(
        ...,
        description="Billing year"
    )

    amount: Decimal = Field(
        ...,
        description="Amount received (must be > 0)"
    )

    payment_method: str = Field(
        ...,
        description="Payment method (e.g. cash, bank_transfer, card)"
    )

    recorded_by: str = Field(
        ...,
        description="Operator recording the payment"
    )

    reference: Optional[str] = Field(
        default=None,
        description="External reference (receipt or transfer number)"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        description="Caller-supplied key; retries with the same key are not recorded twice"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "c0ffee00-0000-4000-8000-000000000001",
                "month": 2,
                "year": 2026,
                "amount": "200.00",
                "payment_method": "bank_transfer",
                "recorded_by": "admin@club.example",
                "reference": "TRX-8812",
                "notes": "First instalment",
                "idempotency_key": "pay:c0ffee00:2026-02:1"
            }
        }


class PeriodSummaryDTO(BaseModel):
    """Period summary as seen by callers"""

    id: int
    customer_id: str
    month: int
    year: int
    total_amount_due: Decimal
    total_amount_paid: Decimal
    unpaid_amount: Decimal
    sessions_count: int
    total_hours: Decimal
    status: str
    marked_paid_by: Optional[str] = None
    marked_paid_at: Optional[datetime] = None


class PaymentTransactionDTO(BaseModel):
    """Recorded payment transaction"""

    id: int
    monthly_payment_id: int
    customer_id: str
    amount: Decimal
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    recorded_by: str
    recorded_at: datetime
    idempotency_key: Optional[str] = None


class RecordPaymentResponseDTO(BaseModel):
    """
    Response DTO for RecordPayment

    duplicate is True when the idempotency key had already been recorded;
    summary and transaction are then the stored ones, unchanged.
    """

    summary: PeriodSummaryDTO
    transaction: PaymentTransactionDTO
    duplicate: bool = False


class MarkPeriodPaidCommandDTO(BaseModel):
    """Command DTO for settling one customer's period in full"""

    customer_id: str = Field(..., description="Customer identifier")
    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")
    payment_method: str = Field(..., description="Payment method")
    recorded_by: str = Field(..., description="Operator recording the settlement")
    reference: Optional[str] = Field(default=None, description="External reference")
    notes: Optional[str] = Field(default=None, description="Notes (defaults to the bulk payment note)")


class BulkMarkPaidCommandDTO(BaseModel):
    """
    Command DTO for bulk settlement

    Used as input to BulkMarkPaid use case. No batch-wide idempotency key:
    each customer is recomputed and settled independently.
    """

    customer_ids: List[str] = Field(
        ...,
        description="Customers to settle"
    )

    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")
    payment_method: str = Field(..., description="Payment method")
    recorded_by: str = Field(..., description="Operator recording the settlement")
    reference: Optional[str] = Field(default=None, description="External reference")
    notes: Optional[str] = Field(default=None, description="Notes (defaults to the bulk payment note)")

    class Config:
        json_schema_extra = {
            "example": {
                "customer_ids": ["c0ffee00-0000-4000-8000-000000000001"],
                "month": 2,
                "year": 2026,
                "payment_method": "cash",
                "recorded_by": "admin@club.example"
            }
        }


class SettlementOutcome(str, Enum):
    """Per-customer outcome of a settlement"""
    PAID = "paid"
    SKIPPED = "skipped"
    FAILED = "failed"


class CustomerSettlementDTO(BaseModel):
    """Result of settling one customer"""

    customer_id: str
    outcome: SettlementOutcome
    amount: Decimal = Decimal("0.00")
    transaction_id: Optional[int] = None
    summary: Optional[PeriodSummaryDTO] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class BulkMarkPaidResponseDTO(BaseModel):
    """Response DTO for BulkMarkPaid"""

    month: int
    year: int
    processed: int = Field(..., description="Customers settled (outcome=paid)")
    skipped: int = Field(..., description="Customers with nothing left to pay")
    failed: int = Field(..., description="Customers whose unit of work failed")
    total_amount: Decimal = Field(..., description="Sum of all settlement transactions")
    results: List[CustomerSettlementDTO]


# --------------------------------------------------------------- due & breakdown


class DueSummaryDTO(BaseModel):
    """
    Response DTO for GetDue

    total_due is freshly recomputed; total_paid comes from the stored
    summary (zero when nothing has been paid yet).
    """

    customer_id: str = Field(..., description="Customer identifier")
    month: int = Field(..., description="Billing month")
    year: int = Field(..., description="Billing year")
    total_due: Decimal = Field(..., description="Amount owed for the period")
    total_paid: Decimal = Field(..., description="Amount recorded as paid")
    unpaid_amount: Decimal = Field(..., description="max(total_due - total_paid, 0)")
    total_hours: Decimal = Field(..., description="Billable hours")
    bookings_count: int = Field(..., description="One-off bookings + recurring sessions")
    one_off_count: int = Field(..., description="One-off bookings in the period")
    recurring_sessions: int = Field(..., description="Recurring occurrences in the period")
    status: str = Field(..., description="unpaid, partial or paid")

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "c0ffee00-0000-4000-8000-000000000001",
                "month": 2,
                "year": 2026,
                "total_due": "480.00",
                "total_paid": "200.00",
                "unpaid_amount": "280.00",
                "total_hours": "6.00",
                "bookings_count": 4,
                "one_off_count": 0,
                "recurring_sessions": 4,
                "status": "partial"
            }
        }


class LineItemType(str, Enum):
    """Breakdown line item source"""
    ONE_OFF = "one_off"
    RECURRING = "recurring"


class LineItemDTO(BaseModel):
    """One charge in a period breakdown"""

    type: LineItemType
    charge_date: date = Field(..., alias="date")
    court: str
    sport: str
    time_range: str
    hours: Decimal
    rate: Decimal = Field(..., description="Effective hourly rate")
    amount: Decimal
    source_id: str = Field(..., description="Booking or recurring booking ID")

    class Config:
        populate_by_name = True


class BreakdownResponseDTO(BaseModel):
    """Response DTO for GetBreakdown"""

    customer_id: str
    month: int
    year: int
    line_items: List[LineItemDTO]
    summary: DueSummaryDTO
    transactions: List[PaymentTransactionDTO]


# ------------------------------------------------------------ period overview


class PeriodCustomerSummaryDTO(BaseModel):
    """One billable customer in the period overview"""

    customer_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    total_due: Decimal
    total_paid: Decimal
    unpaid_amount: Decimal
    total_hours: Decimal
    bookings_count: int
    status: str
    monthly_payment_id: Optional[int] = None


class PeriodTotalsDTO(BaseModel):
    total_due: Decimal
    total_paid: Decimal
    total_unpaid: Decimal
    customers_count: int
    paid_count: int
    partial_count: int
    unpaid_count: int


class PeriodOverviewDTO(BaseModel):
    """Response DTO for ListPeriodSummaries"""

    month: int
    year: int
    customers: List[PeriodCustomerSummaryDTO]
    totals: PeriodTotalsDTO


# ------------------------------------------------------------ slot payments


class EnsureSlotRecordsCommandDTO(BaseModel):
    """Command DTO for materializing slot payment records"""

    slot_ids: List[str] = Field(..., description="Recurring booking IDs")
    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")


class SlotPaymentRecordDTO(BaseModel):
    """Slot payment record with its derived display status"""

    id: int
    recurring_booking_id: str
    month: int
    year: int
    amount: Decimal
    sessions_count: int
    status: str = Field(..., description="Raw status (pending, paid)")
    display_status: str = Field(..., description="paid, unpaid or overdue")
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class EnsureSlotRecordsResponseDTO(BaseModel):
    """Response DTO for EnsureSlotRecords"""

    month: int
    year: int
    created: int = Field(..., description="Records created by this call")
    existing: int = Field(..., description="Records that already existed")
    skipped_slot_ids: List[str] = Field(..., description="Unknown or inactive slots")
    records: List[SlotPaymentRecordDTO]


class SlotStatusDTO(BaseModel):
    """Status of one slot for one period"""

    slot_id: str
    month: int
    year: int
    display_status: str
    record: Optional[SlotPaymentRecordDTO] = Field(
        default=None,
        description="None when no record has been generated yet"
    )


class MarkSlotPaymentPaidCommandDTO(BaseModel):
    """Command DTO for marking a slot payment record paid"""

    payment_id: int = Field(..., description="Slot payment record ID")
    payment_method: Optional[str] = Field(default=None, description="Payment method")
    notes: Optional[str] = Field(default=None, description="Notes")


class SlotGroupStatusDTO(BaseModel):
    """A logical weekly commitment with its period status"""

    group: SlotGroup
    display_status: str
    members: List[SlotStatusDTO]


class RecurringGroupsResponseDTO(BaseModel):
    """Response DTO for GetRecurringGroups"""

    customer_id: str
    month: int
    year: int
    groups: List[SlotGroupStatusDTO]


# ------------------------------------------------------------ reconciliation


class PaymentDiscrepancyDTO(BaseModel):
    """Summary whose paid amount differs from its transaction sum"""

    monthly_payment_id: int
    customer_id: str
    month: int
    year: int
    recorded_paid: Decimal
    transaction_sum: Decimal
    discrepancy: Decimal = Field(..., description="recorded_paid - transaction_sum")


class ReconciliationResultDTO(BaseModel):
    """Response DTO for ReconcilePayments"""

    total_summaries_checked: int
    discrepancies_found: int
    discrepancies: List[PaymentDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


class SlotRecordGenerationResultDTO(BaseModel):
    """Summary of one slot payment generation run"""

    month: int
    year: int
    total_slots: int
    created: int
    existing: int
    skipped: int
    execution_time_ms: int


# ------------------------------------------------------------ builders


def build_period_summary_dto(payment: MonthlyPayment) -> PeriodSummaryDTO:
    status = payment.status.value if hasattr(payment.status, "value") else payment.status
    return PeriodSummaryDTO(
        id=payment.id,
        customer_id=payment.customer_id,
        month=payment.month,
        year=payment.year,
        total_amount_due=payment.total_amount_due,
        total_amount_paid=payment.total_amount_paid,
        unpaid_amount=payment.unpaid_amount,
        sessions_count=payment.sessions_count,
        total_hours=payment.total_hours,
        status=status,
        marked_paid_by=payment.marked_paid_by,
        marked_paid_at=payment.marked_paid_at,
    )


def build_transaction_dto(transaction: PaymentTransaction) -> PaymentTransactionDTO:
    return PaymentTransactionDTO(
        id=transaction.id,
        monthly_payment_id=transaction.monthly_payment_id,
        customer_id=transaction.customer_id,
        amount=transaction.amount,
        payment_method=transaction.payment_method,
        reference=transaction.reference,
        notes=transaction.notes,
        recorded_by=transaction.recorded_by,
        recorded_at=transaction.recorded_at,
        idempotency_key=transaction.idempotency_key,
    )


def build_slot_record_dto(record: RecurringBookingPayment, current: BillingPeriod) -> SlotPaymentRecordDTO:
    status = record.status.value if hasattr(record.status, "value") else record.status
    return SlotPaymentRecordDTO(
        id=record.id,
        recurring_booking_id=record.recurring_booking_id,
        month=record.month,
        year=record.year,
        amount=record.amount,
        sessions_count=record.sessions_count,
        status=status,
        display_status=derive_display_status(status, record.month, record.year, current).value,
        paid_at=record.paid_at,
        payment_method=record.payment_method,
        notes=record.notes,
    )


def build_due_summary_dto(due: DueComputation, summary: Optional[MonthlyPayment]) -> DueSummaryDTO:
    """Combine a fresh due computation with the stored paid amount"""
    total_paid = summary.total_amount_paid if summary else Decimal("0.00")
    recurring_sessions = sum(charge.sessions for charge in due.recurring_charges)
    return DueSummaryDTO(
        customer_id=due.customer_id,
        month=due.month,
        year=due.year,
        total_due=due.total_due,
        total_paid=total_paid,
        unpaid_amount=max(due.total_due - total_paid, Decimal("0.00")),
        total_hours=due.total_hours,
        bookings_count=due.bookings_count,
        one_off_count=len(due.one_off_charges),
        recurring_sessions=recurring_sessions,
        status=derive_payment_status(due.total_due, total_paid).value,
    )
