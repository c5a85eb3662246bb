"""Billing domain use cases"""
from .get_due import GetDue
from .get_breakdown import GetBreakdown, build_line_items
from .record_payment import RecordPayment
from .mark_period_paid import MarkPeriodPaid
from .bulk_mark_paid import BulkMarkPaid
from .list_period_summaries import ListPeriodSummaries
from .ensure_slot_records import EnsureSlotRecords
from .get_slot_status import GetSlotStatus
from .mark_slot_payment_paid import MarkSlotPaymentPaid
from .get_recurring_groups import GetRecurringGroups
from .reconcile_payments import ReconcilePayments
from .dtos import (
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    PeriodSummaryDTO,
    PaymentTransactionDTO,
    MarkPeriodPaidCommandDTO,
    BulkMarkPaidCommandDTO,
    BulkMarkPaidResponseDTO,
    CustomerSettlementDTO,
    SettlementOutcome,
    DueSummaryDTO,
    LineItemDTO,
    LineItemType,
    BreakdownResponseDTO,
    PeriodOverviewDTO,
    EnsureSlotRecordsCommandDTO,
    EnsureSlotRecordsResponseDTO,
    SlotPaymentRecordDTO,
    SlotStatusDTO,
    MarkSlotPaymentPaidCommandDTO,
    RecurringGroupsResponseDTO,
    PaymentDiscrepancyDTO,
    ReconciliationResultDTO,
    SlotRecordGenerationResultDTO,
)

__all__ = [
    "GetDue",
    "GetBreakdown",
    "build_line_items",
    "RecordPayment",
    "MarkPeriodPaid",
    "BulkMarkPaid",
    "ListPeriodSummaries",
    "EnsureSlotRecords",
    "GetSlotStatus",
    "MarkSlotPaymentPaid",
    "GetRecurringGroups",
    "ReconcilePayments",
    "RecordPaymentCommandDTO",
    "RecordPaymentResponseDTO",
    "PeriodSummaryDTO",
    "PaymentTransactionDTO",
    "MarkPeriodPaidCommandDTO",
    "BulkMarkPaidCommandDTO",
    "BulkMarkPaidResponseDTO",
    "CustomerSettlementDTO",
    "SettlementOutcome",
    "DueSummaryDTO",
    "LineItemDTO",
    "LineItemType",
    "BreakdownResponseDTO",
    "PeriodOverviewDTO",
    "EnsureSlotRecordsCommandDTO",
    "EnsureSlotRecordsResponseDTO",
    "SlotPaymentRecordDTO",
    "SlotStatusDTO",
    "MarkSlotPaymentPaidCommandDTO",
    "RecurringGroupsResponseDTO",
    "PaymentDiscrepancyDTO",
    "ReconciliationResultDTO",
    "SlotRecordGenerationResultDTO",
]
