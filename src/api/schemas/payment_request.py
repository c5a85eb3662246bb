"""Request schemas for Billing API

Pydantic models for validating incoming HTTP requests. Amount sign and
blank identifiers are checked by the use cases so the response carries
the billing error code.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /billing/payments endpoint.
    """

    customer_id: str = Field(..., description="Customer identifier")
    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")
    amount: Decimal = Field(..., description="Amount received (must be > 0)")
    payment_method: str = Field(..., description="cash, bank_transfer, card, ...")
    recorded_by: str = Field(..., description="Operator recording the payment")
    reference: Optional[str] = Field(default=None, max_length=255, description="Receipt or transfer number")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    idempotency_key: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Retries with the same key are recorded once"
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
                "idempotency_key": "pay:c0ffee00:2026-02:1"
            }
        }


class BulkMarkPaidRequestSchema(BaseModel):
    """
    Request schema for bulk settlement

    Used for POST /billing/payments/bulk endpoint.
    """

    customer_ids: List[str] = Field(..., description="Customers to settle")
    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")
    payment_method: str = Field(..., description="Payment method")
    recorded_by: str = Field(..., description="Operator recording the settlement")
    reference: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, description="Defaults to the bulk payment note")


class EnsureSlotRecordsRequestSchema(BaseModel):
    """Used for POST /billing/slot-payments/ensure endpoint."""

    slot_ids: List[str] = Field(..., description="Recurring booking IDs")
    month: int = Field(..., description="Billing month (1-12)")
    year: int = Field(..., description="Billing year")


class MarkSlotPaymentPaidRequestSchema(BaseModel):
    """Used for POST /billing/slot-payments/{payment_id}/paid endpoint."""

    payment_method: Optional[str] = Field(default=None, description="Payment method")
    notes: Optional[str] = Field(default=None, description="Notes")
