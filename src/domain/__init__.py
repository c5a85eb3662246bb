from .base import BaseModel, generate_uuid
from .billing_period import BillingPeriod
from .customer import Customer, Court
from .booking import Booking, BookingStatus
from .recurring_booking import RecurringBooking
from .monthly_payment import MonthlyPayment, PaymentStatus
from .payment_transaction import PaymentTransaction
from .recurring_booking_payment import RecurringBookingPayment, SlotPaymentStatus
from .payment_status import DisplayStatus, derive_payment_status, derive_display_status
from .exceptions import (
    BillingError,
    ValidationError,
    ConfigurationError,
    InvalidAmount,
    NotFound,
    ConflictError,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "BillingPeriod",
    "Customer",
    "Court",
    "Booking",
    "BookingStatus",
    "RecurringBooking",
    "MonthlyPayment",
    "PaymentStatus",
    "PaymentTransaction",
    "RecurringBookingPayment",
    "SlotPaymentStatus",
    "DisplayStatus",
    "derive_payment_status",
    "derive_display_status",
    "BillingError",
    "ValidationError",
    "ConfigurationError",
    "InvalidAmount",
    "NotFound",
    "ConflictError",
]
