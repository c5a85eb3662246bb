from .customer_repository import CustomerRepository, CourtRepository
from .booking_repository import BookingRepository, RecurringBookingRepository
from .monthly_payment_repository import MonthlyPaymentRepository
from .payment_transaction_repository import PaymentTransactionRepository
from .recurring_booking_payment_repository import RecurringBookingPaymentRepository

__all__ = [
    "CustomerRepository",
    "CourtRepository",
    "BookingRepository",
    "RecurringBookingRepository",
    "MonthlyPaymentRepository",
    "PaymentTransactionRepository",
    "RecurringBookingPaymentRepository",
]
