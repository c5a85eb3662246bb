from .customer_repository import SqlAlchemyCustomerRepository, SqlAlchemyCourtRepository
from .booking_repository import SqlAlchemyBookingRepository, SqlAlchemyRecurringBookingRepository
from .monthly_payment_repository import SqlAlchemyMonthlyPaymentRepository
from .payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from .recurring_booking_payment_repository import SqlAlchemyRecurringBookingPaymentRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyCourtRepository",
    "SqlAlchemyBookingRepository",
    "SqlAlchemyRecurringBookingRepository",
    "SqlAlchemyMonthlyPaymentRepository",
    "SqlAlchemyPaymentTransactionRepository",
    "SqlAlchemyRecurringBookingPaymentRepository",
]
