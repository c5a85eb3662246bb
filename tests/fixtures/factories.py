"""Entity builders shared by unit and integration tests"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from src.domain.booking import Booking, BookingStatus
from src.domain.customer import Court, Customer
from src.domain.monthly_payment import MonthlyPayment, PaymentStatus
from src.domain.payment_transaction import PaymentTransaction
from src.domain.pricing import RateTable
from src.domain.recurring_booking import RecurringBooking
from src.domain.recurring_booking_payment import RecurringBookingPayment, SlotPaymentStatus

RATE_TABLE_CONFIG = {
    "badminton": {"off_peak_rate": "15.00", "peak_rate": "18.00", "peak_start": "18:00"},
    "pickleball": {"off_peak_rate": "25.00"},
}


def make_rate_table() -> RateTable:
    return RateTable.from_config(RATE_TABLE_CONFIG)


def make_customer(customer_id: str = "cust-1", name: str = "Aisyah Rahman", **kwargs) -> Customer:
    return Customer(
        id=customer_id,
        name=name,
        email=kwargs.pop("email", f"{customer_id}@example.com"),
        phone=kwargs.pop("phone", "+60123456789"),
        **kwargs,
    )


def make_court(court_id: int = 1, name: Optional[str] = None) -> Court:
    return Court(id=court_id, name=name or f"Court {court_id}")


def make_booking(
    booking_id: str = "bk-1",
    customer_id: str = "cust-1",
    booking_date: date = date(2026, 2, 10),
    start_time: str = "10:00",
    end_time: str = "12:00",
    total_amount: Decimal = Decimal("30.00"),
    status: BookingStatus = BookingStatus.CONFIRMED,
    court_id: int = 1,
    sport: str = "badminton",
) -> Booking:
    return Booking(
        id=booking_id,
        customer_id=customer_id,
        court_id=court_id,
        booking_date=booking_date,
        start_time=start_time,
        end_time=end_time,
        sport=sport,
        total_amount=total_amount,
        status=status,
        created_at=datetime.utcnow(),
    )


def make_recurring(
    recurring_id: str = "rb-1",
    customer_id: Optional[str] = "cust-1",
    day_of_week: int = 1,
    start_time: str = "10:00",
    end_time: str = "11:30",
    hourly_rate: Optional[Decimal] = Decimal("80.00"),
    start_date: date = date(2026, 1, 1),
    end_date: Optional[date] = None,
    is_active: bool = True,
    court_id: int = 1,
    sport: str = "badminton",
    **kwargs,
) -> RecurringBooking:
    return RecurringBooking(
        id=recurring_id,
        customer_id=customer_id,
        court_id=court_id,
        sport=sport,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        hourly_rate=hourly_rate,
        start_date=start_date,
        end_date=end_date,
        is_active=is_active,
        created_at=datetime.utcnow(),
        **kwargs,
    )


def make_summary(
    summary_id: int = 1,
    customer_id: str = "cust-1",
    month: int = 2,
    year: int = 2026,
    total_amount_due: Decimal = Decimal("480.00"),
    total_amount_paid: Decimal = Decimal("0.00"),
    status: PaymentStatus = PaymentStatus.UNPAID,
    **kwargs,
) -> MonthlyPayment:
    return MonthlyPayment(
        id=summary_id,
        customer_id=customer_id,
        month=month,
        year=year,
        total_amount_due=total_amount_due,
        total_amount_paid=total_amount_paid,
        sessions_count=kwargs.pop("sessions_count", 4),
        total_hours=kwargs.pop("total_hours", Decimal("6.00")),
        status=status,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
        **kwargs,
    )


def make_transaction(
    transaction_id: int = 10,
    monthly_payment_id: int = 1,
    customer_id: str = "cust-1",
    amount: Decimal = Decimal("200.00"),
    idempotency_key: Optional[str] = None,
    **kwargs,
) -> PaymentTransaction:
    return PaymentTransaction(
        id=transaction_id,
        monthly_payment_id=monthly_payment_id,
        customer_id=customer_id,
        amount=amount,
        payment_method=kwargs.pop("payment_method", "cash"),
        recorded_by=kwargs.pop("recorded_by", "admin@club.example"),
        recorded_at=datetime.utcnow(),
        idempotency_key=idempotency_key,
        **kwargs,
    )


def make_slot_payment(
    payment_id: int = 5,
    recurring_booking_id: str = "rb-1",
    month: int = 2,
    year: int = 2026,
    amount: Decimal = Decimal("480.00"),
    sessions_count: int = 4,
    status: SlotPaymentStatus = SlotPaymentStatus.PENDING,
    **kwargs,
) -> RecurringBookingPayment:
    return RecurringBookingPayment(
        id=payment_id,
        recurring_booking_id=recurring_booking_id,
        month=month,
        year=year,
        amount=amount,
        sessions_count=sessions_count,
        status=status,
        created_at=datetime.utcnow(),
        **kwargs,
    )
