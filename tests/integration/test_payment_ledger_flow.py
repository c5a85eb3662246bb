"""Integration tests for RecordPayment and BulkMarkPaid use cases

Tests cover:
- Partial then full payment against a recomputed due amount
- Idempotency with real database
- Paid amount always equals the sum of its transactions
- Bulk settlement skip-on-rerun
- Status follows the recomputed due amount in both directions
"""

import pytest
import pytest_asyncio
from decimal import Decimal

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.booking_repository import (
    SqlAlchemyBookingRepository,
    SqlAlchemyRecurringBookingRepository,
)
from src.adapter.repositories.customer_repository import (
    SqlAlchemyCourtRepository,
    SqlAlchemyCustomerRepository,
)
from src.adapter.repositories.monthly_payment_repository import SqlAlchemyMonthlyPaymentRepository
from src.adapter.repositories.payment_transaction_repository import SqlAlchemyPaymentTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.due_calculator import PeriodDueCalculator
from src.app.use_cases.billing import (
    BulkMarkPaid,
    BulkMarkPaidCommandDTO,
    GetBreakdown,
    RecordPayment,
    RecordPaymentCommandDTO,
    ReconcilePayments,
    SettlementOutcome,
)
from src.domain.booking import BookingStatus
from src.domain.monthly_payment import MonthlyPayment
from src.domain.recurring_booking import RecurringBooking
from src.domain.payment_transaction import PaymentTransaction
from tests.fixtures.factories import (
    make_booking,
    make_court,
    make_customer,
    make_rate_table,
    make_recurring,
)


async def seed(session: AsyncSession, *entities):
    session.add_all(entities)
    await session.commit()


def build_args(session: AsyncSession) -> dict:
    return dict(
        uow=SqlAlchemyUnitOfWork(session),
        customer_repo=SqlAlchemyCustomerRepository(session),
        monthly_payment_repo=SqlAlchemyMonthlyPaymentRepository(session),
        transaction_repo=SqlAlchemyPaymentTransactionRepository(session),
        due_calculator=PeriodDueCalculator(
            booking_repo=SqlAlchemyBookingRepository(session),
            recurring_repo=SqlAlchemyRecurringBookingRepository(session),
            court_repo=SqlAlchemyCourtRepository(session),
            rate_table=make_rate_table(),
        ),
    )


def payment(amount: str, **overrides) -> RecordPaymentCommandDTO:
    values = dict(
        customer_id="cust-1",
        month=2,
        year=2026,
        amount=Decimal(amount),
        payment_method="cash",
        recorded_by="admin@club.example",
    )
    values.update(overrides)
    return RecordPaymentCommandDTO(**values)


@pytest_asyncio.fixture
async def monday_customer(db_session: AsyncSession):
    """Customer with a Monday 10:00-11:30 commitment at 80/hour (480.00 in Feb 2026)"""
    await seed(db_session, make_court(1, "Court A"), make_customer(), make_recurring())


@pytest.mark.asyncio
class TestRecordPaymentIntegration:
    async def test_partial_then_full_payment(self, db_session: AsyncSession, monday_customer):
        """
        Test complete flow: 200.00 then 280.00 against 480.00 due
        """
        use_case = RecordPayment(**build_args(db_session))

        first = await use_case.execute(payment("200.00"))

        assert first.is_ok()
        assert first.value.summary.status == "partial"
        assert first.value.summary.unpaid_amount == Decimal("280.00")

        second = await use_case.execute(payment("280.00"))

        assert second.is_ok()
        summary = second.value.summary
        assert summary.status == "paid"
        assert summary.total_amount_paid == Decimal("480.00")
        assert summary.marked_paid_by == "admin@club.example"

        transactions = (await db_session.execute(select(PaymentTransaction))).scalars().all()
        assert len(transactions) == 2
        assert sum(t.amount for t in transactions) == Decimal("480.00")

    async def test_same_idempotency_key_records_once(self, db_session: AsyncSession, monday_customer):
        use_case = RecordPayment(**build_args(db_session))

        first = await use_case.execute(payment("200.00", idempotency_key="rcpt-001"))
        again = await use_case.execute(payment("200.00", idempotency_key="rcpt-001"))

        assert first.value.duplicate is False
        assert again.value.duplicate is True
        assert again.value.transaction.id == first.value.transaction.id
        assert again.value.summary.total_amount_paid == Decimal("200.00")

        transactions = (await db_session.execute(select(PaymentTransaction))).scalars().all()
        assert len(transactions) == 1

    async def test_cancelled_bookings_are_not_billed(self, db_session: AsyncSession, monday_customer):
        await seed(
            db_session,
            make_booking("bk-ok", total_amount=Decimal("30.00")),
            make_booking("bk-cancelled", total_amount=Decimal("45.00"), status=BookingStatus.CANCELLED),
        )
        use_case = RecordPayment(**build_args(db_session))

        result = await use_case.execute(payment("10.00"))

        assert result.value.summary.total_amount_due == Decimal("510.00")

    async def test_rejected_payment_leaves_no_trace(self, db_session: AsyncSession, monday_customer):
        use_case = RecordPayment(**build_args(db_session))

        result = await use_case.execute(payment("0.00"))

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        transactions = (await db_session.execute(select(PaymentTransaction))).scalars().all()
        assert transactions == []

    async def test_paid_always_equals_transaction_sum(self, db_session: AsyncSession, monday_customer):
        args = build_args(db_session)
        record_payment = RecordPayment(**args)
        for amount in ("100.00", "50.50", "0.01", "400.00"):
            assert (await record_payment.execute(payment(amount))).is_ok()

        reconcile = ReconcilePayments(
            uow=args["uow"],
            monthly_payment_repo=args["monthly_payment_repo"],
            transaction_repo=args["transaction_repo"],
        )
        result = await reconcile.execute(month=2, year=2026)

        assert result.value.total_summaries_checked == 1
        assert result.value.discrepancies_found == 0

    async def test_breakdown_sums_to_due(self, db_session: AsyncSession, monday_customer):
        await seed(
            db_session,
            make_booking("bk-peak", start_time="17:00", end_time="19:00", total_amount=Decimal("33.00")),
        )
        args = build_args(db_session)
        breakdown = GetBreakdown(
            customer_repo=args["customer_repo"],
            monthly_payment_repo=args["monthly_payment_repo"],
            transaction_repo=args["transaction_repo"],
            due_calculator=args["due_calculator"],
        )

        result = await breakdown.execute("cust-1", 2, 2026)

        assert result.is_ok()
        items = result.value.line_items
        assert len(items) == 5
        assert sum(item.amount for item in items) == result.value.summary.total_due
        assert result.value.summary.total_due == Decimal("513.00")

    async def test_status_reverts_to_partial_when_due_increases(
        self, db_session: AsyncSession, monday_customer
    ):
        """
        Given: The period was paid in full (480.00)
        When: A 30.00 booking is added and a 10.00 payment is recorded
        Then: Status drops back to partial while the paid stamp is kept
        """
        # Arrange
        use_case = RecordPayment(**build_args(db_session))
        settled = await use_case.execute(payment("480.00"))
        assert settled.value.summary.status == "paid"
        paid_at = settled.value.summary.marked_paid_at
        await seed(db_session, make_booking("bk-late", total_amount=Decimal("30.00")))

        # Act
        result = await use_case.execute(payment("10.00", recorded_by="desk@club.example"))

        # Assert
        summary = result.value.summary
        assert summary.total_amount_due == Decimal("510.00")
        assert summary.total_amount_paid == Decimal("490.00")
        assert summary.status == "partial"
        assert summary.unpaid_amount == Decimal("20.00")
        assert summary.marked_paid_by == "admin@club.example"
        assert summary.marked_paid_at == paid_at


@pytest.mark.asyncio
class TestBulkMarkPaidIntegration:
    async def test_bulk_settlement_then_rerun(self, db_session: AsyncSession, monday_customer):
        await seed(
            db_session,
            make_customer("cust-2", "Bala"),
            make_recurring("rb-2", "cust-2", day_of_week=3, hourly_rate=None),
        )
        args = build_args(db_session)
        assert (await RecordPayment(**args).execute(payment("200.00"))).is_ok()

        use_case = BulkMarkPaid(**args)
        command = BulkMarkPaidCommandDTO(
            customer_ids=["cust-1", "cust-2"],
            month=2,
            year=2026,
            payment_method="bank_transfer",
            recorded_by="admin@club.example",
        )

        first = await use_case.execute(command)

        # cust-1: 280.00 remaining; cust-2: 4 Wednesdays x 22.50
        assert first.value.processed == 2
        assert first.value.total_amount == Decimal("370.00")

        rerun = await use_case.execute(command)

        assert rerun.value.processed == 0
        assert rerun.value.skipped == 2
        transactions = (await db_session.execute(select(PaymentTransaction))).scalars().all()
        assert len(transactions) == 3
        assert {t.notes for t in transactions if t.customer_id == "cust-2"} == {"Bulk payment for 2/2026"}

    async def test_skipped_customer_status_follows_lower_due(
        self, db_session: AsyncSession, monday_customer
    ):
        """
        Given: 200.00 paid against 480.00, then the commitment ends and a
               100.00 one-off booking is the only charge left
        When: The period is bulk settled
        Then: The customer is skipped and the summary is now paid and stamped
        """
        # Arrange
        args = build_args(db_session)
        assert (await RecordPayment(**args).execute(payment("200.00"))).is_ok()
        commitment = await db_session.get(RecurringBooking, "rb-1")
        commitment.is_active = False
        await seed(db_session, commitment, make_booking("bk-1", total_amount=Decimal("100.00")))

        # Act
        result = await BulkMarkPaid(**args).execute(
            BulkMarkPaidCommandDTO(
                customer_ids=["cust-1"],
                month=2,
                year=2026,
                payment_method="cash",
                recorded_by="admin@club.example",
            )
        )

        # Assert
        settlement = result.value.results[0]
        assert settlement.outcome == SettlementOutcome.SKIPPED
        assert settlement.summary.total_amount_due == Decimal("100.00")
        assert settlement.summary.total_amount_paid == Decimal("200.00")
        assert settlement.summary.status == "paid"
        assert settlement.summary.marked_paid_by == "admin@club.example"
        assert settlement.summary.marked_paid_at is not None

        transactions = (await db_session.execute(select(PaymentTransaction))).scalars().all()
        assert len(transactions) == 1

    async def test_zero_due_customer_gets_no_summary(self, db_session: AsyncSession, monday_customer):
        await seed(db_session, make_customer("cust-idle", "Idle"))
        use_case = BulkMarkPaid(**build_args(db_session))

        result = await use_case.execute(
            BulkMarkPaidCommandDTO(
                customer_ids=["cust-idle"],
                month=2,
                year=2026,
                payment_method="cash",
                recorded_by="admin@club.example",
            )
        )

        assert result.value.skipped == 1
        assert result.value.results[0].summary is None
        summaries = (await db_session.execute(select(MonthlyPayment))).scalars().all()
        assert summaries == []
