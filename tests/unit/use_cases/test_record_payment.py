"""Unit tests for RecordPayment use case

Tests cover:
- Partial and full payments against a recomputed due amount
- Idempotent resubmission
- Validation failures
- Concurrent write handling
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.billing.dtos import RecordPaymentCommandDTO
from src.app.use_cases.billing.record_payment import RecordPayment
from src.domain.exceptions import ConfigurationError
from src.domain.monthly_payment import PaymentStatus
from tests.fixtures.factories import make_customer, make_recurring, make_summary, make_transaction


def _assign_id(transaction):
    transaction.id = 10
    return transaction


@pytest.fixture
def mock_customer_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_customer())
    return repo


@pytest.fixture
def mock_monthly_payment_repo():
    repo = MagicMock()
    repo.get_by_customer_period = AsyncMock(return_value=make_summary())
    repo.update = AsyncMock(side_effect=lambda summary: summary)
    repo.create = AsyncMock()
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.get_by_idempotency_key = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=_assign_id)
    return repo


@pytest.fixture
def record_payment(
    mock_uow, mock_customer_repo, mock_monthly_payment_repo, mock_transaction_repo, due_calculator,
    mock_recurring_repo,
):
    """RecordPayment over a customer owing 480.00 for February 2026"""
    mock_recurring_repo.get_active_overlapping = AsyncMock(return_value=[make_recurring()])
    return RecordPayment(
        uow=mock_uow,
        customer_repo=mock_customer_repo,
        monthly_payment_repo=mock_monthly_payment_repo,
        transaction_repo=mock_transaction_repo,
        due_calculator=due_calculator,
    )


def _command(**overrides):
    values = dict(
        customer_id="cust-1",
        month=2,
        year=2026,
        amount=Decimal("200.00"),
        payment_method="cash",
        recorded_by="admin@club.example",
    )
    values.update(overrides)
    return RecordPaymentCommandDTO(**values)


@pytest.mark.asyncio
class TestRecordPaymentSuccess:
    async def test_partial_payment(self, record_payment, mock_transaction_repo, mock_uow):
        """
        Given: 480.00 due and nothing paid
        When: 200.00 is recorded
        Then: Summary is partial with 280.00 unpaid and one transaction is appended
        """
        # Act
        result = await record_payment.execute(_command())

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.duplicate is False
        assert response.summary.total_amount_due == Decimal("480.00")
        assert response.summary.total_amount_paid == Decimal("200.00")
        assert response.summary.unpaid_amount == Decimal("280.00")
        assert response.summary.status == "partial"
        assert response.summary.marked_paid_by is None
        assert response.transaction.amount == Decimal("200.00")
        mock_transaction_repo.create.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_payment_completing_the_period_stamps_paid(
        self, record_payment, mock_monthly_payment_repo
    ):
        # Arrange
        mock_monthly_payment_repo.get_by_customer_period = AsyncMock(
            return_value=make_summary(total_amount_paid=Decimal("200.00"), status=PaymentStatus.PARTIAL)
        )

        # Act
        result = await record_payment.execute(_command(amount=Decimal("280.00")))

        # Assert
        assert result.is_ok()
        summary = result.value.summary
        assert summary.status == "paid"
        assert summary.total_amount_paid == Decimal("480.00")
        assert summary.marked_paid_by == "admin@club.example"
        assert summary.marked_paid_at is not None

    async def test_overpayment_is_accepted(self, record_payment):
        result = await record_payment.execute(_command(amount=Decimal("500.00")))

        assert result.is_ok()
        assert result.value.summary.status == "paid"
        assert result.value.summary.unpaid_amount == Decimal("0.00")

    async def test_due_is_recomputed_not_read_from_storage(self, record_payment, mock_monthly_payment_repo):
        """
        Given: Stored summary says 999.00 due but bookings now add up to 480.00
        When: A payment is recorded
        Then: The summary is rewritten with the fresh due amount
        """
        mock_monthly_payment_repo.get_by_customer_period = AsyncMock(
            return_value=make_summary(total_amount_due=Decimal("999.00"))
        )

        result = await record_payment.execute(_command())

        assert result.value.summary.total_amount_due == Decimal("480.00")
        assert result.value.summary.sessions_count == 4

    async def test_summary_created_on_first_payment(self, record_payment, mock_monthly_payment_repo):
        mock_monthly_payment_repo.get_by_customer_period = AsyncMock(side_effect=[None, make_summary()])

        result = await record_payment.execute(_command())

        assert result.is_ok()
        mock_monthly_payment_repo.create.assert_called_once()
        created = mock_monthly_payment_repo.create.call_args[0][0]
        assert (created.customer_id, created.month, created.year) == ("cust-1", 2, 2026)


@pytest.mark.asyncio
class TestRecordPaymentIdempotency:
    async def test_same_key_returns_original(
        self, record_payment, mock_transaction_repo, mock_monthly_payment_repo, mock_uow
    ):
        """
        Given: A transaction already exists for the idempotency key
        When: The same payment is resubmitted
        Then: The original is returned and nothing new is written
        """
        # Arrange
        existing = make_transaction(idempotency_key="rcpt-001")
        mock_transaction_repo.get_by_idempotency_key = AsyncMock(return_value=existing)
        mock_monthly_payment_repo.get_by_id = AsyncMock(
            return_value=make_summary(total_amount_paid=Decimal("200.00"), status=PaymentStatus.PARTIAL)
        )

        # Act
        result = await record_payment.execute(_command(idempotency_key="rcpt-001"))

        # Assert
        assert result.is_ok()
        assert result.value.duplicate is True
        assert result.value.transaction.id == 10
        assert result.value.summary.total_amount_paid == Decimal("200.00")
        mock_transaction_repo.create.assert_not_called()
        mock_monthly_payment_repo.update.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_lost_race_on_key_returns_winner(
        self, record_payment, mock_transaction_repo, mock_monthly_payment_repo, mock_uow
    ):
        winner = make_transaction(idempotency_key="rcpt-001")
        mock_transaction_repo.get_by_idempotency_key = AsyncMock(side_effect=[None, winner])
        mock_transaction_repo.create = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("dup")))
        mock_monthly_payment_repo.get_by_id = AsyncMock(return_value=make_summary())

        result = await record_payment.execute(_command(idempotency_key="rcpt-001"))

        assert result.is_ok()
        assert result.value.duplicate is True
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestRecordPaymentErrors:
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00"), Decimal("0.001")])
    async def test_non_positive_amount(self, record_payment, mock_uow, amount):
        result = await record_payment.execute(_command(amount=amount))

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_uow.commit.assert_not_called()

    @pytest.mark.parametrize("field", ["payment_method", "recorded_by", "customer_id"])
    async def test_missing_required_field(self, record_payment, field):
        result = await record_payment.execute(_command(**{field: "  "}))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"

    async def test_invalid_month(self, record_payment):
        result = await record_payment.execute(_command(month=13))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"

    async def test_unknown_customer(self, record_payment, mock_customer_repo, mock_uow):
        mock_customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await record_payment.execute(_command())

        assert result.is_err()
        assert result.error.code == "CUSTOMER_NOT_FOUND"
        mock_uow.rollback.assert_called_once()

    async def test_concurrent_summary_write_is_a_conflict(
        self, record_payment, mock_monthly_payment_repo, mock_transaction_repo, mock_uow
    ):
        mock_monthly_payment_repo.update = AsyncMock(
            side_effect=IntegrityError("UPDATE", {}, Exception("serialization"))
        )

        result = await record_payment.execute(_command())

        assert result.is_err()
        assert result.error.code == "CONFLICT"
        mock_transaction_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_configuration_error_propagates(self, record_payment, mock_recurring_repo, mock_uow):
        mock_recurring_repo.get_active_overlapping = AsyncMock(
            return_value=[make_recurring(hourly_rate=None, sport="squash")]
        )

        with pytest.raises(ConfigurationError):
            await record_payment.execute(_command())

        mock_uow.rollback.assert_called_once()

    async def test_unexpected_error(self, record_payment, mock_transaction_repo, mock_uow):
        mock_transaction_repo.create = AsyncMock(side_effect=RuntimeError("connection lost"))

        result = await record_payment.execute(_command())

        assert result.is_err()
        assert result.error.code == "RECORD_PAYMENT_FAILED"
        mock_uow.rollback.assert_called_once()
