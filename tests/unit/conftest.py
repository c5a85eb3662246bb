import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.due_calculator import PeriodDueCalculator
from tests.fixtures.factories import make_court, make_rate_table


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def rate_table():
    return make_rate_table()


@pytest.fixture
def mock_booking_repo():
    """Mock booking repository with no one-off bookings"""
    repo = MagicMock()
    repo.get_billable_for_customer = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_recurring_repo():
    """Mock recurring booking repository with no commitments"""
    repo = MagicMock()
    repo.get_active_overlapping = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_court_repo():
    repo = MagicMock()
    repo.get_names = AsyncMock(return_value={1: make_court(1, "Court A").name})
    return repo


@pytest.fixture
def due_calculator(mock_booking_repo, mock_recurring_repo, mock_court_repo, rate_table):
    """Real calculator over mocked booking sources"""
    return PeriodDueCalculator(
        booking_repo=mock_booking_repo,
        recurring_repo=mock_recurring_repo,
        court_repo=mock_court_repo,
        rate_table=rate_table,
    )
