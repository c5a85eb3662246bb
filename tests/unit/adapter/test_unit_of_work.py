"""Unit tests for SqlAlchemyUnitOfWork"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def session():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.mark.asyncio
class TestSqlAlchemyUnitOfWork:
    async def test_clean_exit_does_not_roll_back(self, session):
        async with SqlAlchemyUnitOfWork(session) as uow:
            await uow.commit()

        session.commit.assert_called_once()
        session.rollback.assert_not_called()

    async def test_exception_rolls_back(self, session):
        with pytest.raises(RuntimeError):
            async with SqlAlchemyUnitOfWork(session):
                raise RuntimeError("boom")

        session.rollback.assert_called_once()
