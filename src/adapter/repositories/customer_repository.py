"""SQLAlchemy implementations of CustomerRepository and CourtRepository"""

from typing import Dict, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CourtRepository, CustomerRepository
from src.domain.customer import Court, Customer


class SqlAlchemyCustomerRepository(CustomerRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.id == customer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, customer_ids: List[str]) -> List[Customer]:
        if not customer_ids:
            return []
        stmt = select(Customer).where(Customer.id.in_(customer_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SqlAlchemyCourtRepository(CourtRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_names(self, court_ids: List[int]) -> Dict[int, str]:
        if not court_ids:
            return {}
        stmt = select(Court.id, Court.name).where(Court.id.in_(court_ids))
        result = await self.session.execute(stmt)
        return {court_id: name for court_id, name in result.all()}
