"""Customer and Court Repository Interfaces

Read-only access to the booking side's customer and court records.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """Repository interface for Customer lookups"""

    @abstractmethod
    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer identifier

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(self, customer_ids: List[str]) -> List[Customer]:
        """Retrieve all customers whose ID is in the list (unknown IDs are ignored)"""
        pass


class CourtRepository(ABC):
    """Repository interface for Court lookups"""

    @abstractmethod
    async def get_names(self, court_ids: List[int]) -> Dict[int, str]:
        """
        Map court IDs to display names

        Args:
            court_ids: Court identifiers

        Returns:
            Dict of court_id -> name for the courts that exist
        """
        pass
