"""
Department repository interface.
Departments are read-only to the core.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from taskhub.domain.models.department import Department


class DepartmentRepository(ABC):
    """Repository interface for Department records."""

    @abstractmethod
    async def list_all(self) -> List[Department]:
        """
        Get every department of the organisation.
        """
        pass

    @abstractmethod
    async def find_by_id(self, department_id: str) -> Optional[Department]:
        """
        Find a department by its ID.
        Returns None if not found.
        """
        pass
