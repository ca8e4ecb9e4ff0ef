"""
Department model.
Departments form a forest through parent pointers and are read-only to the core.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    """A node of the department forest."""

    id: str
    name: str
    parent_id: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None
