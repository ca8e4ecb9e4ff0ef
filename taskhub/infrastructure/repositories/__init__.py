"""
Repository implementations.
"""

from .in_memory import InMemoryTaskRepository, InMemoryDepartmentRepository

__all__ = ["InMemoryTaskRepository", "InMemoryDepartmentRepository"]
