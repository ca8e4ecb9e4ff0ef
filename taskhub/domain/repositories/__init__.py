"""
Repository interfaces for the domain layer.
"""

from .task_repository import TaskRepository, TaskActivity
from .department_repository import DepartmentRepository

__all__ = ["TaskRepository", "TaskActivity", "DepartmentRepository"]
