"""
Task repository interface.
Defines the contract for task data persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from taskhub.domain.models.base import utcnow
from taskhub.domain.models.task import Task


@dataclass(frozen=True)
class TaskActivity:
    """One entry of a task's activity log."""

    id: str
    task_id: str
    user_id: Optional[str]
    action: str
    field_name: str
    changes: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "action": self.action,
            "field_name": self.field_name,
            "changes": dict(self.changes),
            "timestamp": self.timestamp.isoformat(),
        }


class TaskRepository(ABC):
    """
    Repository interface for Task entity.
    Defines all operations needed for task data persistence.
    """

    @abstractmethod
    async def save(self, task: Task) -> Task:
        """
        Save a task entity.
        Later reads must observe the saved state.
        """
        pass

    @abstractmethod
    async def find_by_id(self, task_id: str) -> Optional[Task]:
        """
        Find a task by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """
        Delete a task.
        Returns True if a task was removed.
        """
        pass

    @abstractmethod
    async def list_by_department_subtree(
        self,
        department_ids: Iterable[str],
        include_archived: bool = False,
    ) -> List[Task]:
        """
        Find all tasks whose department is one of ``department_ids``.
        """
        pass

    @abstractmethod
    async def list_all(self, include_archived: bool = False) -> List[Task]:
        """
        Find every task of the organisation.
        """
        pass

    @abstractmethod
    async def list_for_assignee(self, user_id: str, include_archived: bool = False) -> List[Task]:
        """
        Find all tasks the user is assigned to.
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str, include_archived: bool = False) -> List[Task]:
        """
        Find all tasks created by the user.
        """
        pass

    @abstractmethod
    async def find_subtasks(self, parent_task_id: str) -> List[Task]:
        """
        Find all direct subtasks of a task, archived ones included.
        """
        pass

    @abstractmethod
    async def project_exists(self, project_id: str) -> bool:
        """
        Check whether a project with the given ID exists.
        """
        pass

    @abstractmethod
    async def log_task_action(self, activity: TaskActivity) -> None:
        """
        Append an entry to a task's activity log.
        """
        pass

    @abstractmethod
    async def list_task_actions(self, task_id: str) -> List[TaskActivity]:
        """
        Get a task's activity log, oldest first.
        """
        pass
