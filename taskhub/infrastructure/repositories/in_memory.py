"""
In-memory repository implementations.
Back the default HTTP wiring and the tests; records are deep-copied on the
way in and out so callers never share state with the store.
"""

import copy
from typing import Dict, Iterable, List, Optional, Set

from taskhub.domain.models.department import Department
from taskhub.domain.models.task import Task
from taskhub.domain.repositories.department_repository import DepartmentRepository
from taskhub.domain.repositories.task_repository import TaskActivity, TaskRepository


class InMemoryTaskRepository(TaskRepository):
    """Task repository keeping tasks in a dictionary."""

    def __init__(self, project_ids: Optional[Iterable[str]] = None):
        self._tasks: Dict[str, Task] = {}
        self._activities: Dict[str, List[TaskActivity]] = {}
        self._project_ids: Set[str] = set(project_ids or ())

    def add_project(self, project_id: str) -> None:
        """Register a project so tasks may reference it."""
        self._project_ids.add(project_id)

    async def save(self, task: Task) -> Task:
        stored = copy.deepcopy(task)
        stored.pull_events()
        self._tasks[task.id] = stored
        return self._copy(stored)

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return self._copy(task) if task is not None else None

    async def delete(self, task_id: str) -> bool:
        removed = self._tasks.pop(task_id, None) is not None
        self._activities.pop(task_id, None)
        return removed

    async def list_by_department_subtree(
        self,
        department_ids: Iterable[str],
        include_archived: bool = False,
    ) -> List[Task]:
        departments = set(department_ids)
        return self._select(lambda t: t.department_id in departments, include_archived)

    async def list_all(self, include_archived: bool = False) -> List[Task]:
        return self._select(lambda t: True, include_archived)

    async def list_for_assignee(self, user_id: str, include_archived: bool = False) -> List[Task]:
        return self._select(lambda t: t.is_user_assigned(user_id), include_archived)

    async def list_by_owner(self, owner_id: str, include_archived: bool = False) -> List[Task]:
        return self._select(lambda t: t.owner_id == owner_id, include_archived)

    async def find_subtasks(self, parent_task_id: str) -> List[Task]:
        return self._select(lambda t: t.parent_task_id == parent_task_id, include_archived=True)

    async def project_exists(self, project_id: str) -> bool:
        return project_id in self._project_ids

    async def log_task_action(self, activity: TaskActivity) -> None:
        self._activities.setdefault(activity.task_id, []).append(activity)

    async def list_task_actions(self, task_id: str) -> List[TaskActivity]:
        return list(self._activities.get(task_id, []))

    def _select(self, predicate, include_archived: bool) -> List[Task]:
        return [
            self._copy(task)
            for task in sorted(self._tasks.values(), key=lambda t: t.created_at)
            if (include_archived or not task.is_archived) and predicate(task)
        ]

    @staticmethod
    def _copy(task: Task) -> Task:
        return copy.deepcopy(task)


class InMemoryDepartmentRepository(DepartmentRepository):
    """Department repository over a fixed list of departments."""

    def __init__(self, departments: Optional[Iterable[Department]] = None):
        self._departments: Dict[str, Department] = {d.id: d for d in departments or ()}

    def add(self, department: Department) -> None:
        self._departments[department.id] = department

    async def list_all(self) -> List[Department]:
        return list(self._departments.values())

    async def find_by_id(self, department_id: str) -> Optional[Department]:
        return self._departments.get(department_id)
