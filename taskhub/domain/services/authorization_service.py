"""
Authorization and visibility rules for tasks.
Decides which tasks a caller sees and whether they may edit each one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Mapping, Optional

from taskhub.domain.models.task import Task, TaskStatus
from taskhub.domain.models.user import UserContext
from taskhub.domain.services.department_hierarchy import DepartmentHierarchyResolver


class ScopeKind(str, Enum):
    """How far a caller's task visibility reaches."""
    ORGANIZATION = "ORGANIZATION"
    DEPARTMENT_SUBTREE = "DEPARTMENT_SUBTREE"
    PERSONAL = "PERSONAL"


@dataclass(frozen=True)
class VisibilityScope:
    """Resolved visibility of one caller, computed once per request."""

    kind: ScopeKind
    user_id: str
    department_ids: FrozenSet[str] = frozenset()
    include_archived: bool = False


@dataclass(frozen=True)
class DashboardFilters:
    """Post-hoc dashboard filters. Unset fields match everything."""

    department: Optional[str] = None
    project_id: Optional[str] = None
    assignee_id: Optional[str] = None
    status: Optional[TaskStatus] = None
    include_archived: bool = False


@dataclass(frozen=True)
class DashboardMetrics:
    """Task counts per status."""

    to_do: int = 0
    in_progress: int = 0
    completed: int = 0
    blocked: int = 0

    @property
    def total(self) -> int:
        return self.to_do + self.in_progress + self.completed + self.blocked

    def to_dict(self) -> dict:
        return {
            "to_do": self.to_do,
            "in_progress": self.in_progress,
            "completed": self.completed,
            "blocked": self.blocked,
            "total": self.total,
        }


class AuthorizationService:
    """
    Domain service for task visibility and edit rights.

    Visibility:
    - HR/Admin rights: every task of the organisation.
    - MANAGER: tasks whose department lies in the subtree rooted at the
      manager's own department.
    - STAFF: tasks the user owns or is assigned to.

    Edit rights are computed per task from independent rules that are OR'd.
    A MANAGER edits anything in their department subtree. HR/Admin rights
    grant edits in the home department only. Plain STAFF edit tasks they are
    assigned to, provided the task sits inside their department subtree.
    """

    def department_subtree(
        self,
        user: UserContext,
        resolver: DepartmentHierarchyResolver,
    ) -> FrozenSet[str]:
        """The caller's home department and everything below it."""
        return resolver.resolve_subtree(user.department_id)

    def visibility_scope(
        self,
        user: UserContext,
        department_subtree: FrozenSet[str],
        include_archived: bool = False,
    ) -> VisibilityScope:
        if user.has_hr_admin_rights:
            return VisibilityScope(
                kind=ScopeKind.ORGANIZATION,
                user_id=user.user_id,
                include_archived=include_archived,
            )
        if user.is_manager:
            return VisibilityScope(
                kind=ScopeKind.DEPARTMENT_SUBTREE,
                user_id=user.user_id,
                department_ids=frozenset(department_subtree),
                include_archived=include_archived,
            )
        return VisibilityScope(
            kind=ScopeKind.PERSONAL,
            user_id=user.user_id,
            include_archived=include_archived,
        )

    def is_visible(self, scope: VisibilityScope, task: Task) -> bool:
        """Check whether a task belongs to the scope's accessible set."""
        if task.is_archived and not scope.include_archived:
            return False

        if scope.kind is ScopeKind.ORGANIZATION:
            return True
        if scope.kind is ScopeKind.DEPARTMENT_SUBTREE:
            return task.department_id in scope.department_ids
        return task.owner_id == scope.user_id or task.is_user_assigned(scope.user_id)

    def can_view(
        self,
        user: UserContext,
        task: Task,
        department_subtree: FrozenSet[str],
    ) -> bool:
        """
        Single-task access, archived tasks included.

        Owners and assignees always see their own tasks.
        """
        if task.owner_id == user.user_id or task.is_user_assigned(user.user_id):
            return True
        scope = self.visibility_scope(user, department_subtree, include_archived=True)
        return self.is_visible(scope, task)

    def can_edit(
        self,
        user: UserContext,
        task: Task,
        department_subtree: FrozenSet[str],
    ) -> bool:
        if user.is_manager and task.department_id in department_subtree:
            return True
        if user.has_hr_admin_rights and task.department_id == user.department_id:
            return True
        if user.is_staff and task.department_id in department_subtree:
            return task.is_user_assigned(user.user_id)
        return False

    def filter_visible(self, scope: VisibilityScope, tasks: Iterable[Task]) -> List[Task]:
        return [task for task in tasks if self.is_visible(scope, task)]

    def apply_filters(
        self,
        tasks: Iterable[Task],
        filters: DashboardFilters,
        department_names: Mapping[str, str],
    ) -> List[Task]:
        """
        Narrow an already scoped task list.

        Filters combine with AND; the department filter matches by name.
        """
        result = []
        for task in tasks:
            if filters.department is not None and department_names.get(task.department_id) != filters.department:
                continue
            if filters.project_id is not None and task.project_id != filters.project_id:
                continue
            if filters.assignee_id is not None and not task.is_user_assigned(filters.assignee_id):
                continue
            if filters.status is not None and task.status != filters.status:
                continue
            result.append(task)
        return result

    def compute_metrics(self, tasks: Iterable[Task]) -> DashboardMetrics:
        counts = {status: 0 for status in TaskStatus}
        for task in tasks:
            counts[task.status] += 1
        return DashboardMetrics(
            to_do=counts[TaskStatus.TO_DO],
            in_progress=counts[TaskStatus.IN_PROGRESS],
            completed=counts[TaskStatus.COMPLETED],
            blocked=counts[TaskStatus.BLOCKED],
        )
