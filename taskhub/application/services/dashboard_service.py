"""
Dashboard read side.
Resolves what a caller can see once, narrows it with filters and
reports per-status metrics alongside per-task edit rights.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from taskhub.domain.models.task import Task
from taskhub.domain.models.user import UserContext
from taskhub.domain.repositories.department_repository import DepartmentRepository
from taskhub.domain.repositories.task_repository import TaskRepository
from taskhub.domain.services.authorization_service import (
    AuthorizationService,
    DashboardFilters,
    DashboardMetrics,
    ScopeKind,
)
from taskhub.domain.services.department_hierarchy import DepartmentHierarchyResolver


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleTask:
    """A visible task paired with the caller's edit right on it."""

    task: Task
    can_edit: bool


@dataclass
class DashboardView:
    """Result of a dashboard query."""

    tasks: List[VisibleTask] = field(default_factory=list)
    metrics: DashboardMetrics = field(default_factory=DashboardMetrics)


class DashboardService:
    """Computes the caller's visible task set for dashboards."""

    def __init__(
        self,
        task_repository: TaskRepository,
        department_repository: DepartmentRepository,
        authorization_service: Optional[AuthorizationService] = None,
    ):
        self.task_repository = task_repository
        self.department_repository = department_repository
        self.authorization_service = authorization_service or AuthorizationService()

    async def compute_visible_tasks(
        self,
        user: UserContext,
        filters: Optional[DashboardFilters] = None,
    ) -> DashboardView:
        filters = filters or DashboardFilters()
        auth = self.authorization_service

        resolver = DepartmentHierarchyResolver(await self.department_repository.list_all())
        subtree = auth.department_subtree(user, resolver)
        scope = auth.visibility_scope(user, subtree, include_archived=filters.include_archived)

        if scope.kind is ScopeKind.ORGANIZATION:
            candidates = await self.task_repository.list_all(scope.include_archived)
        elif scope.kind is ScopeKind.DEPARTMENT_SUBTREE:
            candidates = await self.task_repository.list_by_department_subtree(
                scope.department_ids, scope.include_archived
            )
        else:
            candidates = await self._personal_tasks(user, scope.include_archived)

        visible = auth.filter_visible(scope, candidates)
        narrowed = auth.apply_filters(visible, filters, resolver.department_names())

        logger.debug(
            f"Dashboard for {user.user_id}: {len(visible)} visible, {len(narrowed)} after filters"
        )
        return DashboardView(
            tasks=[VisibleTask(task, auth.can_edit(user, task, subtree)) for task in narrowed],
            metrics=auth.compute_metrics(narrowed),
        )

    async def _personal_tasks(self, user: UserContext, include_archived: bool) -> List[Task]:
        """Tasks the user owns or is assigned to, without duplicates."""
        merged: Dict[str, Task] = {}
        for task in await self.task_repository.list_by_owner(user.user_id, include_archived):
            merged[task.id] = task
        for task in await self.task_repository.list_for_assignee(user.user_id, include_archived):
            merged.setdefault(task.id, task)
        return list(merged.values())
