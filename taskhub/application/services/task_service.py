"""
Task application service.
Loads tasks, gates every operation on the caller's rights, lets the Task
aggregate validate and mutate itself, then persists and dispatches events.
"""

import logging
from datetime import datetime, timedelta
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from taskhub.domain.events.base import EventDispatcher, get_event_dispatcher
from taskhub.domain.models.base import (
    BusinessRuleViolation,
    EntityNotFoundError,
    as_utc,
)
from taskhub.domain.models.exceptions import UnauthorizedError, InvalidSubtaskDeadlineError
from taskhub.domain.models.task import (
    Task,
    TaskComment,
    TaskFile,
    TaskLimits,
    TaskStatus,
    DEFAULT_TASK_LIMITS,
)
from taskhub.domain.models.user import UserContext
from taskhub.domain.repositories.department_repository import DepartmentRepository
from taskhub.domain.repositories.task_repository import TaskActivity, TaskRepository
from taskhub.domain.services.authorization_service import AuthorizationService
from taskhub.domain.services.department_hierarchy import DepartmentHierarchyResolver


logger = logging.getLogger(__name__)


class TaskService:
    """
    Orchestrates task operations for an authenticated caller.

    Every operation requires the caller to be able to view the task. Field
    edits, tags, comments, recurrence, unarchive and delete also require edit
    rights. Assignment, file, completion and comment-authorship rules are
    enforced by the Task aggregate itself.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        department_repository: DepartmentRepository,
        authorization_service: Optional[AuthorizationService] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        limits: TaskLimits = DEFAULT_TASK_LIMITS,
    ):
        self.task_repository = task_repository
        self.department_repository = department_repository
        self.authorization_service = authorization_service or AuthorizationService()
        self.event_dispatcher = event_dispatcher or get_event_dispatcher()
        self.limits = limits

    # ============================================
    # CREATE / READ
    # ============================================

    async def create_task(
        self,
        user: UserContext,
        *,
        title: str,
        description: str,
        priority: int,
        due_date: datetime,
        assignee_ids: Iterable[str],
        project_id: Optional[str] = None,
        parent_task_id: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        recurring_interval: Optional[int] = None,
    ) -> Task:
        """
        Create a task, or a subtask when ``parent_task_id`` is given.

        The task belongs to the caller's department and the caller owns it.
        Subtasks may only hang off top-level tasks and may not end after
        their parent.
        """
        if project_id and not await self.task_repository.project_exists(project_id):
            raise EntityNotFoundError("Project", project_id)

        if parent_task_id is not None:
            parent, _ = await self._load_viewable(parent_task_id, user, entity_type="Parent task")
            if parent.is_subtask:
                raise BusinessRuleViolation("Maximum subtask depth is 2 levels")
            if as_utc(due_date) > as_utc(parent.due_date):
                raise InvalidSubtaskDeadlineError()

        task = Task.create(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            owner_id=user.user_id,
            department_id=user.department_id,
            assignments=assignee_ids,
            project_id=project_id,
            parent_task_id=parent_task_id,
            tags=tags,
            recurring_interval=recurring_interval,
            limits=self.limits,
        )

        saved = await self._persist(task, user)
        logger.info(f"Task {saved.id} created by {user.user_id}")
        return saved

    async def get_task(self, user: UserContext, task_id: str) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        return task

    async def compute_can_edit(self, user: UserContext, task: Task) -> bool:
        """Whether the caller may edit the given task."""
        subtree = await self._department_subtree(user)
        return self.authorization_service.can_edit(user, task, subtree)

    async def list_subtasks(self, user: UserContext, task_id: str) -> List[Task]:
        """Direct subtasks of a task that the caller can view."""
        _, subtree = await self._load_viewable(task_id, user)
        subtasks = await self.task_repository.find_subtasks(task_id)
        return [
            subtask for subtask in subtasks
            if self.authorization_service.can_view(user, subtask, subtree)
        ]

    async def get_task_activity(self, user: UserContext, task_id: str) -> List[TaskActivity]:
        await self._load_viewable(task_id, user)
        return await self.task_repository.list_task_actions(task_id)

    # ============================================
    # FIELD UPDATES
    # ============================================

    async def update_title(self, user: UserContext, task_id: str, title: str) -> Task:
        task = await self._load_editable(task_id, user)
        task.update_title(title)
        return await self._persist(task, user)

    async def update_description(self, user: UserContext, task_id: str, description: str) -> Task:
        task = await self._load_editable(task_id, user)
        task.update_description(description)
        return await self._persist(task, user)

    async def update_priority(self, user: UserContext, task_id: str, priority: int) -> Task:
        task = await self._load_editable(task_id, user)
        task.update_priority(priority)
        return await self._persist(task, user)

    async def update_deadline(self, user: UserContext, task_id: str, due_date: datetime) -> Task:
        """Move the due date, bounded by the parent's deadline for subtasks."""
        task = await self._load_editable(task_id, user)

        parent_deadline = None
        if task.is_subtask:
            parent = await self.task_repository.find_by_id(task.parent_task_id)
            if parent is not None:
                parent_deadline = parent.due_date

        task.update_deadline(due_date, parent_deadline)
        return await self._persist(task, user)

    async def update_status(
        self,
        user: UserContext,
        task_id: str,
        status: Union[TaskStatus, str],
    ) -> Task:
        """
        Set the task status.

        Moving a recurring task into COMPLETED schedules its next occurrence.
        """
        task = await self._load_editable(task_id, user)
        previous_status = task.status

        task.update_status(status)
        saved = await self._persist(task, user)
        logger.info(f"Task {task_id} status changed {previous_status.value} -> {saved.status.value}")

        if saved.status is TaskStatus.COMPLETED and previous_status is not TaskStatus.COMPLETED:
            await self._schedule_next_occurrence(saved, user)
        return saved

    async def update_recurring(
        self,
        user: UserContext,
        task_id: str,
        enabled: bool,
        interval: Optional[int] = None,
    ) -> Task:
        task = await self._load_editable(task_id, user)
        task.update_recurring(enabled, interval)
        return await self._persist(task, user)

    async def add_tag(self, user: UserContext, task_id: str, tag: str) -> Task:
        task = await self._load_editable(task_id, user)
        task.add_tag(tag)
        return await self._persist(task, user)

    async def remove_tag(self, user: UserContext, task_id: str, tag: str) -> Task:
        task = await self._load_editable(task_id, user)
        task.remove_tag(tag)
        return await self._persist(task, user)

    # ============================================
    # ASSIGNEES / COMMENTS / FILES
    # ============================================

    async def add_assignee(self, user: UserContext, task_id: str, assignee_id: str) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        task.add_assignee(assignee_id, user.user_id, user.role)
        return await self._persist(task, user)

    async def remove_assignee(self, user: UserContext, task_id: str, assignee_id: str) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        task.remove_assignee(assignee_id, user.user_id, user.role)
        return await self._persist(task, user)

    async def add_comment(self, user: UserContext, task_id: str, content: str) -> TaskComment:
        task = await self._load_editable(task_id, user)
        comment = task.add_comment(content, user.user_id)
        await self._persist(task, user)
        return comment

    async def update_comment(
        self,
        user: UserContext,
        task_id: str,
        comment_id: str,
        content: str,
    ) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        task.update_comment(comment_id, content, user.user_id)
        return await self._persist(task, user)

    async def add_file(self, user: UserContext, task_id: str, file: TaskFile) -> Task:
        """Attach file metadata; the blob is stored by an external collaborator."""
        task, _ = await self._load_viewable(task_id, user)
        task.add_file(file, user.user_id)
        return await self._persist(task, user)

    async def remove_file(self, user: UserContext, task_id: str, file_id: str) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        task.remove_file(file_id, user.user_id)
        return await self._persist(task, user)

    # ============================================
    # LIFECYCLE
    # ============================================

    async def complete_task(self, user: UserContext, task_id: str) -> Task:
        task, _ = await self._load_viewable(task_id, user)
        previous_status = task.status

        task.complete(user.user_id)
        saved = await self._persist(task, user)

        if previous_status is not TaskStatus.COMPLETED:
            await self._schedule_next_occurrence(saved, user)
        return saved

    async def archive_task(self, user: UserContext, task_id: str) -> Task:
        """
        Archive a task and all of its subtasks. Managers only.
        """
        if not user.is_manager:
            logger.warning(f"User {user.user_id} tried to archive task {task_id} without manager role")
            raise UnauthorizedError("Only managers can archive tasks")

        task = await self._load_editable(task_id, user)
        task.archive()
        saved = await self._persist(task, user)

        for subtask in await self.task_repository.find_subtasks(task_id):
            if not subtask.is_archived:
                subtask.archive()
                await self._persist(subtask, user)

        logger.info(f"Task {task_id} archived by {user.user_id}")
        return saved

    async def unarchive_task(self, user: UserContext, task_id: str) -> Task:
        task = await self._load_editable(task_id, user)
        task.unarchive()
        return await self._persist(task, user)

    async def delete_task(self, user: UserContext, task_id: str) -> None:
        """Delete a task that has no subtasks."""
        await self._load_editable(task_id, user)

        if await self.task_repository.find_subtasks(task_id):
            raise BusinessRuleViolation(
                "Cannot delete a task that has subtasks, archive it instead"
            )

        await self.task_repository.delete(task_id)
        logger.info(f"Task {task_id} deleted by {user.user_id}")

    # ============================================
    # HELPERS
    # ============================================

    async def _department_subtree(self, user: UserContext) -> FrozenSet[str]:
        resolver = DepartmentHierarchyResolver(await self.department_repository.list_all())
        return self.authorization_service.department_subtree(user, resolver)

    async def _load_viewable(
        self,
        task_id: str,
        user: UserContext,
        entity_type: str = "Task",
    ) -> Tuple[Task, FrozenSet[str]]:
        task = await self.task_repository.find_by_id(task_id)
        if task is None:
            raise EntityNotFoundError(entity_type, task_id)

        subtree = await self._department_subtree(user)
        if not self.authorization_service.can_view(user, task, subtree):
            logger.warning(f"User {user.user_id} denied access to task {task_id}")
            raise UnauthorizedError("You do not have access to this task")
        return task, subtree

    async def _load_editable(self, task_id: str, user: UserContext) -> Task:
        task, subtree = await self._load_viewable(task_id, user)
        if not self.authorization_service.can_edit(user, task, subtree):
            logger.warning(f"User {user.user_id} denied edit on task {task_id}")
            raise UnauthorizedError("You do not have permission to edit this task")
        return task

    async def _persist(self, task: Task, user: UserContext) -> Task:
        """Save the task, then dispatch the events it recorded."""
        events = task.pull_events()
        saved = await self.task_repository.save(task)

        for event in events:
            if getattr(event, "actor_id", None) is None:
                event.actor_id = user.user_id
        await self.event_dispatcher.dispatch_all(events)
        return saved

    async def _schedule_next_occurrence(self, completed: Task, user: UserContext) -> Optional[Task]:
        """Create the next TO_DO instance of a recurring task."""
        interval = completed.recurring_interval
        if interval is None:
            return None

        next_task = Task.create(
            title=completed.title,
            description=completed.description,
            priority=completed.priority.level,
            due_date=completed.due_date + timedelta(days=interval),
            owner_id=completed.owner_id,
            department_id=completed.department_id,
            assignments=completed.assignments,
            project_id=completed.project_id,
            parent_task_id=completed.parent_task_id,
            tags=completed.tags,
            recurring_interval=interval,
            limits=completed.limits,
        )
        saved = await self._persist(next_task, user)
        logger.info(f"Recurring task {completed.id} scheduled next occurrence {saved.id}")
        return saved
