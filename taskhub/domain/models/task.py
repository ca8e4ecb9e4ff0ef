"""
Task domain model.
Aggregate root for a unit of work: status, priority, assignees, tags,
comments and file attachments, with every mutation validated in place.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Iterable, FrozenSet, Tuple, Union, List
from enum import Enum
import uuid

from taskhub.domain.models.base import (
    AggregateRoot,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    utcnow,
    as_utc,
)
from taskhub.domain.models.exceptions import (
    UnauthorizedError,
    InvalidTitleError,
    InvalidPriorityError,
    InvalidRecurrenceError,
    InvalidSubtaskDeadlineError,
    InvalidFileTypeError,
    MaxAssigneesReachedError,
    FileSizeLimitExceededError,
)
from taskhub.domain.models.user import UserRole
from taskhub.domain.models.value_objects import PriorityBucket
from taskhub.domain.events.task_events import (
    TaskCreated,
    TaskFieldUpdated,
    TaskStatusChanged,
    TaskTagAdded,
    TaskTagRemoved,
    TaskAssigneeAdded,
    TaskAssigneeRemoved,
    TaskCommentAdded,
    TaskCommentUpdated,
    TaskFileAdded,
    TaskFileRemoved,
    TaskArchived,
    TaskUnarchived,
    TaskCompleted,
)


class TaskStatus(str, Enum):
    """Task workflow status."""
    TO_DO = "TO_DO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


MAX_ASSIGNEES = 5
MAX_TOTAL_FILE_SIZE = 50 * 1024 * 1024

ALLOWED_FILE_TYPES = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})


@dataclass(frozen=True)
class TaskLimits:
    """Capacity ceilings and file allow-list applied by the Task aggregate."""

    max_assignees: int = MAX_ASSIGNEES
    max_total_file_size: int = MAX_TOTAL_FILE_SIZE
    allowed_file_types: FrozenSet[str] = ALLOWED_FILE_TYPES


DEFAULT_TASK_LIMITS = TaskLimits()


@dataclass
class TaskComment:
    """Task comment. Only its author may edit it."""

    id: str
    content: str
    author_id: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "author_id": self.author_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class TaskFile:
    """File attachment metadata. The blob itself lives in external storage."""

    id: str
    file_name: str
    file_size: int
    file_type: str
    storage_path: str
    uploaded_by_id: str
    uploaded_at: datetime = field(default_factory=utcnow)

    @classmethod
    def new(
        cls,
        file_name: str,
        file_size: int,
        file_type: str,
        storage_path: str,
        uploaded_by_id: str,
    ) -> "TaskFile":
        """Build a fresh attachment record with a generated id."""
        return cls(
            id=str(uuid.uuid4()),
            file_name=file_name,
            file_size=file_size,
            file_type=file_type,
            storage_path=storage_path,
            uploaded_by_id=uploaded_by_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "file_type": self.file_type,
            "storage_path": self.storage_path,
            "uploaded_by_id": self.uploaded_by_id,
            "uploaded_at": self.uploaded_at.isoformat(),
        }


class Task(AggregateRoot):
    """
    Task aggregate root.

    Built through ``Task.create`` from untrusted input; the constructor is
    reserved for rebuilding a task from a trusted persisted record.

    Invariants kept by every operation:
    - 1 <= len(assignments) <= limits.max_assignees
    - priority level in [1, 10]
    - recurring_interval is None or > 0
    - total file size <= limits.max_total_file_size
    - title is non-empty after trimming
    - owner_id, department_id, project_id and parent_task_id never change
    """

    def __init__(
        self,
        *,
        id: str,
        title: str,
        description: str,
        priority: Union[int, PriorityBucket],
        due_date: datetime,
        status: TaskStatus,
        owner_id: str,
        department_id: str,
        created_at: datetime,
        updated_at: datetime,
        project_id: Optional[str] = None,
        parent_task_id: Optional[str] = None,
        recurring_interval: Optional[int] = None,
        is_archived: bool = False,
        start_date: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
        assignments: Iterable[str] = (),
        tags: Iterable[str] = (),
        comments: Iterable[TaskComment] = (),
        files: Iterable[TaskFile] = (),
        limits: TaskLimits = DEFAULT_TASK_LIMITS,
    ):
        super().__init__(id=id, created_at=created_at, updated_at=updated_at)
        self._title = title
        self._description = description
        self._priority = priority if isinstance(priority, PriorityBucket) else PriorityBucket(priority)
        self._due_date = due_date
        self._status = TaskStatus(status)
        self._owner_id = owner_id
        self._department_id = department_id
        self._project_id = project_id
        self._parent_task_id = parent_task_id
        self._recurring_interval = recurring_interval
        self._is_archived = is_archived
        self._start_date = start_date
        self._completed_at = completed_at
        self._assignments = set(assignments)
        self._tags = set(tags)
        self._comments: List[TaskComment] = [replace(c) for c in comments]
        self._files: List[TaskFile] = list(files)
        self._limits = limits

    # ============================================
    # CREATE
    # ============================================

    @classmethod
    def create(
        cls,
        *,
        title: str,
        description: str,
        priority: int,
        due_date: datetime,
        owner_id: str,
        department_id: str,
        assignments: Iterable[str],
        project_id: Optional[str] = None,
        parent_task_id: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        recurring_interval: Optional[int] = None,
        limits: TaskLimits = DEFAULT_TASK_LIMITS,
    ) -> "Task":
        """
        Validate the input and build a new TO_DO task.

        Raises:
            InvalidTitleError: title is empty after trimming.
            InvalidPriorityError: priority outside [1, 10].
            BusinessRuleViolation: no assignee given.
            MaxAssigneesReachedError: more assignees than the limit.
            InvalidRecurrenceError: recurring_interval given and <= 0.
            ValidationError: project_id is the empty string.
        """
        trimmed_title = (title or "").strip()
        if not trimmed_title:
            raise InvalidTitleError()

        if not PriorityBucket.is_valid(priority):
            raise InvalidPriorityError()

        assignee_ids = set(assignments)
        if not assignee_ids:
            raise BusinessRuleViolation("Task must have at least 1 assignee")
        if len(assignee_ids) > limits.max_assignees:
            raise MaxAssigneesReachedError(limits.max_assignees)

        if recurring_interval is not None and recurring_interval <= 0:
            raise InvalidRecurrenceError()

        if project_id == "":
            raise ValidationError(
                "ProjectId cannot be an empty string, use null instead", "project_id"
            )

        now = utcnow()
        task = cls(
            id=str(uuid.uuid4()),
            title=trimmed_title,
            description=description or "",
            priority=priority,
            due_date=due_date,
            status=TaskStatus.TO_DO,
            owner_id=owner_id,
            department_id=department_id,
            project_id=project_id,
            parent_task_id=parent_task_id,
            recurring_interval=recurring_interval,
            is_archived=False,
            start_date=None,
            created_at=now,
            updated_at=now,
            assignments=assignee_ids,
            tags=tags or (),
            limits=limits,
        )
        task.add_event(TaskCreated(
            task_id=task.id,
            actor_id=owner_id,
            title=trimmed_title,
            assignee_ids=sorted(assignee_ids),
            parent_task_id=parent_task_id,
        ))
        return task

    # ============================================
    # UPDATE
    # ============================================

    def update_title(self, new_title: str) -> None:
        trimmed = (new_title or "").strip()
        if not trimmed:
            raise InvalidTitleError()

        old_title = self._title
        self._title = trimmed
        self.mark_as_updated()
        self.add_event(TaskFieldUpdated(self.id, "title", old_title, trimmed))

    def update_description(self, new_description: str) -> None:
        """Replace the description; empty is allowed."""
        old_description = self._description
        self._description = new_description
        self.mark_as_updated()
        self.add_event(TaskFieldUpdated(self.id, "description", old_description, new_description))

    def update_priority(self, new_level: int) -> None:
        if not PriorityBucket.is_valid(new_level):
            raise InvalidPriorityError()

        old_priority = self._priority
        self._priority = PriorityBucket(new_level)
        self.mark_as_updated()
        self.add_event(TaskFieldUpdated(self.id, "priority", old_priority, self._priority))

    def update_deadline(self, new_deadline: datetime, parent_deadline: Optional[datetime] = None) -> None:
        """
        Move the due date.

        A subtask may not end after its parent; the check runs only when the
        parent's current deadline is supplied. Past dates are accepted.
        """
        if self.is_subtask and parent_deadline is not None:
            if as_utc(new_deadline) > as_utc(parent_deadline):
                raise InvalidSubtaskDeadlineError()

        old_deadline = self._due_date
        self._due_date = new_deadline
        self.mark_as_updated()
        self.add_event(TaskFieldUpdated(self.id, "due_date", old_deadline, new_deadline))

    def update_status(self, new_status: Union[TaskStatus, str]) -> None:
        """
        Set any status; there is no transition graph.

        The first move into IN_PROGRESS stamps start_date, later ones keep it.
        """
        status = self._coerce_status(new_status)

        old_status = self._status
        self._status = status
        start_date_set = False
        if status is TaskStatus.IN_PROGRESS and self._start_date is None:
            self._start_date = utcnow()
            start_date_set = True
        self.mark_as_updated()
        self.add_event(TaskStatusChanged(
            self.id, old_status.value, status.value, start_date_set=start_date_set
        ))

    def add_tag(self, tag: str) -> None:
        added = tag not in self._tags
        self._tags.add(tag)
        self.mark_as_updated()
        if added:
            self.add_event(TaskTagAdded(self.id, tag))

    def remove_tag(self, tag: str) -> None:
        removed = tag in self._tags
        self._tags.discard(tag)
        self.mark_as_updated()
        if removed:
            self.add_event(TaskTagRemoved(self.id, tag))

    def add_assignee(
        self,
        new_user_id: str,
        actor_id: str,
        actor_role: Optional[Union[UserRole, str]] = None,
    ) -> None:
        """
        Assign another user.

        Managers may add without being assigned themselves; anyone else must
        already be an assignee. Re-adding a present user is a no-op.
        """
        is_manager = actor_role == UserRole.MANAGER
        if not is_manager and not self.is_user_assigned(actor_id):
            raise UnauthorizedError()

        if new_user_id in self._assignments:
            return

        if len(self._assignments) >= self._limits.max_assignees:
            raise MaxAssigneesReachedError(self._limits.max_assignees)

        self._assignments.add(new_user_id)
        self.mark_as_updated()
        self.add_event(TaskAssigneeAdded(self.id, new_user_id, actor_id))

    def remove_assignee(
        self,
        user_id: str,
        actor_id: str,
        actor_role: Optional[Union[UserRole, str]] = None,
    ) -> None:
        """
        Unassign a user. Managers only.

        Removing the owner is allowed and leaves owner_id untouched.
        """
        if actor_role != UserRole.MANAGER:
            raise UnauthorizedError()

        if user_id not in self._assignments:
            raise BusinessRuleViolation("User is not assigned to this task")

        if len(self._assignments) == 1:
            raise BusinessRuleViolation("Task must have at least 1 assignee")

        self._assignments.discard(user_id)
        self.mark_as_updated()
        self.add_event(TaskAssigneeRemoved(self.id, user_id, actor_id))

    def add_comment(self, content: str, user_id: str) -> TaskComment:
        """Append a comment. Who may comment is decided by the caller."""
        now = utcnow()
        comment = TaskComment(
            id=str(uuid.uuid4()),
            content=content,
            author_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self._comments.append(comment)
        self.mark_as_updated()
        self.add_event(TaskCommentAdded(self.id, comment.id, content, user_id))
        return replace(comment)

    def update_comment(self, comment_id: str, new_content: str, user_id: str) -> None:
        comment = next((c for c in self._comments if c.id == comment_id), None)
        if comment is None:
            raise EntityNotFoundError("Comment", comment_id)

        if comment.author_id != user_id:
            raise UnauthorizedError("Only the comment author can edit this comment")

        old_content = comment.content
        comment.content = new_content
        comment.updated_at = utcnow()
        self.mark_as_updated()
        self.add_event(TaskCommentUpdated(self.id, comment_id, old_content, new_content, user_id))

    def add_file(self, file: TaskFile, user_id: str) -> None:
        if not self.is_user_assigned(user_id):
            raise UnauthorizedError()

        if file.file_type not in self._limits.allowed_file_types:
            raise InvalidFileTypeError()

        if file.file_size < 0:
            raise ValidationError("File size cannot be negative", "file_size")

        if self.total_file_size + file.file_size > self._limits.max_total_file_size:
            raise FileSizeLimitExceededError(self._limits.max_total_file_size)

        self._files.append(file)
        self.mark_as_updated()
        self.add_event(TaskFileAdded(self.id, file.id, file.file_name, file.file_size, user_id))

    def remove_file(self, file_id: str, user_id: str) -> None:
        if not self.is_user_assigned(user_id):
            raise UnauthorizedError()

        file = next((f for f in self._files if f.id == file_id), None)
        if file is None:
            return

        self._files.remove(file)
        self.mark_as_updated()
        self.add_event(TaskFileRemoved(self.id, file.id, file.file_name, user_id))

    def update_recurring(self, enabled: bool, interval: Optional[int]) -> None:
        """Enable recurrence every ``interval`` days, or disable it."""
        if enabled:
            if interval is None or interval <= 0:
                raise InvalidRecurrenceError()
            new_interval: Optional[int] = interval
        else:
            new_interval = None

        old_interval = self._recurring_interval
        self._recurring_interval = new_interval
        self.mark_as_updated()
        self.add_event(TaskFieldUpdated(self.id, "recurring_interval", old_interval, new_interval))

    def archive(self) -> None:
        self._is_archived = True
        self.mark_as_updated()
        self.add_event(TaskArchived(self.id))

    def unarchive(self) -> None:
        self._is_archived = False
        self.mark_as_updated()
        self.add_event(TaskUnarchived(self.id))

    def complete(self, user_id: str) -> None:
        """Mark as COMPLETED. Every call refreshes completed_at."""
        if not self.is_user_assigned(user_id):
            raise UnauthorizedError()

        previous_status = self._status
        self._status = TaskStatus.COMPLETED
        self._completed_at = utcnow()
        self.mark_as_updated()
        self.add_event(TaskCompleted(self.id, user_id, previous_status.value))

    # ============================================
    # QUERY
    # ============================================

    @property
    def title(self) -> str:
        return self._title

    @property
    def description(self) -> str:
        return self._description

    @property
    def priority(self) -> PriorityBucket:
        return self._priority

    @property
    def due_date(self) -> datetime:
        return self._due_date

    @property
    def status(self) -> TaskStatus:
        return self._status

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def department_id(self) -> str:
        return self._department_id

    @property
    def project_id(self) -> Optional[str]:
        return self._project_id

    @property
    def parent_task_id(self) -> Optional[str]:
        return self._parent_task_id

    @property
    def recurring_interval(self) -> Optional[int]:
        return self._recurring_interval

    @property
    def is_recurring(self) -> bool:
        return self._recurring_interval is not None

    @property
    def is_archived(self) -> bool:
        return self._is_archived

    @property
    def start_date(self) -> Optional[datetime]:
        return self._start_date

    @property
    def completed_at(self) -> Optional[datetime]:
        return self._completed_at

    @property
    def assignments(self) -> FrozenSet[str]:
        return frozenset(self._assignments)

    @property
    def tags(self) -> FrozenSet[str]:
        return frozenset(self._tags)

    @property
    def comments(self) -> Tuple[TaskComment, ...]:
        return tuple(replace(c) for c in self._comments)

    @property
    def files(self) -> Tuple[TaskFile, ...]:
        return tuple(self._files)

    @property
    def limits(self) -> TaskLimits:
        return self._limits

    @property
    def is_subtask(self) -> bool:
        return self._parent_task_id is not None

    @property
    def total_file_size(self) -> int:
        return sum(f.file_size for f in self._files)

    def is_user_assigned(self, user_id: str) -> bool:
        return user_id in self._assignments

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Past the due date and not completed."""
        current = as_utc(now) if now is not None else utcnow()
        return current > as_utc(self._due_date) and self._status is not TaskStatus.COMPLETED

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "title": self._title,
            "description": self._description,
            "priority": self._priority.to_dict(),
            "due_date": self._due_date.isoformat(),
            "status": self._status.value,
            "owner_id": self._owner_id,
            "department_id": self._department_id,
            "project_id": self._project_id,
            "parent_task_id": self._parent_task_id,
            "recurring_interval": self._recurring_interval,
            "is_archived": self._is_archived,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "start_date": self._start_date.isoformat() if self._start_date else None,
            "completed_at": self._completed_at.isoformat() if self._completed_at else None,
            "assignments": sorted(self._assignments),
            "tags": sorted(self._tags),
            "comments": [c.to_dict() for c in self._comments],
            "files": [f.to_dict() for f in self._files],
            "is_overdue": self.is_overdue(),
        }

    @staticmethod
    def _coerce_status(value: Union[TaskStatus, str]) -> TaskStatus:
        try:
            return TaskStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid task status: {value}", "status")

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, title={self._title!r}, status={self._status.value})"
