"""
Task DTOs for the application layer.
Data Transfer Objects for task-related operations.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import Field

from taskhub.domain.models.task import TaskStatus
from .base_dto import RequestDTO, ResponseDTO, BaseDTO


# Nested DTOs
class PriorityResponseDTO(BaseDTO):
    """DTO for a priority bucket."""

    level: int = Field(description="Priority level, 1-10")
    label: str = Field(description="Priority band")
    color: str = Field(description="Display color")
    description: str = Field(description="Level description")


class TaskCommentResponseDTO(ResponseDTO):
    """DTO for task comment in responses."""

    content: str = Field(description="Comment content")
    author_id: str = Field(description="Comment author user ID")


class TaskFileResponseDTO(ResponseDTO):
    """DTO for task file attachment in responses."""

    file_name: str = Field(description="Attachment filename")
    file_size: int = Field(description="File size in bytes")
    file_type: str = Field(description="MIME type")
    storage_path: str = Field(description="Path in external storage")
    uploaded_by_id: str = Field(description="User ID who uploaded the file")
    uploaded_at: datetime = Field(description="Upload timestamp")


# Request DTOs
class CreateTaskRequestDTO(RequestDTO):
    """DTO for task creation requests."""

    title: str = Field(max_length=255, description="Task title")
    description: str = Field(default="", description="Task description")
    priority: int = Field(description="Priority level, 1-10")
    due_date: datetime = Field(description="Task due date")
    assignee_ids: List[str] = Field(default_factory=list, description="Assigned user IDs")
    project_id: Optional[str] = Field(default=None, description="Project ID")
    parent_task_id: Optional[str] = Field(default=None, description="Parent task ID for subtasks")
    tags: List[str] = Field(default_factory=list, description="Task tags")
    recurring_interval: Optional[int] = Field(default=None, description="Recurrence in days")


class UpdateTitleRequestDTO(RequestDTO):
    title: str = Field(max_length=255, description="New title")


class UpdateDescriptionRequestDTO(RequestDTO):
    description: str = Field(description="New description")


class UpdatePriorityRequestDTO(RequestDTO):
    priority: int = Field(description="New priority level")


class UpdateDeadlineRequestDTO(RequestDTO):
    due_date: datetime = Field(description="New due date")


class UpdateStatusRequestDTO(RequestDTO):
    status: TaskStatus = Field(description="New status")


class UpdateRecurringRequestDTO(RequestDTO):
    """DTO for recurrence settings."""

    enabled: bool = Field(description="Whether the task recurs")
    interval: Optional[int] = Field(default=None, description="Recurrence in days")


class TagRequestDTO(RequestDTO):
    tag: str = Field(min_length=1, max_length=50, description="Tag")


class AssigneeRequestDTO(RequestDTO):
    user_id: str = Field(min_length=1, description="User ID to assign")


class CommentRequestDTO(RequestDTO):
    """DTO for task comment in requests."""

    content: str = Field(min_length=1, max_length=2000, description="Comment content")


class AddFileRequestDTO(RequestDTO):
    """DTO for attaching file metadata to a task."""

    file_name: str = Field(min_length=1, max_length=255, description="Attachment filename")
    file_size: int = Field(ge=0, description="File size in bytes")
    file_type: str = Field(description="MIME type")
    storage_path: str = Field(description="Path in external storage")


# Response DTOs
class TaskResponseDTO(ResponseDTO):
    """DTO for task responses."""

    title: str
    description: str
    priority: PriorityResponseDTO
    due_date: datetime
    status: TaskStatus
    owner_id: str
    department_id: str
    project_id: Optional[str] = None
    parent_task_id: Optional[str] = None
    recurring_interval: Optional[int] = None
    is_archived: bool
    start_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assignments: List[str]
    tags: List[str]
    comments: List[TaskCommentResponseDTO] = Field(default_factory=list)
    files: List[TaskFileResponseDTO] = Field(default_factory=list)
    is_overdue: bool
    can_edit: Optional[bool] = Field(default=None, description="Whether the caller may edit")


class TaskActivityResponseDTO(BaseDTO):
    """DTO for task activity log entries."""

    id: str
    task_id: str
    user_id: Optional[str] = None
    action: str
    field_name: str
    changes: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
