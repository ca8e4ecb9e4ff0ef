"""
Dashboard DTOs.
"""

from typing import List, Optional
from pydantic import Field

from taskhub.domain.models.task import TaskStatus
from .base_dto import BaseDTO, RequestDTO
from .task_dto import TaskResponseDTO


class DashboardFiltersDTO(RequestDTO):
    """Dashboard query filters; all of them combine."""

    department: Optional[str] = Field(default=None, description="Department name")
    project_id: Optional[str] = Field(default=None, description="Project ID")
    assignee_id: Optional[str] = Field(default=None, description="Assigned user ID")
    status: Optional[TaskStatus] = Field(default=None, description="Task status")
    include_archived: bool = Field(default=False, description="Include archived tasks")


class DashboardMetricsDTO(BaseDTO):
    to_do: int
    in_progress: int
    completed: int
    blocked: int
    total: int


class DashboardResponseDTO(BaseDTO):
    tasks: List[TaskResponseDTO]
    metrics: DashboardMetricsDTO
