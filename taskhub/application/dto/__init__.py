"""
Data transfer objects for the application layer.
"""

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, ErrorResponseDTO, from_domain_entity
from .task_dto import (
    PriorityResponseDTO,
    TaskCommentResponseDTO,
    TaskFileResponseDTO,
    CreateTaskRequestDTO,
    UpdateTitleRequestDTO,
    UpdateDescriptionRequestDTO,
    UpdatePriorityRequestDTO,
    UpdateDeadlineRequestDTO,
    UpdateStatusRequestDTO,
    UpdateRecurringRequestDTO,
    TagRequestDTO,
    AssigneeRequestDTO,
    CommentRequestDTO,
    AddFileRequestDTO,
    TaskResponseDTO,
    TaskActivityResponseDTO,
)
from .dashboard_dto import DashboardFiltersDTO, DashboardMetricsDTO, DashboardResponseDTO
