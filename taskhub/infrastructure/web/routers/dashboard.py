"""
Dashboard router.
Returns the caller's visible tasks with per-task edit rights and metrics.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query

from taskhub.application.dto.base_dto import from_domain_entity
from taskhub.application.dto.dashboard_dto import DashboardMetricsDTO, DashboardResponseDTO
from taskhub.application.dto.task_dto import TaskResponseDTO
from taskhub.application.services.dashboard_service import DashboardService
from taskhub.domain.models.task import TaskStatus
from taskhub.domain.services.authorization_service import DashboardFilters
from taskhub.infrastructure.web.dependencies import CurrentUser, get_dashboard_service


router = APIRouter()


@router.get("", response_model=DashboardResponseDTO)
async def get_dashboard(
    user: CurrentUser,
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
    department: Optional[str] = Query(None, description="Filter by department name"),
    project_id: Optional[str] = Query(None, description="Filter by project ID"),
    assignee_id: Optional[str] = Query(None, description="Filter by assignee"),
    status: Optional[TaskStatus] = Query(None, description="Filter by task status"),
    include_archived: bool = Query(False, description="Include archived tasks"),
):
    """
    Tasks visible to the caller.

    - **department**: Department name
    - **project_id**: Project ID
    - **assignee_id**: Assigned user ID
    - **status**: TO_DO, IN_PROGRESS, COMPLETED or BLOCKED

    Filters combine; metrics count the filtered tasks.
    """
    view = await service.compute_visible_tasks(
        user,
        DashboardFilters(
            department=department,
            project_id=project_id,
            assignee_id=assignee_id,
            status=status,
            include_archived=include_archived,
        ),
    )
    return DashboardResponseDTO(
        tasks=[
            from_domain_entity(item.task, TaskResponseDTO, can_edit=item.can_edit)
            for item in view.tasks
        ],
        metrics=DashboardMetricsDTO(**view.metrics.to_dict()),
    )
