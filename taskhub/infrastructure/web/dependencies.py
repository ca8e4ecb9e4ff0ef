"""
FastAPI dependencies for the web layer.
Provides the caller's identity and the application services.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from taskhub.application.services.dashboard_service import DashboardService
from taskhub.application.services.task_service import TaskService
from taskhub.config import Settings
from taskhub.domain.events.base import EventDispatcher
from taskhub.domain.models.user import UserContext, UserRole
from taskhub.domain.repositories.department_repository import DepartmentRepository
from taskhub.domain.repositories.task_repository import TaskRepository
from taskhub.domain.services.authorization_service import AuthorizationService
from taskhub.infrastructure.events.event_setup import initialize_event_system
from taskhub.infrastructure.repositories.in_memory import (
    InMemoryDepartmentRepository,
    InMemoryTaskRepository,
)


logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Wired collaborators shared by all requests of one application."""

    task_repository: TaskRepository
    department_repository: DepartmentRepository
    event_dispatcher: EventDispatcher
    task_service: TaskService
    dashboard_service: DashboardService


def build_container(
    settings: Settings,
    task_repository: Optional[TaskRepository] = None,
    department_repository: Optional[DepartmentRepository] = None,
) -> ServiceContainer:
    """Wire repositories, event handlers and services."""
    task_repository = task_repository or InMemoryTaskRepository()
    department_repository = department_repository or InMemoryDepartmentRepository()
    dispatcher = initialize_event_system(task_repository, EventDispatcher())
    authorization_service = AuthorizationService()

    return ServiceContainer(
        task_repository=task_repository,
        department_repository=department_repository,
        event_dispatcher=dispatcher,
        task_service=TaskService(
            task_repository,
            department_repository,
            authorization_service=authorization_service,
            event_dispatcher=dispatcher,
            limits=settings.task_limits,
        ),
        dashboard_service=DashboardService(
            task_repository,
            department_repository,
            authorization_service=authorization_service,
        ),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_task_service(
    container: Annotated[ServiceContainer, Depends(get_container)]
) -> TaskService:
    return container.task_service


def get_dashboard_service(
    container: Annotated[ServiceContainer, Depends(get_container)]
) -> DashboardService:
    return container.dashboard_service


async def get_current_user(
    x_user_id: Annotated[Optional[str], Header()] = None,
    x_user_role: Annotated[Optional[str], Header()] = None,
    x_department_id: Annotated[Optional[str], Header()] = None,
    x_hr_admin: Annotated[bool, Header()] = False,
) -> UserContext:
    """
    FastAPI dependency building the caller's UserContext.

    The identity headers are set by the authentication gateway in front of
    this service and are trusted as given.

    Raises:
        HTTPException: If an identity header is missing or the role is unknown
    """
    if not x_user_id or not x_user_role or not x_department_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity headers",
        )

    try:
        role = UserRole(x_user_role.upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown role: {x_user_role}",
        )

    return UserContext(
        user_id=x_user_id,
        role=role,
        department_id=x_department_id,
        is_hr_admin=x_hr_admin,
    )


CurrentUser = Annotated[UserContext, Depends(get_current_user)]
