"""
Task management router.
Exposes every task operation of the task service.
"""

from typing import Annotated, List
from fastapi import APIRouter, Depends, status

from taskhub.application.dto.base_dto import from_domain_entity
from taskhub.application.dto.task_dto import (
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
    TaskCommentResponseDTO,
    TaskActivityResponseDTO,
)
from taskhub.application.services.task_service import TaskService
from taskhub.domain.models.task import Task, TaskFile
from taskhub.domain.models.user import UserContext
from taskhub.infrastructure.web.dependencies import CurrentUser, get_task_service


router = APIRouter()

Service = Annotated[TaskService, Depends(get_task_service)]


async def _task_response(service: TaskService, user: UserContext, task: Task) -> TaskResponseDTO:
    can_edit = await service.compute_can_edit(user, task)
    return from_domain_entity(task, TaskResponseDTO, can_edit=can_edit)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TaskResponseDTO)
async def create_task(request: CreateTaskRequestDTO, user: CurrentUser, service: Service):
    """
    Create a task, or a subtask when parent_task_id is set.

    - **title**: Task title (required)
    - **priority**: Priority level 1-10 (required)
    - **due_date**: Due date (required)
    - **assignee_ids**: 1 to 5 assigned user IDs
    - **recurring_interval**: Recurrence in days
    """
    task = await service.create_task(
        user,
        title=request.title,
        description=request.description,
        priority=request.priority,
        due_date=request.due_date,
        assignee_ids=request.assignee_ids,
        project_id=request.project_id,
        parent_task_id=request.parent_task_id,
        tags=request.tags,
        recurring_interval=request.recurring_interval,
    )
    return await _task_response(service, user, task)


@router.get("/{task_id}", response_model=TaskResponseDTO)
async def get_task(task_id: str, user: CurrentUser, service: Service):
    task = await service.get_task(user, task_id)
    return await _task_response(service, user, task)


@router.get("/{task_id}/subtasks", response_model=List[TaskResponseDTO])
async def list_subtasks(task_id: str, user: CurrentUser, service: Service):
    subtasks = await service.list_subtasks(user, task_id)
    return [await _task_response(service, user, subtask) for subtask in subtasks]


@router.get("/{task_id}/activity", response_model=List[TaskActivityResponseDTO])
async def get_task_activity(task_id: str, user: CurrentUser, service: Service):
    """Activity log of a task, oldest first."""
    activities = await service.get_task_activity(user, task_id)
    return [from_domain_entity(activity, TaskActivityResponseDTO) for activity in activities]


@router.patch("/{task_id}/title", response_model=TaskResponseDTO)
async def update_title(task_id: str, request: UpdateTitleRequestDTO, user: CurrentUser, service: Service):
    task = await service.update_title(user, task_id, request.title)
    return await _task_response(service, user, task)


@router.patch("/{task_id}/description", response_model=TaskResponseDTO)
async def update_description(
    task_id: str, request: UpdateDescriptionRequestDTO, user: CurrentUser, service: Service
):
    task = await service.update_description(user, task_id, request.description)
    return await _task_response(service, user, task)


@router.patch("/{task_id}/priority", response_model=TaskResponseDTO)
async def update_priority(
    task_id: str, request: UpdatePriorityRequestDTO, user: CurrentUser, service: Service
):
    task = await service.update_priority(user, task_id, request.priority)
    return await _task_response(service, user, task)


@router.patch("/{task_id}/deadline", response_model=TaskResponseDTO)
async def update_deadline(
    task_id: str, request: UpdateDeadlineRequestDTO, user: CurrentUser, service: Service
):
    task = await service.update_deadline(user, task_id, request.due_date)
    return await _task_response(service, user, task)


@router.patch("/{task_id}/status", response_model=TaskResponseDTO)
async def update_status(task_id: str, request: UpdateStatusRequestDTO, user: CurrentUser, service: Service):
    """
    Change the task status.

    Completing a recurring task schedules its next occurrence.
    """
    task = await service.update_status(user, task_id, request.status)
    return await _task_response(service, user, task)


@router.patch("/{task_id}/recurring", response_model=TaskResponseDTO)
async def update_recurring(
    task_id: str, request: UpdateRecurringRequestDTO, user: CurrentUser, service: Service
):
    task = await service.update_recurring(user, task_id, request.enabled, request.interval)
    return await _task_response(service, user, task)


@router.post("/{task_id}/tags", response_model=TaskResponseDTO)
async def add_tag(task_id: str, request: TagRequestDTO, user: CurrentUser, service: Service):
    task = await service.add_tag(user, task_id, request.tag)
    return await _task_response(service, user, task)


@router.delete("/{task_id}/tags/{tag}", response_model=TaskResponseDTO)
async def remove_tag(task_id: str, tag: str, user: CurrentUser, service: Service):
    task = await service.remove_tag(user, task_id, tag)
    return await _task_response(service, user, task)


@router.post("/{task_id}/assignees", response_model=TaskResponseDTO)
async def add_assignee(task_id: str, request: AssigneeRequestDTO, user: CurrentUser, service: Service):
    task = await service.add_assignee(user, task_id, request.user_id)
    return await _task_response(service, user, task)


@router.delete("/{task_id}/assignees/{assignee_id}", response_model=TaskResponseDTO)
async def remove_assignee(task_id: str, assignee_id: str, user: CurrentUser, service: Service):
    """Unassign a user. Managers only."""
    task = await service.remove_assignee(user, task_id, assignee_id)
    return await _task_response(service, user, task)


@router.post(
    "/{task_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model=TaskCommentResponseDTO,
)
async def add_comment(task_id: str, request: CommentRequestDTO, user: CurrentUser, service: Service):
    comment = await service.add_comment(user, task_id, request.content)
    return from_domain_entity(comment, TaskCommentResponseDTO)


@router.patch("/{task_id}/comments/{comment_id}", response_model=TaskResponseDTO)
async def update_comment(
    task_id: str, comment_id: str, request: CommentRequestDTO, user: CurrentUser, service: Service
):
    """Edit a comment. Only its author may."""
    task = await service.update_comment(user, task_id, comment_id, request.content)
    return await _task_response(service, user, task)


@router.post("/{task_id}/files", status_code=status.HTTP_201_CREATED, response_model=TaskResponseDTO)
async def add_file(task_id: str, request: AddFileRequestDTO, user: CurrentUser, service: Service):
    """
    Attach an uploaded file to a task.

    The blob must already be in storage; this records its metadata.
    """
    file = TaskFile.new(
        file_name=request.file_name,
        file_size=request.file_size,
        file_type=request.file_type,
        storage_path=request.storage_path,
        uploaded_by_id=user.user_id,
    )
    task = await service.add_file(user, task_id, file)
    return await _task_response(service, user, task)


@router.delete("/{task_id}/files/{file_id}", response_model=TaskResponseDTO)
async def remove_file(task_id: str, file_id: str, user: CurrentUser, service: Service):
    task = await service.remove_file(user, task_id, file_id)
    return await _task_response(service, user, task)


@router.post("/{task_id}/complete", response_model=TaskResponseDTO)
async def complete_task(task_id: str, user: CurrentUser, service: Service):
    task = await service.complete_task(user, task_id)
    return await _task_response(service, user, task)


@router.post("/{task_id}/archive", response_model=TaskResponseDTO)
async def archive_task(task_id: str, user: CurrentUser, service: Service):
    """Archive a task and its subtasks. Managers only."""
    task = await service.archive_task(user, task_id)
    return await _task_response(service, user, task)


@router.post("/{task_id}/unarchive", response_model=TaskResponseDTO)
async def unarchive_task(task_id: str, user: CurrentUser, service: Service):
    task = await service.unarchive_task(user, task_id)
    return await _task_response(service, user, task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, user: CurrentUser, service: Service):
    await service.delete_task(user, task_id)
