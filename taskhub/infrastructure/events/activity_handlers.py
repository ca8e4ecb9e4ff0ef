"""
Event handlers for the task activity log.
Converts task domain events into activity log entries.
"""

import logging

from taskhub.domain.events.base import EventHandler, DomainEvent
from taskhub.domain.events.task_events import TaskEvent
from taskhub.domain.repositories.task_repository import TaskActivity, TaskRepository


logger = logging.getLogger(__name__)


class EventLoggingHandler(EventHandler):
    """Logs every event passing through the dispatcher."""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Event received: {event.event_type} (ID: {event.event_id})")


class TaskActivityHandler(EventHandler):
    """Writes one activity log entry per task event."""

    def __init__(self, task_repository: TaskRepository):
        self.task_repository = task_repository

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, TaskEvent)

    async def handle(self, event: DomainEvent) -> None:
        activity = TaskActivity(
            id=event.event_id,
            task_id=event.task_id,
            user_id=event.actor_id,
            action=event.action,
            field_name=event.subject,
            changes=event.changes(),
            timestamp=event.occurred_at,
        )
        await self.task_repository.log_task_action(activity)
        logger.debug(f"Logged {activity.action} on {activity.field_name} for task {activity.task_id}")
