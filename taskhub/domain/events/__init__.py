"""
Domain events for the task tracker.
"""

from .base import DomainEvent, EventHandler, EventDispatcher, get_event_dispatcher
from .task_events import (
    TaskEvent,
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

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "TaskEvent",
    "TaskCreated",
    "TaskFieldUpdated",
    "TaskStatusChanged",
    "TaskTagAdded",
    "TaskTagRemoved",
    "TaskAssigneeAdded",
    "TaskAssigneeRemoved",
    "TaskCommentAdded",
    "TaskCommentUpdated",
    "TaskFileAdded",
    "TaskFileRemoved",
    "TaskArchived",
    "TaskUnarchived",
    "TaskCompleted",
]
