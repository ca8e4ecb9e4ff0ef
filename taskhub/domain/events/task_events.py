"""
Domain events related to tasks.
Recorded by the Task aggregate and dispatched by the task service after save.
"""

from typing import Dict, Any, Optional, List

from .base import DomainEvent


class TaskEvent(DomainEvent):
    """Common shape of task events: the task and the user who caused it."""

    action: str = "UPDATED"
    subject: str = "Task"

    def __init__(self, task_id: str, actor_id: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.task_id = task_id
        self.actor_id = actor_id

    def _get_event_data(self) -> Dict[str, Any]:
        return {"task_id": self.task_id, "actor_id": self.actor_id, "changes": self.changes()}

    def changes(self) -> Dict[str, Any]:
        return {}


class TaskCreated(TaskEvent):
    """Event fired when a new task is created."""

    action = "CREATED"

    def __init__(self, task_id: str, actor_id: str, title: str,
                 assignee_ids: List[str], parent_task_id: Optional[str] = None, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.title = title
        self.assignee_ids = assignee_ids
        self.parent_task_id = parent_task_id

    def changes(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "assignees": list(self.assignee_ids),
            "parent_task_id": self.parent_task_id,
        }


class TaskFieldUpdated(TaskEvent):
    """Event fired when a scalar task field changes."""

    def __init__(self, task_id: str, field_name: str, old_value: Any, new_value: Any,
                 actor_id: Optional[str] = None, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.field_name = field_name
        self.subject = field_name
        self.old_value = old_value
        self.new_value = new_value

    def changes(self) -> Dict[str, Any]:
        return {"from": _serialize(self.old_value), "to": _serialize(self.new_value)}


class TaskStatusChanged(TaskEvent):
    """Event fired when task status changes."""

    subject = "status"

    def __init__(self, task_id: str, old_status: str, new_status: str,
                 start_date_set: bool = False, actor_id: Optional[str] = None, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.old_status = old_status
        self.new_status = new_status
        self.start_date_set = start_date_set

    def changes(self) -> Dict[str, Any]:
        return {
            "from": self.old_status,
            "to": self.new_status,
            "start_date_set": self.start_date_set,
        }


class TaskTagAdded(TaskEvent):
    action = "CREATED"
    subject = "tag"

    def __init__(self, task_id: str, tag: str, actor_id: Optional[str] = None, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.tag = tag

    def changes(self) -> Dict[str, Any]:
        return {"added": self.tag}


class TaskTagRemoved(TaskEvent):
    action = "DELETED"
    subject = "tag"

    def __init__(self, task_id: str, tag: str, actor_id: Optional[str] = None, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.tag = tag

    def changes(self) -> Dict[str, Any]:
        return {"removed": self.tag}


class TaskAssigneeAdded(TaskEvent):
    """Event fired when a user is assigned to a task."""

    subject = "assignees"

    def __init__(self, task_id: str, user_id: str, actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.user_id = user_id

    def changes(self) -> Dict[str, Any]:
        return {"added": self.user_id}


class TaskAssigneeRemoved(TaskEvent):
    """Event fired when a user is unassigned from a task."""

    subject = "assignees"

    def __init__(self, task_id: str, user_id: str, actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.user_id = user_id

    def changes(self) -> Dict[str, Any]:
        return {"removed": self.user_id}


class TaskCommentAdded(TaskEvent):
    action = "CREATED"
    subject = "comment"

    def __init__(self, task_id: str, comment_id: str, content: str, actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.comment_id = comment_id
        self.content = content

    def changes(self) -> Dict[str, Any]:
        return {"comment_id": self.comment_id, "said": self.content}


class TaskCommentUpdated(TaskEvent):
    subject = "comment"

    def __init__(self, task_id: str, comment_id: str, old_content: str, new_content: str,
                 actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.comment_id = comment_id
        self.old_content = old_content
        self.new_content = new_content

    def changes(self) -> Dict[str, Any]:
        return {"comment_id": self.comment_id, "from": self.old_content, "to": self.new_content}


class TaskFileAdded(TaskEvent):
    action = "CREATED"
    subject = "file"

    def __init__(self, task_id: str, file_id: str, file_name: str, file_size: int,
                 actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.file_id = file_id
        self.file_name = file_name
        self.file_size = file_size

    def changes(self) -> Dict[str, Any]:
        return {"added": self.file_name, "file_id": self.file_id, "file_size": self.file_size}


class TaskFileRemoved(TaskEvent):
    action = "DELETED"
    subject = "file"

    def __init__(self, task_id: str, file_id: str, file_name: str, actor_id: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.file_id = file_id
        self.file_name = file_name

    def changes(self) -> Dict[str, Any]:
        return {"removed": self.file_name, "file_id": self.file_id}


class TaskArchived(TaskEvent):
    action = "ARCHIVED"

    def changes(self) -> Dict[str, Any]:
        return {"from": False, "to": True}


class TaskUnarchived(TaskEvent):
    action = "UNARCHIVED"

    def changes(self) -> Dict[str, Any]:
        return {"from": True, "to": False}


class TaskCompleted(TaskEvent):
    """Event fired when an assignee completes a task."""

    action = "COMPLETED"

    def __init__(self, task_id: str, actor_id: str, previous_status: str, **kwargs):
        super().__init__(task_id, actor_id, **kwargs)
        self.previous_status = previous_status

    def changes(self) -> Dict[str, Any]:
        return {"from": self.previous_status, "to": "COMPLETED"}


def _serialize(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "level"):
        return value.level
    return value
