"""
Domain models for the task tracker.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    AggregateRoot,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    ValueObject,
)

# Task errors
from .exceptions import (
    UnauthorizedError,
    InvalidTitleError,
    InvalidPriorityError,
    InvalidRecurrenceError,
    InvalidSubtaskDeadlineError,
    InvalidFileTypeError,
    MaxAssigneesReachedError,
    FileSizeLimitExceededError,
)

# Value Objects
from .value_objects import PriorityBucket

# Domain entities
from .user import UserRole, UserContext
from .department import Department
from .task import (
    Task,
    TaskStatus,
    TaskLimits,
    TaskComment,
    TaskFile,
    DEFAULT_TASK_LIMITS,
)

__all__ = [
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "EntityNotFoundError",
    "ValueObject",
    "UnauthorizedError",
    "InvalidTitleError",
    "InvalidPriorityError",
    "InvalidRecurrenceError",
    "InvalidSubtaskDeadlineError",
    "InvalidFileTypeError",
    "MaxAssigneesReachedError",
    "FileSizeLimitExceededError",
    "PriorityBucket",
    "UserRole",
    "UserContext",
    "Department",
    "Task",
    "TaskStatus",
    "TaskLimits",
    "TaskComment",
    "TaskFile",
    "DEFAULT_TASK_LIMITS",
]
