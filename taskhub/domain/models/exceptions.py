"""
Task domain errors.
Closed set of error kinds raised for task validation and authorization failures.
"""

from taskhub.domain.models.base import (
    DomainException,
    ValidationError,
    BusinessRuleViolation,
)


class UnauthorizedError(DomainException):
    """Caller lacks the capability the operation requires."""

    def __init__(self, message: str = "User is not authorized to perform this action"):
        super().__init__(message, "UNAUTHORIZED")


class InvalidTitleError(ValidationError):
    def __init__(self):
        super().__init__(
            "Task title must be between 1 and 255 characters",
            field="title",
            code="INVALID_TITLE",
        )


class InvalidPriorityError(ValidationError):
    def __init__(self):
        super().__init__(
            "Priority must be between 1 and 10",
            field="priority",
            code="INVALID_PRIORITY",
        )


class InvalidRecurrenceError(ValidationError):
    def __init__(self):
        super().__init__(
            "Recurrence days must be greater than 0 when recurring is enabled",
            field="recurring_interval",
            code="INVALID_RECURRENCE",
        )


class InvalidSubtaskDeadlineError(ValidationError):
    def __init__(self):
        super().__init__(
            "Subtask deadline cannot be after parent task deadline",
            field="due_date",
            code="INVALID_SUBTASK_DEADLINE",
        )


class InvalidFileTypeError(ValidationError):
    def __init__(self):
        super().__init__(
            "File type not allowed. Only images, PDFs, docs, and spreadsheets are supported",
            field="file_type",
            code="INVALID_FILE_TYPE",
        )


class MaxAssigneesReachedError(BusinessRuleViolation):
    def __init__(self, limit: int = 5):
        super().__init__(
            f"Maximum of {limit} assignees allowed per task",
            code="MAX_ASSIGNEES_REACHED",
        )
        self.limit = limit


class FileSizeLimitExceededError(BusinessRuleViolation):
    def __init__(self, limit_bytes: int = 50 * 1024 * 1024):
        super().__init__(
            f"Total file size cannot exceed {limit_bytes // (1024 * 1024)}MB per task",
            code="FILE_SIZE_LIMIT_EXCEEDED",
        )
        self.limit_bytes = limit_bytes
