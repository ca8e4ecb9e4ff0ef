"""
Unit tests for the Task aggregate.
"""

import pytest
from datetime import datetime, timedelta, timezone

from taskhub.domain.models.base import (
    BusinessRuleViolation,
    EntityNotFoundError,
    ValidationError,
)
from taskhub.domain.models.exceptions import (
    FileSizeLimitExceededError,
    InvalidFileTypeError,
    InvalidPriorityError,
    InvalidRecurrenceError,
    InvalidSubtaskDeadlineError,
    InvalidTitleError,
    MaxAssigneesReachedError,
    UnauthorizedError,
)
from taskhub.domain.models.task import (
    MAX_TOTAL_FILE_SIZE,
    Task,
    TaskComment,
    TaskFile,
    TaskLimits,
    TaskStatus,
)
from taskhub.domain.models.user import UserRole
from taskhub.domain.events.task_events import (
    TaskAssigneeAdded,
    TaskCreated,
    TaskStatusChanged,
    TaskTagAdded,
)


DUE = datetime(2030, 6, 30, tzinfo=timezone.utc)
MIB = 1024 * 1024


def make_task(**overrides) -> Task:
    data = dict(
        title="Write report",
        description="Quarterly numbers",
        priority=5,
        due_date=DUE,
        owner_id="owner",
        department_id="eng",
        assignments=["owner"],
    )
    data.update(overrides)
    return Task.create(**data)


def make_file(size: int, file_type: str = "application/pdf", name: str = "doc.pdf") -> TaskFile:
    return TaskFile.new(
        file_name=name,
        file_size=size,
        file_type=file_type,
        storage_path=f"tasks/{name}",
        uploaded_by_id="owner",
    )


class TestTaskCreation:
    """Test cases for Task.create."""

    def test_create_valid_task(self):
        """Test creating a task with valid data."""
        task = make_task(title="  Write report  ", tags=["q3"])

        assert task.title == "Write report"
        assert task.status == TaskStatus.TO_DO
        assert task.priority.level == 5
        assert task.assignments == frozenset({"owner"})
        assert task.tags == frozenset({"q3"})
        assert task.start_date is None
        assert task.completed_at is None
        assert task.is_archived is False
        assert task.created_at == task.updated_at
        assert task.id

    def test_create_records_created_event(self):
        task = make_task(assignments=["owner", "u2"])

        events = task.pull_events()

        assert len(events) == 1
        assert isinstance(events[0], TaskCreated)
        assert events[0].assignee_ids == ["owner", "u2"]
        assert task.pull_events() == []

    def test_create_without_assignees(self):
        with pytest.raises(BusinessRuleViolation, match="at least 1 assignee"):
            make_task(assignments=[])

    def test_create_with_one_and_five_assignees(self):
        assert len(make_task(assignments=["a"]).assignments) == 1
        assert len(make_task(assignments=["a", "b", "c", "d", "e"]).assignments) == 5

    def test_create_with_six_assignees(self):
        with pytest.raises(MaxAssigneesReachedError):
            make_task(assignments=["a", "b", "c", "d", "e", "f"])

    def test_create_respects_custom_limits(self):
        with pytest.raises(MaxAssigneesReachedError, match="Maximum of 2"):
            make_task(assignments=["a", "b", "c"], limits=TaskLimits(max_assignees=2))

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_create_with_blank_title(self, title):
        with pytest.raises(InvalidTitleError):
            make_task(title=title)

    @pytest.mark.parametrize("priority", [0, 11, -1, True])
    def test_create_with_invalid_priority(self, priority):
        with pytest.raises(InvalidPriorityError):
            make_task(priority=priority)

    @pytest.mark.parametrize("interval", [0, -3])
    def test_create_with_invalid_recurrence(self, interval):
        with pytest.raises(InvalidRecurrenceError):
            make_task(recurring_interval=interval)

    def test_create_with_empty_project_id(self):
        with pytest.raises(ValidationError, match="ProjectId cannot be an empty string"):
            make_task(project_id="")

    def test_create_recurring_task(self):
        task = make_task(recurring_interval=7)

        assert task.is_recurring is True
        assert task.recurring_interval == 7


class TestTaskFieldUpdates:
    """Test cases for title, description, priority and deadline updates."""

    def test_update_title_trims(self):
        task = make_task()
        task.update_title("  New title ")
        assert task.title == "New title"

    def test_update_title_blank_leaves_title(self):
        task = make_task()
        with pytest.raises(InvalidTitleError):
            task.update_title("   ")
        assert task.title == "Write report"

    def test_update_description_allows_empty(self):
        task = make_task()
        task.update_description("")
        assert task.description == ""

    @pytest.mark.parametrize("level", [0, 11])
    def test_update_priority_out_of_range(self, level):
        task = make_task(priority=4)
        with pytest.raises(InvalidPriorityError):
            task.update_priority(level)
        assert task.priority.level == 4

    @pytest.mark.parametrize("level", [1, 10])
    def test_update_priority_boundaries(self, level):
        task = make_task()
        task.update_priority(level)
        assert task.priority.level == level

    def test_subtask_deadline_equal_to_parent(self):
        parent_deadline = datetime(2025, 12, 31, tzinfo=timezone.utc)
        subtask = make_task(parent_task_id="parent", due_date=datetime(2025, 12, 1, tzinfo=timezone.utc))

        subtask.update_deadline(datetime(2025, 12, 31, tzinfo=timezone.utc), parent_deadline)

        assert subtask.due_date == parent_deadline

    def test_subtask_deadline_after_parent(self):
        parent_deadline = datetime(2025, 12, 31, tzinfo=timezone.utc)
        original = datetime(2025, 12, 1, tzinfo=timezone.utc)
        subtask = make_task(parent_task_id="parent", due_date=original)

        with pytest.raises(InvalidSubtaskDeadlineError):
            subtask.update_deadline(datetime(2026, 1, 1, tzinfo=timezone.utc), parent_deadline)
        assert subtask.due_date == original

    def test_top_level_deadline_ignores_parent_deadline(self):
        task = make_task()
        later = datetime(2040, 1, 1, tzinfo=timezone.utc)

        task.update_deadline(later, datetime(2025, 1, 1, tzinfo=timezone.utc))

        assert task.due_date == later

    def test_past_deadline_is_accepted(self):
        task = make_task()
        past = datetime(2001, 1, 1, tzinfo=timezone.utc)
        task.update_deadline(past)
        assert task.due_date == past


class TestTaskStatus:
    """Test cases for status changes."""

    def test_first_in_progress_sets_start_date(self):
        task = make_task()

        task.update_status(TaskStatus.IN_PROGRESS)

        assert task.status == TaskStatus.IN_PROGRESS
        assert task.start_date is not None

    def test_start_date_kept_on_reentry(self):
        task = make_task()
        task.update_status(TaskStatus.IN_PROGRESS)
        first_start = task.start_date

        task.update_status(TaskStatus.BLOCKED)
        task.update_status(TaskStatus.IN_PROGRESS)

        assert task.start_date == first_start

    def test_any_transition_allowed(self):
        """Reopening a completed task is a plain status change."""
        task = make_task()
        task.update_status(TaskStatus.COMPLETED)
        task.update_status(TaskStatus.IN_PROGRESS)
        task.update_status(TaskStatus.TO_DO)
        assert task.status == TaskStatus.TO_DO

    def test_status_accepts_string_value(self):
        task = make_task()
        task.update_status("BLOCKED")
        assert task.status == TaskStatus.BLOCKED

    def test_invalid_status(self):
        task = make_task()
        with pytest.raises(ValidationError):
            task.update_status("DONE")
        assert task.status == TaskStatus.TO_DO

    def test_status_change_event(self):
        task = make_task()
        task.pull_events()

        task.update_status(TaskStatus.IN_PROGRESS)

        (event,) = task.pull_events()
        assert isinstance(event, TaskStatusChanged)
        assert event.changes() == {"from": "TO_DO", "to": "IN_PROGRESS", "start_date_set": True}


class TestTaskTags:
    """Test cases for tags."""

    def test_add_tag_is_idempotent(self):
        task = make_task()
        task.pull_events()

        task.add_tag("urgent")
        task.add_tag("urgent")

        assert task.tags == frozenset({"urgent"})
        assert len([e for e in task.pull_events() if isinstance(e, TaskTagAdded)]) == 1

    def test_remove_absent_tag_is_silent(self):
        task = make_task(tags=["a"])
        before = task.updated_at

        task.remove_tag("missing")

        assert task.tags == frozenset({"a"})
        assert task.updated_at >= before

    def test_remove_tag(self):
        task = make_task(tags=["a", "b"])
        task.remove_tag("a")
        assert task.tags == frozenset({"b"})


class TestTaskAssignees:
    """Test cases for adding and removing assignees."""

    def test_assignee_adds_user(self):
        task = make_task()
        task.add_assignee("u2", actor_id="owner", actor_role=UserRole.STAFF)
        assert task.assignments == frozenset({"owner", "u2"})

    def test_non_assignee_staff_cannot_add(self):
        task = make_task()
        with pytest.raises(UnauthorizedError):
            task.add_assignee("u2", actor_id="outsider", actor_role=UserRole.STAFF)
        assert task.assignments == frozenset({"owner"})

    def test_manager_adds_without_being_assigned(self):
        task = make_task()
        task.add_assignee("u2", actor_id="boss", actor_role=UserRole.MANAGER)
        assert "u2" in task.assignments

    def test_manager_role_as_string(self):
        task = make_task()
        task.add_assignee("u2", actor_id="boss", actor_role="MANAGER")
        assert "u2" in task.assignments

    def test_readding_is_noop(self):
        task = make_task(assignments=["owner", "u2"])
        task.pull_events()

        task.add_assignee("u2", actor_id="owner")

        assert len(task.assignments) == 2
        assert not any(isinstance(e, TaskAssigneeAdded) for e in task.pull_events())

    def test_add_beyond_limit(self):
        task = make_task(assignments=["owner", "b", "c", "d", "e"])
        with pytest.raises(MaxAssigneesReachedError):
            task.add_assignee("f", actor_id="owner")
        assert len(task.assignments) == 5

    def test_staff_cannot_remove_even_self(self):
        task = make_task(assignments=["owner", "u2"])
        with pytest.raises(UnauthorizedError):
            task.remove_assignee("u2", actor_id="u2", actor_role=UserRole.STAFF)
        with pytest.raises(UnauthorizedError):
            task.remove_assignee("u2", actor_id="u2")
        assert len(task.assignments) == 2

    def test_manager_cannot_remove_last_assignee(self):
        task = make_task()
        with pytest.raises(BusinessRuleViolation, match="at least 1 assignee"):
            task.remove_assignee("owner", actor_id="boss", actor_role=UserRole.MANAGER)

    def test_manager_removes_assignee(self):
        task = make_task(assignments=["owner", "u2"])
        task.remove_assignee("u2", actor_id="boss", actor_role=UserRole.MANAGER)
        assert task.assignments == frozenset({"owner"})

    def test_remove_unassigned_user(self):
        task = make_task(assignments=["owner", "u2"])
        with pytest.raises(BusinessRuleViolation, match="not assigned"):
            task.remove_assignee("ghost", actor_id="boss", actor_role=UserRole.MANAGER)

    def test_removing_owner_keeps_ownership(self):
        task = make_task(assignments=["owner", "u2"])
        task.remove_assignee("owner", actor_id="boss", actor_role=UserRole.MANAGER)

        assert task.owner_id == "owner"
        assert task.assignments == frozenset({"u2"})


class TestTaskComments:
    """Test cases for comments."""

    def test_add_comment(self):
        task = make_task()
        comment = task.add_comment("Looks good", "owner")

        assert comment.content == "Looks good"
        assert comment.author_id == "owner"
        assert len(task.comments) == 1

    def test_returned_comments_are_copies(self):
        task = make_task()
        task.add_comment("Original", "owner")

        task.comments[0].content = "Tampered"

        assert task.comments[0].content == "Original"

    def test_author_updates_comment(self):
        earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
        task = Task(
            id="t1",
            title="Task",
            description="",
            priority=3,
            due_date=DUE,
            status=TaskStatus.TO_DO,
            owner_id="owner",
            department_id="eng",
            created_at=earlier,
            updated_at=earlier,
            assignments=["owner"],
            comments=[TaskComment("c1", "First", "owner", earlier, earlier)],
        )

        task.update_comment("c1", "Edited", "owner")

        (comment,) = task.comments
        assert comment.content == "Edited"
        assert comment.created_at == earlier
        assert comment.updated_at > earlier

    def test_non_author_cannot_update_comment(self):
        task = make_task(assignments=["owner", "u2"])
        comment = task.add_comment("Mine", "owner")

        with pytest.raises(UnauthorizedError):
            task.update_comment(comment.id, "Hijacked", "u2")
        assert task.comments[0].content == "Mine"

    def test_update_unknown_comment(self):
        task = make_task()
        with pytest.raises(EntityNotFoundError, match="Comment not found"):
            task.update_comment("missing", "text", "owner")


class TestTaskFiles:
    """Test cases for file attachments."""

    def test_exactly_limit_then_one_byte_more(self):
        task = make_task()

        task.add_file(make_file(MAX_TOTAL_FILE_SIZE), "owner")
        assert task.total_file_size == 50 * MIB

        with pytest.raises(FileSizeLimitExceededError):
            task.add_file(make_file(1, name="extra.pdf"), "owner")
        assert len(task.files) == 1

    def test_negative_size_cannot_offset_the_limit(self):
        task = make_task()
        task.add_file(make_file(MAX_TOTAL_FILE_SIZE), "owner")
        negative = TaskFile(
            id="f-neg",
            file_name="neg.pdf",
            file_size=-10 * MIB,
            file_type="application/pdf",
            storage_path="tasks/neg.pdf",
            uploaded_by_id="owner",
        )

        with pytest.raises(ValidationError, match="File size cannot be negative"):
            task.add_file(negative, "owner")
        with pytest.raises(ValidationError):
            task.add_file(make_file(-1, name="neg2.pdf"), "owner")
        assert task.total_file_size == 50 * MIB
        assert len(task.files) == 1

    def test_disallowed_file_type(self):
        task = make_task()
        with pytest.raises(InvalidFileTypeError):
            task.add_file(make_file(10, file_type="application/x-msdownload", name="a.exe"), "owner")

    @pytest.mark.parametrize("file_type", [
        "image/png",
        "image/jpeg",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ])
    def test_allowed_file_types(self, file_type):
        task = make_task()
        task.add_file(make_file(10, file_type=file_type), "owner")
        assert len(task.files) == 1

    def test_non_assignee_cannot_add_or_remove(self):
        task = make_task()
        file = make_file(10)
        task.add_file(file, "owner")

        with pytest.raises(UnauthorizedError):
            task.add_file(make_file(10, name="b.pdf"), "outsider")
        with pytest.raises(UnauthorizedError):
            task.remove_file(file.id, "outsider")

    def test_remove_file(self):
        task = make_task()
        file = make_file(10)
        task.add_file(file, "owner")

        task.remove_file(file.id, "owner")

        assert task.files == ()

    def test_remove_unknown_file_is_noop(self):
        task = make_task()
        task.add_file(make_file(10), "owner")
        task.remove_file("missing", "owner")
        assert len(task.files) == 1

    def test_custom_file_limit(self):
        task = make_task(limits=TaskLimits(max_total_file_size=100))
        with pytest.raises(FileSizeLimitExceededError):
            task.add_file(make_file(101), "owner")


class TestTaskRecurrenceAndLifecycle:
    """Test cases for recurrence, archiving, completion and overdue checks."""

    @pytest.mark.parametrize("interval", [0, -1, None])
    def test_enable_recurrence_invalid(self, interval):
        task = make_task()
        with pytest.raises(InvalidRecurrenceError):
            task.update_recurring(True, interval)
        assert task.recurring_interval is None

    def test_enable_recurrence(self):
        task = make_task()
        task.update_recurring(True, 1)
        assert task.recurring_interval == 1

    def test_disable_recurrence_forces_null(self):
        task = make_task(recurring_interval=3)
        task.update_recurring(False, 999)
        assert task.recurring_interval is None
        assert task.is_recurring is False

    def test_archive_and_unarchive(self):
        task = make_task()
        task.archive()
        assert task.is_archived is True
        task.unarchive()
        assert task.is_archived is False

    def test_complete_by_assignee(self):
        task = make_task()
        task.complete("owner")

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at is not None

    def test_complete_by_outsider(self):
        task = make_task()
        with pytest.raises(UnauthorizedError):
            task.complete("outsider")
        assert task.status == TaskStatus.TO_DO

    def test_overdue_blocked_task(self):
        task = make_task(due_date=datetime(2020, 1, 1, tzinfo=timezone.utc))
        task.update_status(TaskStatus.BLOCKED)
        assert task.is_overdue() is True

    def test_overdue_completed_task(self):
        task = make_task(due_date=datetime(2020, 1, 1, tzinfo=timezone.utc))
        task.update_status(TaskStatus.COMPLETED)
        assert task.is_overdue() is False

    def test_overdue_with_explicit_now(self):
        task = make_task(due_date=DUE)
        assert task.is_overdue(DUE - timedelta(days=1)) is False
        assert task.is_overdue(DUE + timedelta(seconds=1)) is True

    def test_naive_due_date_compares_as_utc(self):
        task = make_task(due_date=datetime(2020, 1, 1))
        assert task.is_overdue() is True


class TestTaskInvariants:
    """Invariants hold across a sequence of accepted and rejected operations."""

    def test_invariants_after_mixed_operations(self):
        task = make_task(assignments=["owner", "u2"])
        operations = [
            lambda: task.add_assignee("u3", "owner"),
            lambda: task.add_assignee("u4", "owner"),
            lambda: task.add_assignee("u5", "owner"),
            lambda: task.add_assignee("u6", "owner"),
            lambda: task.remove_assignee("owner", "boss", UserRole.MANAGER),
            lambda: task.remove_assignee("u2", "boss", UserRole.STAFF),
            lambda: task.add_file(make_file(40 * MIB, name="a.pdf"), "u2"),
            lambda: task.add_file(make_file(20 * MIB, name="b.pdf"), "u2"),
            lambda: task.update_priority(42),
            lambda: task.update_priority(9),
        ]

        for operation in operations:
            try:
                operation()
            except (ValidationError, BusinessRuleViolation, UnauthorizedError):
                pass

            assert 1 <= len(task.assignments) <= 5
            assert task.total_file_size <= MAX_TOTAL_FILE_SIZE
            assert 1 <= task.priority.level <= 10

        assert task.priority.level == 9
        assert task.total_file_size == 40 * MIB
        assert task.owner_id == "owner"
