"""
Shared fixtures: a small department tree and callers in each role.

    root
    ├── eng
    │   └── eng-dev
    └── sales
"""

import pytest

from taskhub.domain.events.base import EventDispatcher
from taskhub.domain.models.department import Department
from taskhub.domain.models.user import UserContext, UserRole
from taskhub.infrastructure.events.event_setup import setup_event_handlers
from taskhub.infrastructure.repositories.in_memory import (
    InMemoryDepartmentRepository,
    InMemoryTaskRepository,
)


@pytest.fixture
def departments():
    return [
        Department(id="root", name="Root"),
        Department(id="eng", name="Engineering", parent_id="root"),
        Department(id="eng-dev", name="Engineering/Dev", parent_id="eng"),
        Department(id="sales", name="Sales", parent_id="root"),
    ]


@pytest.fixture
def task_repository():
    return InMemoryTaskRepository(project_ids=["proj-1", "proj-2"])


@pytest.fixture
def department_repository(departments):
    return InMemoryDepartmentRepository(departments)


@pytest.fixture
def event_dispatcher(task_repository):
    return setup_event_handlers(task_repository, EventDispatcher())


@pytest.fixture
def eng_manager():
    return UserContext(user_id="mgr-eng", role=UserRole.MANAGER, department_id="eng")


@pytest.fixture
def sales_manager():
    return UserContext(user_id="mgr-sales", role=UserRole.MANAGER, department_id="sales")


@pytest.fixture
def hr_admin():
    return UserContext(user_id="hr-1", role=UserRole.HR_ADMIN, department_id="root")


@pytest.fixture
def hr_manager():
    """HR/Admin who also manages Engineering."""
    return UserContext(user_id="hr-mgr", role=UserRole.MANAGER, department_id="eng", is_hr_admin=True)


@pytest.fixture
def dev_staff():
    return UserContext(user_id="staff-dev", role=UserRole.STAFF, department_id="eng-dev")


@pytest.fixture
def other_staff():
    return UserContext(user_id="staff-other", role=UserRole.STAFF, department_id="eng-dev")
