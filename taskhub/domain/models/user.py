"""
User context model.
Caller identity handed to the core by the authentication collaborator.
"""

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    """Organisation roles."""
    STAFF = "STAFF"
    MANAGER = "MANAGER"
    HR_ADMIN = "HR_ADMIN"


@dataclass(frozen=True)
class UserContext:
    """
    Identity of the user performing an operation.

    ``is_hr_admin`` marks an account that holds HR/Admin rights on top of its
    primary role, so a department manager can also be HR/Admin. Both facts
    are checked independently.
    """

    user_id: str
    role: UserRole
    department_id: str
    is_hr_admin: bool = False

    def __post_init__(self):
        if not isinstance(self.role, UserRole):
            object.__setattr__(self, "role", UserRole(self.role))

    @property
    def is_manager(self) -> bool:
        return self.role is UserRole.MANAGER

    @property
    def has_hr_admin_rights(self) -> bool:
        return self.role is UserRole.HR_ADMIN or self.is_hr_admin

    @property
    def is_staff(self) -> bool:
        return self.role is UserRole.STAFF and not self.is_hr_admin
