"""
Domain services.
"""

from .department_hierarchy import DepartmentHierarchyResolver
from .authorization_service import (
    AuthorizationService,
    DashboardFilters,
    DashboardMetrics,
    ScopeKind,
    VisibilityScope,
)

__all__ = [
    "DepartmentHierarchyResolver",
    "AuthorizationService",
    "DashboardFilters",
    "DashboardMetrics",
    "ScopeKind",
    "VisibilityScope",
]
