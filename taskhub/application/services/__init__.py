"""
Application services.
"""

from .task_service import TaskService
from .dashboard_service import DashboardService, DashboardView, VisibleTask

__all__ = ["TaskService", "DashboardService", "DashboardView", "VisibleTask"]
