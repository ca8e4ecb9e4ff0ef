"""
Event handler wiring.
"""

from .activity_handlers import EventLoggingHandler, TaskActivityHandler
from .event_setup import setup_event_handlers, initialize_event_system

__all__ = [
    "EventLoggingHandler",
    "TaskActivityHandler",
    "setup_event_handlers",
    "initialize_event_system",
]
