"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from typing import Optional

from taskhub.domain.events.base import EventDispatcher, get_event_dispatcher
from taskhub.domain.repositories.task_repository import TaskRepository
from .activity_handlers import EventLoggingHandler, TaskActivityHandler

logger = logging.getLogger(__name__)


def setup_event_handlers(
    task_repository: TaskRepository,
    dispatcher: Optional[EventDispatcher] = None,
) -> EventDispatcher:
    """Set up and register all event handlers."""

    dispatcher = dispatcher or get_event_dispatcher()

    # Global handlers see every event they can handle
    dispatcher.register_global_handler(EventLoggingHandler())
    dispatcher.register_global_handler(TaskActivityHandler(task_repository))

    logger.info("Event handlers registered successfully")

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")

    return dispatcher


def initialize_event_system(
    task_repository: TaskRepository,
    dispatcher: Optional[EventDispatcher] = None,
) -> EventDispatcher:
    """Initialize the complete event system."""
    try:
        dispatcher = setup_event_handlers(task_repository, dispatcher)
        logger.info("Event system initialized successfully")
        return dispatcher
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
