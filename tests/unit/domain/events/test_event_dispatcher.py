"""
Unit tests for the event dispatcher and task events.
"""

import pytest

from taskhub.domain.events.base import EventDispatcher, EventHandler
from taskhub.domain.events.task_events import (
    TaskArchived,
    TaskFieldUpdated,
    TaskTagAdded,
)
from taskhub.domain.models.value_objects import PriorityBucket


class RecordingHandler(EventHandler):
    def __init__(self, accepts=lambda event: True):
        self.accepts = accepts
        self.handled = []

    def can_handle(self, event):
        return self.accepts(event)

    async def handle(self, event):
        self.handled.append(event)


class FailingHandler(EventHandler):
    def can_handle(self, event):
        return True

    async def handle(self, event):
        raise RuntimeError("boom")


class TestEventDispatcher:
    """Test cases for EventDispatcher."""

    def setup_method(self):
        self.dispatcher = EventDispatcher()

    @pytest.mark.asyncio
    async def test_dispatch_to_type_handler(self):
        handler = RecordingHandler()
        self.dispatcher.register_handler("TaskArchived", handler)

        await self.dispatcher.dispatch(TaskArchived("t1", "u1"))
        await self.dispatcher.dispatch(TaskTagAdded("t1", "x", "u1"))

        assert [e.event_type for e in handler.handled] == ["TaskArchived"]

    @pytest.mark.asyncio
    async def test_global_handler_filters_with_can_handle(self):
        handler = RecordingHandler(lambda event: isinstance(event, TaskTagAdded))
        self.dispatcher.register_global_handler(handler)

        await self.dispatcher.dispatch_all([TaskArchived("t1"), TaskTagAdded("t1", "x")])

        assert len(handler.handled) == 1

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self):
        recorder = RecordingHandler()
        self.dispatcher.register_global_handler(FailingHandler())
        self.dispatcher.register_global_handler(recorder)

        await self.dispatcher.dispatch(TaskArchived("t1"))

        assert len(recorder.handled) == 1

    def test_registered_handlers(self):
        self.dispatcher.register_handler("TaskArchived", RecordingHandler())
        self.dispatcher.register_global_handler(RecordingHandler())

        assert self.dispatcher.get_registered_handlers() == {
            "TaskArchived": ["RecordingHandler"],
            "global": ["RecordingHandler"],
        }


class TestTaskEvents:
    """Test cases for task event serialization."""

    def test_field_update_serializes_values(self):
        event = TaskFieldUpdated("t1", "priority", PriorityBucket(3), PriorityBucket(8), "u1")

        data = event.to_dict()

        assert data["event_type"] == "TaskFieldUpdated"
        assert data["data"]["changes"] == {"from": 3, "to": 8}
        assert data["data"]["actor_id"] == "u1"
        assert event.subject == "priority"

    def test_archive_event_action(self):
        event = TaskArchived("t1", "u1")
        assert event.action == "ARCHIVED"
        assert event.changes() == {"from": False, "to": True}
