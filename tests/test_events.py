"""Tests for the event bus."""

import logging

import pytest

from pathpilot.events import (
    AgentDefeatedEvent,
    AutoplayStoppedEvent,
    DecisionEvent,
    EventBus,
    GameEvent,
    HostileDefeatedEvent,
    MessageEvent,
    publish_event,
    subscribe_to_event,
    unsubscribe_from_event,
)


class TestEventBus:
    def test_failing_handler_does_not_stop_the_others(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A raising handler is logged and the remaining handlers still run."""
        bus = EventBus()
        calls: list[str] = []

        def failing_handler(event: GameEvent) -> None:
            calls.append("failing")
            raise ValueError("Handler failed!")

        def succeeding_handler(event: GameEvent) -> None:
            calls.append("succeeding")

        bus.subscribe(MessageEvent, failing_handler)
        bus.subscribe(MessageEvent, succeeding_handler)

        with caplog.at_level(logging.ERROR):
            bus.publish(MessageEvent(text="Test message"))

        assert calls == ["failing", "succeeding"]
        assert "Error handling event MessageEvent" in caplog.text
        assert "Handler failed!" in caplog.text

    def test_handlers_only_see_their_event_type(self) -> None:
        bus = EventBus()
        seen: list[GameEvent] = []
        bus.subscribe(AutoplayStoppedEvent, seen.append)

        bus.publish(MessageEvent(text="ignored"))
        bus.publish(AutoplayStoppedEvent(reason="path complete"))

        assert seen == [AutoplayStoppedEvent(reason="path complete")]

    def test_unsubscribe_unknown_handler_is_a_no_op(self) -> None:
        bus = EventBus()
        bus.unsubscribe(MessageEvent, print)
        bus.subscribe(MessageEvent, print)
        bus.unsubscribe(MessageEvent, len)


class TestGlobalEventBus:
    def test_subscribe_and_publish(self) -> None:
        received: list[MessageEvent] = []

        subscribe_to_event(MessageEvent, received.append)
        publish_event(MessageEvent(text="Hello"))

        assert [e.text for e in received] == ["Hello"]

    def test_unsubscribe(self) -> None:
        received: list[MessageEvent] = []

        subscribe_to_event(MessageEvent, received.append)
        unsubscribe_from_event(MessageEvent, received.append)
        publish_event(MessageEvent(text="Hello"))

        assert received == []


def test_event_fields_name_engine_types() -> None:
    assert DecisionEvent.__annotations__ == {
        "state": "DecisionState",
        "target_pos": "WorldTilePos | None",
        "path_length": "int",
    }
    assert AgentDefeatedEvent.__annotations__ == {"agent": "Agent"}
    assert HostileDefeatedEvent.__annotations__ == {"hostile": "Hostile"}
