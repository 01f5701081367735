"""Global event system for decoupling status notifications from the engine.

This event bus is designed for feedback and cross-system notifications only.
It uses a global instance so the autoplay driver and movement executor don't
need a reference to whatever UI or log is listening.

USE FOR:
- Messages for a message log ("No enemies found.")
- Cross-system notifications (agent defeated, exit reached, autoplay stopped)
- Status display of the current decision state

DO NOT USE FOR:
- Core mechanics (path search, cost evaluation, vitals bookkeeping)
- Operations that need immediate return values or synchronous confirmation
- Error handling or exception propagation

The event bus is fire-and-forget: publish an event without expecting return values
or confirmations. All handlers execute immediately (synchronously). If you need a
return value or confirmation, use direct method calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathpilot.game.decision import DecisionState
    from pathpilot.game.entities import Agent, Hostile
    from pathpilot.types import WorldTilePos

logger = logging.getLogger(__name__)


@dataclass
class GameEvent:
    """Base class for all game events."""

    pass


@dataclass
class MessageEvent(GameEvent):
    """Event for adding messages to the message log."""

    text: str


@dataclass
class DecisionEvent(GameEvent):
    """Event published whenever the decision policy picks a new goal."""

    state: DecisionState
    target_pos: WorldTilePos | None
    path_length: int


@dataclass
class AutoplayStoppedEvent(GameEvent):
    """Event for when the autoplay driver stops, for any reason."""

    reason: str


@dataclass
class AgentDefeatedEvent(GameEvent):
    """Event for when the agent runs out of health or energy."""

    agent: Agent


@dataclass
class HostileDefeatedEvent(GameEvent):
    """Event for when an encounter defeats a hostile."""

    hostile: Hostile


@dataclass
class ExitReachedEvent(GameEvent):
    """Event for when the agent steps onto an exit cell."""

    x: int
    y: int


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GameEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            for handler in self._handlers[event_type]:
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")


# Global event bus instance
_global_event_bus = EventBus()


# Public API functions


def subscribe_to_event(event_type: type, handler: Callable) -> None:
    """Subscribe to an event type globally."""
    _global_event_bus.subscribe(event_type, handler)


def unsubscribe_from_event(event_type: type, handler: Callable) -> None:
    """Unsubscribe from an event type globally."""
    _global_event_bus.unsubscribe(event_type, handler)


def publish_event(event: GameEvent) -> None:
    """Publish an event globally."""
    _global_event_bus.publish(event)


def reset_event_bus_for_testing() -> None:
    """Reset the global event bus. Use only in tests."""
    global _global_event_bus
    _global_event_bus = EventBus()
