"""
Entities that live on a level: the agent, hostiles, recovery items and exits.

Everything the engine needs from an entity is captured by the ``Locatable``
protocol: an integer position and an ``is_active`` predicate. The search and
decision code only ever compare positions and check activity, so any object
with those attributes can stand in for a real entity (tests use this).

Hostile variants are a tag (``HostileKind``) plus the data each variant
needs, not a class hierarchy. Code that reacts to an encounter dispatches on
the tag with ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from pathpilot import config


class Locatable(Protocol):
    """A protocol for objects with a grid position and an activity flag."""

    x: int
    y: int

    @property
    def is_active(self) -> bool: ...


class HostileKind(Enum):
    """What happens when the agent walks into a hostile."""

    PLAIN = auto()  # Deals damage, then is defeated.
    POISON = auto()  # Like PLAIN, but leaves a poison cloud behind.
    TELEPORT = auto()  # First hit relocates it unharmed, second hit defeats it.


@dataclass
class Agent:
    """The autonomous protagonist."""

    x: int
    y: int
    health: float = config.MAX_HEALTH
    energy: float = config.MAX_ENERGY

    @property
    def is_active(self) -> bool:
        return self.health > 0 and self.energy > 0

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def heal(self, amount: float) -> None:
        """Restore health, capped at MAX_HEALTH."""
        self.health = min(config.MAX_HEALTH, self.health + amount)


@dataclass
class Hostile:
    """A threat on the level. ``strength`` doubles as its damage."""

    x: int
    y: int
    strength: float
    kind: HostileKind = HostileKind.PLAIN
    defeated: bool = False
    poison_level: float = 0.0
    times_hit: int = 0

    def __post_init__(self) -> None:
        if self.kind is HostileKind.POISON and self.poison_level <= 0:
            self.poison_level = config.DEFAULT_POISON_LEVEL

    @property
    def is_active(self) -> bool:
        return not self.defeated

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass
class RecoveryItem:
    """A health pack. ``amount`` is the health it restores."""

    x: int
    y: int
    amount: float
    consumed: bool = False

    @property
    def is_active(self) -> bool:
        return not self.consumed

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass
class ExitPoint:
    """An exit cell. Exits never deactivate."""

    x: int
    y: int

    @property
    def is_active(self) -> bool:
        return True

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass
class PoisonCloud:
    """Lingering poison left by a defeated POISON hostile."""

    x: int
    y: int
    level: float

    @property
    def is_active(self) -> bool:
        return self.level > 0

    @property
    def radius(self) -> int:
        return int(self.level / config.POISON_RADIUS_DIVISOR)

    def covers(self, x: int, y: int) -> bool:
        """True if (x, y) is within the cloud's Chebyshev radius."""
        return max(abs(self.x - x), abs(self.y - y)) <= self.radius
