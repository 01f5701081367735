from __future__ import annotations

import pytest

from pathpilot.events import (
    AgentDefeatedEvent,
    ExitReachedEvent,
    HostileDefeatedEvent,
    MessageEvent,
)
from pathpilot.game.entities import Hostile, HostileKind, PoisonCloud
from pathpilot.game.movement import WorldMoveExecutor
from pathpilot.util import rng
from tests.helpers import EventRecorder, make_world


def test_step_drains_energy_by_traversal_cost() -> None:
    world = make_world(["@09"])
    executor = WorldMoveExecutor(world)

    assert executor.move(1, 0).succeeded
    assert world.agent.energy == pytest.approx(100.0 - 0.1)

    executor.move(1, 0)
    assert world.agent.energy == pytest.approx(100.0 - 0.1 - 0.01)
    assert world.agent.position == (2, 0)


def test_wall_refuses_the_step() -> None:
    world = make_world(["@#"])
    result = WorldMoveExecutor(world).move(1, 0)

    assert not result.succeeded
    assert result.block_reason == "wall"
    assert world.agent.position == (0, 0)
    assert world.agent.energy == 100.0


def test_edge_of_grid_refuses_the_step() -> None:
    world = make_world(["@."])
    result = WorldMoveExecutor(world).move(-1, 0)

    assert not result.succeeded
    assert result.block_reason == "out_of_bounds"
    assert world.agent.position == (0, 0)


def test_running_out_of_energy_defeats_the_agent() -> None:
    world = make_world(["@.."], energy=0.03)
    recorder = EventRecorder(AgentDefeatedEvent)

    result = WorldMoveExecutor(world).move(1, 0)

    assert not result.succeeded
    assert result.block_reason == "exhausted"
    assert world.agent.energy == 0
    assert world.agent.position == (0, 0)
    assert not world.agent.is_active
    assert len(recorder.events) == 1


def test_recovery_pickup_is_capped() -> None:
    world = make_world(["@H"], health=90)
    recorder = EventRecorder(MessageEvent)

    result = WorldMoveExecutor(world).move(1, 0)

    assert result.picked_up is world.recovery_items[0]
    assert world.agent.health == 100.0
    assert world.recovery_items[0].consumed
    assert [e.text for e in recorder.of_type(MessageEvent)] == [
        "Recovered 20 health."
    ]


def test_consumed_item_is_not_picked_up_twice() -> None:
    world = make_world(["@H."], health=50)
    executor = WorldMoveExecutor(world)

    executor.move(1, 0)
    executor.move(1, 0)
    result = executor.move(-1, 0)

    assert result.picked_up is None
    assert world.agent.health == pytest.approx(70.0)


def test_plain_encounter_trades_damage_for_a_win() -> None:
    world = make_world(["@E"], strength=30)
    recorder = EventRecorder(HostileDefeatedEvent)

    result = WorldMoveExecutor(world).move(1, 0)

    hostile = world.hostiles[0]
    assert result.encountered is hostile
    assert hostile.defeated
    assert world.agent.health == pytest.approx(70.0)
    assert recorder.of_type(HostileDefeatedEvent)[0].hostile is hostile


def test_lethal_encounter_defeats_the_agent() -> None:
    world = make_world(["@E"], strength=100)
    recorder = EventRecorder(AgentDefeatedEvent, HostileDefeatedEvent)

    WorldMoveExecutor(world).move(1, 0)

    assert world.agent.health == 0
    assert not world.hostiles[0].defeated
    assert len(recorder.of_type(AgentDefeatedEvent)) == 1
    assert recorder.of_type(HostileDefeatedEvent) == []


def test_poison_hostile_leaves_a_decaying_cloud() -> None:
    world = make_world(["@P"], strength=10)
    executor = WorldMoveExecutor(world)

    executor.move(1, 0)
    assert world.hostiles[0].defeated
    assert world.agent.health == pytest.approx(100.0 - 10.0 - 5.0)
    assert [c.level for c in world.poison_clouds] == [20.0]

    executor.move(-1, 0)
    assert world.agent.health == pytest.approx(80.0)
    assert [c.level for c in world.poison_clouds] == [10.0]

    executor.move(1, 0)
    assert world.agent.health == pytest.approx(75.0)
    assert world.poison_clouds == []


def test_poison_cloud_only_hurts_within_radius() -> None:
    world = make_world(["@......"])
    world.poison_clouds.append(PoisonCloud(6, 0, 20.0))

    WorldMoveExecutor(world).move(1, 0)

    assert world.agent.health == 100.0
    assert world.poison_clouds[0].level == 10.0


def test_poison_hostile_uses_default_level() -> None:
    assert Hostile(0, 0, 5.0, kind=HostileKind.POISON).poison_level == 30.0
    custom = Hostile(0, 0, 5.0, kind=HostileKind.POISON, poison_level=50.0)
    assert custom.poison_level == 50.0
    assert Hostile(0, 0, 5.0).poison_level == 0.0


def test_teleport_hostile_vanishes_on_first_hit() -> None:
    world = make_world(
        [
            "@X..",
            "....",
        ]
    )
    recorder = EventRecorder(MessageEvent)

    result = WorldMoveExecutor(world).move(1, 0)

    hostile = world.hostiles[0]
    assert result.encountered is hostile
    assert not hostile.defeated
    assert hostile.times_hit == 1
    assert hostile.position != (1, 0)
    assert world.grid.is_passable(*hostile.position)
    assert world.agent.health == 100.0
    assert [e.text for e in recorder.of_type(MessageEvent)] == ["The enemy vanishes!"]


def test_teleport_hostile_falls_on_second_hit() -> None:
    world = make_world(["@."], strength=10)
    world.hostiles.append(Hostile(1, 0, 10.0, kind=HostileKind.TELEPORT, times_hit=1))

    WorldMoveExecutor(world).move(1, 0)

    assert world.hostiles[0].defeated
    assert world.agent.health == pytest.approx(90.0)


def test_teleport_destination_is_seeded() -> None:
    rows = [
        "@X....",
        "......",
        "......",
    ]

    rng.init(99)
    first = make_world(rows)
    WorldMoveExecutor(first).move(1, 0)

    rng.init(99)
    second = make_world(rows)
    WorldMoveExecutor(second).move(1, 0)

    assert first.hostiles[0].position == second.hostiles[0].position


def test_stepping_on_exit_is_reported() -> None:
    world = make_world(["@O"])
    recorder = EventRecorder(ExitReachedEvent)

    result = WorldMoveExecutor(world).move(1, 0)

    assert result.reached_exit
    assert [(e.x, e.y) for e in recorder.of_type(ExitReachedEvent)] == [(1, 0)]
