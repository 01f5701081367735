from __future__ import annotations

from collections.abc import Iterator

import pytest

from pathpilot.events import reset_event_bus_for_testing
from pathpilot.util import rng


@pytest.fixture(autouse=True)
def clean_event_bus() -> Iterator[None]:
    """Give every test a fresh global event bus."""
    reset_event_bus_for_testing()
    yield
    reset_event_bus_for_testing()


@pytest.fixture(autouse=True)
def seeded_rng() -> None:
    """Seed all RNG streams so teleport destinations are reproducible."""
    rng.init(12345)
