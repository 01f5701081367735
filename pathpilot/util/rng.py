"""Seeded random streams, one per domain.

Randomness in the engine is confined to world effects (today only the
teleporting hostile's landing cell). Each effect draws from a named domain
whose seed is derived from the master seed, so a level replays identically
and drawing in one domain never shifts another.

    from pathpilot.util import rng

    rng.init(config.RANDOM_SEED)      # once, at startup
    _rng = rng.get("world.teleport")  # module level, survives rng.reset()
    cell = _rng.choice(free_cells)
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeVar

from pathpilot import config

T = TypeVar("T")

if TYPE_CHECKING:
    from pathpilot.types import RandomSeed


class RNGStream:
    """Handle on a domain's generator, looked up again on every draw."""

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        return self._provider.generator(self._domain).choice(seq)


class RNGProvider:
    """Owns the master seed and the per-domain generators derived from it."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._generators: dict[str, Random] = {}
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        stream = self._streams.get(domain)
        if stream is None:
            stream = self._streams[domain] = RNGStream(self, domain)
        return stream

    def generator(self, domain: str) -> Random:
        generator = self._generators.get(domain)
        if generator is None:
            if self._master_seed is None:
                generator = Random()
            else:
                # crc32 is stable across processes; hash() is salted.
                key = f"{self._master_seed}:{domain}".encode()
                generator = Random(zlib.crc32(key))
            self._generators[domain] = generator
        return generator

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reseed every domain. Streams handed out earlier stay valid."""
        self._master_seed = master_seed
        self._generators.clear()


_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Seed the global provider, reusing it if one exists."""
    global _provider
    if _provider is None:
        _provider = RNGProvider(master_seed)
    else:
        _provider.reset(master_seed)


def get(domain: str) -> RNGStream:
    """Stream for ``domain``; seeds from config.RANDOM_SEED if init() never ran."""
    global _provider
    if _provider is None:
        _provider = RNGProvider(config.RANDOM_SEED)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
