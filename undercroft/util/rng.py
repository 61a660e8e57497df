"""Deterministic random number generation with isolated streams.

Level generation draws every random number (room sizes, positions, tunnel
elbows, entity counts, spawn types) from one stream, so the same seed always
rebuilds the same level. Streams are keyed by domain and derived from a master
seed, which keeps unrelated consumers (for example a debug overlay that rolls
colors) from shifting the generator's sequence.

Usage:
    # At startup
    from undercroft.util import rng
    rng.init(config.RANDOM_SEED)

    # In any module - cache the stream reference
    _rng = rng.get("map.dungeon")

    def roll_room_width() -> int:
        return _rng.randrange(6, 14)

    # After rng.reset(), cached references automatically use the new stream

Domain naming convention (hierarchical):
    - "map.dungeon"
    - "world.visibility"
    - "tools.benchmark"

Callers that need an isolated generator (tests, the CLI, the benchmark) can
skip the provider entirely with ``rng.seeded(seed)``; anything typed as
:data:`RNG` accepts both.
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from undercroft.types import RandomSeed


def _derive_seed(master_seed: RandomSeed, domain: str) -> int:
    # crc32 instead of hash(): hash() is randomized per interpreter via
    # PYTHONHASHSEED, which would break cross-session determinism.
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    Callers can cache a reference that survives :func:`reset`. Each call looks
    the underlying ``Random`` up fresh from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    @property
    def domain(self) -> str:
        return self._domain

    def _rng(self) -> Random:
        return self._provider._get_raw(self._domain)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng().randint(a, b)

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        """Return randomly selected element from range(start, stop, step)."""
        return self._rng().randrange(start, stop, step)


# Functions that accept either a plain Random or a provider stream use this in
# their signatures: `def place(rng: RNG) -> None:`
type RNG = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams keyed by domain name.

    Each domain gets its own ``Random`` derived deterministically from the
    master seed.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get a cacheable stream proxy for the named domain."""
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: system entropy, non-deterministic
                self._streams[domain] = Random()
            else:
                self._streams[domain] = Random(
                    _derive_seed(self._master_seed, domain)
                )
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and pick up the new streams.
        """
        self._master_seed = master_seed
        self._streams.clear()


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize the global provider with a master seed.

    If a provider already exists it is reset instead, so cached stream proxies
    keep working.
    """
    global _provider
    if _provider is not None:
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Get a stream for the named domain.

    Auto-initializes a non-deterministic provider when :func:`init` has not
    been called yet.
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reset all streams with a new master seed."""
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)


def randrange_or_start(rng: RNG, start: int, stop: int) -> int:
    """Draw from ``[start, stop)``, or return *start* when the range is empty.

    An empty range consumes no randomness.
    """
    if stop <= start:
        return start
    return rng.randrange(start, stop)


def seeded(seed: RandomSeed, domain: str = "map.dungeon") -> Random:
    """Return a standalone ``Random`` for *domain* derived from *seed*.

    Produces the same sequence as ``get(domain)`` after ``init(seed)``, without
    touching the global provider. ``None`` gives an entropy-seeded generator.
    """
    if seed is None:
        return Random()
    return Random(_derive_seed(seed, domain))
