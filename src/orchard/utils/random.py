# src/orchard/utils/random.py
"""Random number generator helpers."""

from __future__ import annotations

import numpy as np

# Max unsigned 32-bit integer for random seed generation.
MAX_UINT32 = 2**32 - 1


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a :class:`numpy.random.Generator` seeded with *seed*."""

    return np.random.default_rng(seed)


def spawn_seeds(n: int, *, seed: int | None = None) -> np.ndarray:
    """Return ``n`` 32-bit seeds derived from ``seed``.

    Every scenario task receives one of these seeds and builds its own
    generator from it, so parallel tasks never share a random stream.
    """

    rng = make_rng(seed)
    return rng.integers(0, MAX_UINT32, size=n, dtype=np.uint32)


__all__ = ["MAX_UINT32", "make_rng", "spawn_seeds"]
