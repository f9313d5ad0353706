# src/orchard/utils/__init__.py
"""Utility subpackage for Orchard.

Small helpers shared by the simulation layer: logging set-up, seeding,
process-pool mapping and proportion statistics.  Keeping them here leaves the
game engine free of side effects like multiprocessing.
"""

from __future__ import annotations

from .logging import configure_logging, setup_info_logging, setup_warning_logging
from .random import MAX_UINT32, make_rng, spawn_seeds
from .stats import binomial_stderr, expected_sigma_pct, wilson_ci

__all__ = [
    "configure_logging",
    "setup_info_logging",
    "setup_warning_logging",
    "MAX_UINT32",
    "make_rng",
    "spawn_seeds",
    "binomial_stderr",
    "expected_sigma_pct",
    "wilson_ci",
]
