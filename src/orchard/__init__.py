# src/orchard/__init__.py
"""Orchard - Monte-Carlo win rates for the cooperative orchard dice game.

The friendly surface below is loaded lazily so that light helpers such as
:mod:`orchard.utils.stats` can be imported without pulling in pandas.
"""

from __future__ import annotations

import tomllib
from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _v
from pathlib import Path

# Path to the project's pyproject.toml for local version fallback
PYPROJECT_TOML = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

__all__ = [  # loads lazily, that's why reportUnsupportedDunderAll is triggered
    "OrchardGame",  # pyright: ignore[reportUnsupportedDunderAll]
    "OrchardState",  # pyright: ignore[reportUnsupportedDunderAll]
    "GameResult",  # pyright: ignore[reportUnsupportedDunderAll]
    "play_orchard",  # pyright: ignore[reportUnsupportedDunderAll]
    "GreedyStrategy",  # pyright: ignore[reportUnsupportedDunderAll]
    "CherryLover",  # pyright: ignore[reportUnsupportedDunderAll]
    "FruitOrder",  # pyright: ignore[reportUnsupportedDunderAll]
    "simulate_many_games",  # pyright: ignore[reportUnsupportedDunderAll]
    "run_scenarios",  # pyright: ignore[reportUnsupportedDunderAll]
]

_LAZY_IMPORTS = {
    "OrchardGame": "orchard.game.engine",
    "OrchardState": "orchard.game.engine",
    "GameResult": "orchard.game.engine",
    "play_orchard": "orchard.game.engine",
    "GreedyStrategy": "orchard.simulation.strategies",
    "CherryLover": "orchard.simulation.strategies",
    "FruitOrder": "orchard.simulation.strategies",
    "simulate_many_games": "orchard.simulation.simulation",
    "run_scenarios": "orchard.simulation.runner",
}


def __getattr__(name: str):  # pragma: no cover - simple dynamic loader
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(module_name)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


def _read_version_from_toml() -> str:
    """Return the package version declared in ``pyproject.toml``."""
    with PYPROJECT_TOML.open("rb") as fh:
        data = tomllib.load(fh)
    return data["project"]["version"]


try:
    __version__ = _v("orchard-montecarlo")
except PackageNotFoundError:
    __version__ = _read_version_from_toml()
