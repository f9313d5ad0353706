"""Configuration schemas and helpers for Orchard simulation runs.

Defines dataclasses describing I/O and simulation settings and includes
utilities for loading YAML overlays and applying ``section.option=value``
overrides from the command line.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

from orchard.utils.yaml_helpers import expand_dotted_keys

# ─────────────────────────────────────────────────────────────────────────────
# Dataclasses (schema)
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_SCENARIOS: list[list[str]] = [
    ["greedy"],
    ["conservative"],
    ["greedy", "greedy"],
    ["greedy", "conservative"],
    ["greedy", "cherry"],
    ["cherry", "cherry"],
    ["cherry"],
    ["cherry", "conservative"],
    ["cherry", "cherry", "greedy"],
]


@dataclass
class IOConfig:
    """File-system locations for the application."""

    results_dir: Path = Path("results")
    summary_name: str = "win_rates.csv"
    write_summary: bool = False


@dataclass
class SimConfig:
    """Simulation parameters."""

    n_games: int = 500_000
    seed: int = 0
    n_jobs: int | None = None  # None: one worker per scenario, capped at the CPU count
    alpha: float = 0.05
    scenarios: list[list[str]] = field(default_factory=lambda: [list(s) for s in DEFAULT_SCENARIOS])


@dataclass
class AppConfig:
    """Top-level configuration container."""

    io: IOConfig = field(default_factory=IOConfig)
    sim: SimConfig = field(default_factory=SimConfig)

    @property
    def summary_path(self) -> Path:
        return self.io.results_dir / self.io.summary_name


# ─────────────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────────────


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``overlay`` (overlay wins)."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _annotation_contains(annotation: Any, target: type) -> bool:
    """Return ``True`` if *annotation* is *target* or a union including it."""
    if annotation is None:
        return False
    if annotation is target:
        return True
    return any(_annotation_contains(arg, target) for arg in get_args(annotation))


def _build(cls: type, section: Mapping[str, Any]) -> Any:
    """Instantiate dataclass ``cls`` from a mapping of attributes."""
    if not isinstance(section, Mapping):
        raise TypeError(f"Section for {cls.__name__} must be a mapping")
    obj = cls()
    type_hints = get_type_hints(cls)
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = set(section) - names
    if unknown:
        raise AttributeError(f"Unknown option(s) for {cls.__name__}: {sorted(unknown)}")
    for name, val in section.items():
        annotation = type_hints.get(name)
        if _annotation_contains(annotation, Path) and isinstance(val, str):
            val = Path(val)
        setattr(obj, name, val)
    return obj


def load_app_config(*overlays: Path) -> AppConfig:
    """Deterministically merge one or more YAML overlays into an :class:`AppConfig`.

    Files are read in the order provided, dotted keys are expanded, and later
    overlays always win.
    """
    data: dict[str, Any] = {}
    for path in overlays:
        with path.open("r", encoding="utf-8") as fh:
            overlay = yaml.safe_load(fh) or {}
        if not isinstance(overlay, Mapping):
            raise TypeError(f"Config file {path} must contain a mapping")
        data = _deep_merge(data, expand_dotted_keys(overlay))

    unknown = set(data) - {"io", "sim"}
    if unknown:
        raise AttributeError(f"Unknown config section(s): {sorted(unknown)}")

    return AppConfig(
        io=_build(IOConfig, data.get("io", {})),
        sim=_build(SimConfig, data.get("sim", {})),
    )


def _coerce(value: str, current: Any, annotation: Any | None = None) -> Any:
    """Coerce ``value`` to the type of ``current``."""
    if isinstance(current, bool) or _annotation_contains(annotation, bool):
        val_lower = value.lower()
        if val_lower in {"1", "true", "yes", "on"}:
            return True
        if val_lower in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"Cannot parse boolean value from {value!r}")
    if _annotation_contains(annotation, type(None)) and value.lower() in {"none", "null", ""}:
        return None
    if isinstance(current, int) or _annotation_contains(annotation, int):
        return int(value)
    if isinstance(current, float) or _annotation_contains(annotation, float):
        return float(value)
    if isinstance(current, Path) or _annotation_contains(annotation, Path):
        return Path(value)
    if isinstance(current, list) or get_origin(annotation) is list:
        parsed = yaml.safe_load(value)
        if not isinstance(parsed, list):
            raise ValueError(f"Expected a YAML list, got {value!r}")
        return parsed
    return value


def apply_dot_overrides(cfg: AppConfig, pairs: list[str]) -> AppConfig:
    """Apply ``section.option=value`` overrides to *cfg*."""
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid override {pair!r}")
        key, raw = pair.split("=", 1)
        if "." not in key:
            raise ValueError(f"Invalid override {pair!r}")
        section_name, option = key.split(".", 1)
        section = getattr(cfg, section_name)
        if not hasattr(section, option):
            raise AttributeError(f"Unknown option {option!r} in section {section_name!r}")
        current = getattr(section, option)
        annotation = get_type_hints(type(section)).get(option)
        setattr(section, option, _coerce(raw, current, annotation))
    return cfg


__all__ = [
    "DEFAULT_SCENARIOS",
    "IOConfig",
    "SimConfig",
    "AppConfig",
    "load_app_config",
    "apply_dot_overrides",
]
