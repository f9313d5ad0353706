# src/orchard/utils/yaml_helpers.py
"""
YAML parsing helpers. Exposes ``expand_dotted_keys`` so config overlays may
write ``sim.n_games: 1000`` instead of a nested ``sim:`` block.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _merge_into(target: dict[str, Any], key: str, value: Any) -> None:
    """Set ``target[key]`` to ``value``, merging when both sides are dicts."""
    existing = target.get(key)
    if isinstance(existing, dict) and isinstance(value, dict):
        existing.update(value)
    else:
        target[key] = value


def expand_dotted_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a nested dict from *mapping* that may contain dotted keys.

    Raises
    ------
    TypeError
        If a dotted key descends through a key already bound to a scalar.
    """

    result: dict[str, Any] = {}
    for raw_key, raw_value in mapping.items():
        value = expand_dotted_keys(raw_value) if isinstance(raw_value, Mapping) else raw_value
        if not (isinstance(raw_key, str) and "." in raw_key):
            _merge_into(result, raw_key, value)
            continue

        parts = [part for part in raw_key.split(".") if part]
        if not parts:
            continue
        target = result
        for part in parts[:-1]:
            child = target.setdefault(part, {})
            if not isinstance(child, dict):
                raise TypeError(
                    f"Cannot expand dotted key {raw_key!r}; {part!r} is already set to a non-mapping value",
                )
            target = child
        _merge_into(target, parts[-1], value)
    return result


__all__ = ["expand_dotted_keys"]
