# src/orchard/__main__.py
"""Command line entry point for the :mod:`orchard` package.

When executed as ``python -m orchard`` this module simply delegates to
:func:`orchard.cli.main.main`.
"""

from __future__ import annotations

from orchard.cli.main import main as cli_main


def main() -> None:
    """Invoke :func:`orchard.cli.main.main`."""

    cli_main()


if __name__ == "__main__":  # pragma: no cover - direct execution path
    main()
