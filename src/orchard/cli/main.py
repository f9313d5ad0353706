# src/orchard/cli/main.py
"""
Command line interface for the :mod:`orchard` package.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from orchard.config import AppConfig, apply_dot_overrides, load_app_config
from orchard.simulation import runner
from orchard.simulation.time_orchard import measure_sim_times
from orchard.utils.logging import setup_info_logging

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser."""
    parser = argparse.ArgumentParser(prog="orchard")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override configuration values",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Root logging level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # run
    run_parser = sub.add_parser("run", help="Estimate win rates for every scenario")
    run_parser.add_argument("--n-games", dest="n_games", type=int, help="Games per scenario")
    run_parser.add_argument("--seed", type=int, help="Master seed")
    run_parser.add_argument("--jobs", type=int, help="Worker processes (1 = serial)")
    run_parser.add_argument(
        "--output",
        type=Path,
        help="Write the summary table to this CSV file",
    )

    # time (benchmark simulation throughput)
    time_parser = sub.add_parser("time", help="Benchmark simulation throughput")
    time_parser.add_argument(
        "--n-games",
        dest="n_games",
        type=int,
        default=1000,
        help="Number of games to run (default: 1000)",
    )
    time_parser.add_argument(
        "--players",
        nargs="+",
        default=["greedy"],
        help="Seating order as strategy tokens (default: greedy)",
    )
    time_parser.add_argument("--seed", type=int, default=42, help="Seed (default: 42)")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _parse_level(level: str | int) -> int:
    """Normalize a logging level string or integer to ``logging`` constants."""
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def _apply_run_flags(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Let explicit ``run`` flags win over config files and ``--set``."""
    if args.n_games is not None:
        cfg.sim.n_games = args.n_games
    if args.seed is not None:
        cfg.sim.seed = args.seed
    if args.jobs is not None:
        cfg.sim.n_jobs = args.jobs
    if args.output is not None:
        cfg.io.results_dir = args.output.parent
        cfg.io.summary_name = args.output.name
        cfg.io.write_summary = True
    return cfg


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the ``orchard`` CLI dispatcher."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_info_logging()
    root_logger = logging.getLogger()
    root_logger.setLevel(_parse_level(args.log_level))

    LOGGER.info(
        "CLI arguments parsed",
        extra={
            "stage": "cli",
            "command": args.command,
            "config_path": str(args.config) if args.config is not None else None,
            "overrides": list(args.overrides or []),
            "log_level": logging.getLevelName(root_logger.level),
        },
    )

    if args.command == "run":
        cfg = load_app_config(args.config) if args.config is not None else AppConfig()
        cfg = apply_dot_overrides(cfg, list(args.overrides or []))
        cfg = _apply_run_flags(cfg, args)
        LOGGER.info(
            "Dispatching run command",
            extra={
                "stage": "cli",
                "command": "run",
                "seed": cfg.sim.seed,
                "n_games": cfg.sim.n_games,
                "n_scenarios": len(cfg.sim.scenarios),
                "summary": str(cfg.summary_path) if cfg.io.write_summary else None,
            },
        )
        runner.run_from_config(cfg)
        LOGGER.info("Run command completed", extra={"stage": "cli", "command": "run"})
    elif args.command == "time":
        LOGGER.info(
            "Dispatching measure_sim_times",
            extra={
                "stage": "cli",
                "command": "time",
                "players": list(args.players),
                "n_games": args.n_games,
                "seed": args.seed,
            },
        )
        measure_sim_times(n_games=args.n_games, players=args.players, seed=args.seed)
    else:  # pragma: no cover - argparse enforces valid choices
        parser.error(f"Unknown command {args.command}")


if __name__ == "__main__":  # pragma: no cover
    main()
