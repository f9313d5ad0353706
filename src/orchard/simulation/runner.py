"""High level Monte Carlo runner using configuration objects.

Every scenario (an ordered list of players) becomes one task. Tasks run in
parallel through :func:`orchard.utils.parallel.process_map`, each playing its
whole batch sequentially with a generator of its own, so no random stream is
shared between tasks. The per-task counts are merged into a single table once
every task has finished.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

import pandas as pd

from orchard.config import AppConfig
from orchard.simulation.simulation import ScenarioResult, simulate_many_games
from orchard.simulation.strategies import parse_players
from orchard.utils.parallel import process_map
from orchard.utils.random import spawn_seeds
from orchard.utils.stats import expected_sigma_pct

LOGGER = logging.getLogger(__name__)

__all__ = [
    "SUMMARY_COLUMNS",
    "run_scenarios",
    "format_report",
    "run_from_config",
]

SUMMARY_COLUMNS: list[str] = [
    "scenario_idx",
    "label",
    "n_games",
    "n_wins",
    "win_rate",
    "stderr",
    "ci_lower",
    "ci_upper",
    "mean_turns",
    "seed",
]


def _run_scenario_task(args: tuple[int, list[str], int, int, float]) -> tuple[int, dict[str, object]]:
    """Worker entry point: play one scenario's batch and return its row."""
    idx, tokens, n_games, seed, alpha = args
    players = parse_players(tokens)
    result: ScenarioResult = simulate_many_games(players=players, n_games=n_games, seed=seed)
    return idx, result.as_row(alpha)


def _resolve_jobs(n_jobs: int | None, n_tasks: int) -> int:
    if n_jobs is None:
        n_jobs = os.cpu_count() or 1
    return max(1, min(n_jobs, n_tasks))


def run_scenarios(
    scenarios: Sequence[Sequence[str]],
    *,
    n_games: int,
    seed: int | None = None,
    n_jobs: int | None = None,
    alpha: float = 0.05,
) -> pd.DataFrame:
    """Play every scenario ``n_games`` times and tabulate the win rates.

    Parameters
    ----------
    scenarios
        Seating orders given as strategy tokens (see
        :func:`orchard.simulation.strategies.parse_player`).
    n_games
        Games per scenario.
    seed
        Master seed; each scenario gets its own seed derived from it.
    n_jobs
        Worker processes. ``None`` uses one per scenario up to the CPU count;
        ``1`` runs everything in this process.
    alpha
        Significance level of the reported Wilson interval.

    Returns
    -------
    pandas.DataFrame
        One row per scenario in input order, columns ``SUMMARY_COLUMNS``.
    """
    if n_games <= 0:
        raise ValueError("n_games must be positive")
    if not scenarios:
        raise ValueError("at least one scenario is required")
    # fail fast in the parent rather than inside a worker
    for tokens in scenarios:
        parse_players(tokens)

    seeds = spawn_seeds(len(scenarios), seed=seed)
    tasks = [
        (idx, list(tokens), n_games, int(s), alpha)
        for idx, (tokens, s) in enumerate(zip(scenarios, seeds, strict=True))
    ]
    jobs = _resolve_jobs(n_jobs, len(tasks))
    LOGGER.info(
        "Running %d scenarios x %d games on %d worker(s)",
        len(tasks),
        n_games,
        jobs,
        extra={"stage": "runner", "seed": seed, "n_jobs": jobs},
    )

    rows: list[dict[str, object]] = []
    for idx, row in process_map(_run_scenario_task, tasks, n_jobs=jobs):
        row["scenario_idx"] = idx
        rows.append(row)
        LOGGER.info(
            "Scenario %s done: %.2f%% wins",
            row["label"],
            100.0 * float(row["win_rate"]),  # type: ignore[arg-type]
            extra={"stage": "runner", "scenario_idx": idx},
        )

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    return df.sort_values("scenario_idx").reset_index(drop=True)


def format_report(df: pd.DataFrame, n_games: int) -> list[str]:
    """Render the run header followed by one line per scenario."""
    lines = [f"Games per scenario: {n_games}, sigma = {expected_sigma_pct(n_games):.2f}%"]
    for row in df.itertuples(index=False):
        lines.append(f"Win probability {100.0 * row.win_rate:.2f}% with {row.label}")
    return lines


def run_from_config(cfg: AppConfig) -> pd.DataFrame:
    """Run the configured scenarios, print the report and optionally save it."""
    df = run_scenarios(
        cfg.sim.scenarios,
        n_games=cfg.sim.n_games,
        seed=cfg.sim.seed,
        n_jobs=cfg.sim.n_jobs,
        alpha=cfg.sim.alpha,
    )
    for line in format_report(df, cfg.sim.n_games):
        print(line)

    if cfg.io.write_summary:
        out = cfg.summary_path
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        LOGGER.info("Summary written to %s", out, extra={"stage": "runner", "path": str(out)})
    return df
