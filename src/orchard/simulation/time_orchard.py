# src/orchard/simulation/time_orchard.py
"""
Timing for a single game and for a batch of N games with one seating order.
Used to size ``sim.n_games`` before launching a full run.
"""

import logging
import time
from typing import Sequence

from orchard.simulation.simulation import simulate_many_games, simulate_one_game
from orchard.simulation.strategies import describe_players, parse_players

LOGGER = logging.getLogger(__name__)


def measure_sim_times(
    *, n_games: int = 1000, players: Sequence[str] = ("greedy",), seed: int = 42
) -> float:
    """Benchmark single-game and batch simulation speed.

    Inputs:
        n_games: Number of games to run in the batch benchmark.
        players: Strategy tokens giving the seating order.
        seed: Seed used for both benchmarks.

    Returns:
        Games per second achieved by the batch.
    """

    seating = parse_players(players)
    label = describe_players(seating)

    t0 = time.perf_counter()
    result = simulate_one_game(players=seating, seed=seed)
    t1 = time.perf_counter()
    LOGGER.info(
        "Single game benchmark",
        extra={
            "stage": "simulation",
            "benchmark": "single_game",
            "players": label,
            "seed": seed,
            "elapsed_s": t1 - t0,
            "won": result.won,
            "turns": result.n_turns,
        },
    )

    t0 = time.perf_counter()
    batch = simulate_many_games(players=seating, n_games=n_games, seed=seed)
    elapsed = time.perf_counter() - t0
    gps = (n_games / elapsed) if elapsed > 0 else 0.0
    LOGGER.info(
        "Batch benchmark: %d games in %.2fs (%.0f games/s)",
        n_games,
        elapsed,
        gps,
        extra={
            "stage": "simulation",
            "benchmark": "batch",
            "players": label,
            "seed": seed,
            "n_games": n_games,
            "win_rate": batch.win_rate,
        },
    )
    return gps


__all__ = ["measure_sim_times"]
