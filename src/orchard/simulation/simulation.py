# src/orchard/simulation/simulation.py
"""Batch helpers for running many Orchard games with one seating order.

Key entry points include:

* ``simulate_one_game`` for a single seeded game.
* ``simulate_many_games`` for a batch of games that shares one generator and
  returns a :class:`ScenarioResult`.
* ``games_frame`` for per-game rows when a caller wants the raw results.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Iterator, Sequence

import numpy as np
import pandas as pd

from orchard.game.engine import GameResult, OrchardGame
from orchard.simulation.strategies import Player, describe_players
from orchard.utils.random import make_rng
from orchard.utils.stats import binomial_stderr, wilson_ci

__all__: list[str] = [
    "ScenarioResult",
    "simulate_one_game",
    "iter_games",
    "games_frame",
    "simulate_many_games",
]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScenarioResult:
    """Aggregate of a batch of games for one seating order.

    Attributes
    ----------
    label
        Seating order as printed in reports.
    n_games
        Games played.
    n_wins
        Games won.
    total_turns
        Die rolls over all games, used for the mean game length.
    seed
        Seed of the batch generator (``None`` for OS entropy).
    """

    label: str
    n_games: int
    n_wins: int
    total_turns: int = 0
    seed: int | None = None

    @property
    def win_rate(self) -> float:
        return self.n_wins / self.n_games

    @property
    def stderr(self) -> float:
        return binomial_stderr(self.n_wins, self.n_games)

    @property
    def mean_turns(self) -> float:
        return self.total_turns / self.n_games

    def as_row(self, alpha: float = 0.05) -> dict[str, object]:
        """Flatten into a table row including the Wilson interval."""
        lower, upper = wilson_ci(self.n_wins, self.n_games, alpha)
        row: dict[str, object] = asdict(self)
        row.update(
            win_rate=self.win_rate,
            stderr=self.stderr,
            ci_lower=lower,
            ci_upper=upper,
            mean_turns=self.mean_turns,
        )
        return row


def simulate_one_game(
    *,
    players: Sequence[Player],
    seed: int | None = None,
) -> GameResult:
    """Play a single game and return its :class:`GameResult`."""
    return OrchardGame(players, rng=make_rng(seed)).play()


def iter_games(
    players: Sequence[Player],
    n_games: int,
    rng: np.random.Generator,
) -> Iterator[GameResult]:
    """Yield ``n_games`` results, each game with a fresh board and shared *rng*."""
    for _ in range(n_games):
        yield OrchardGame(players, rng=rng).play()


def games_frame(
    *,
    players: Sequence[Player],
    n_games: int,
    seed: int | None = None,
) -> pd.DataFrame:
    """Return one row per game as a ``DataFrame``."""
    if n_games <= 0:
        raise ValueError("n_games must be positive")
    rows = [asdict(r) for r in iter_games(players, n_games, make_rng(seed))]
    return pd.DataFrame(rows)


def simulate_many_games(
    *,
    players: Sequence[Player],
    n_games: int,
    seed: int | None = None,
) -> ScenarioResult:
    """Play ``n_games`` games sequentially and count the wins.

    Parameters
    ----------
    players
        Seating order, reused for every game.
    n_games
        Number of games to play. Must be positive.
    seed
        Seed for the batch generator; ``None`` draws OS entropy.

    Returns
    -------
    ScenarioResult
        Win count and game-length total for the batch.
    """
    if n_games <= 0:
        raise ValueError("n_games must be positive")
    if not players:
        raise ValueError("players must not be empty")

    label = describe_players(players)
    rng = make_rng(seed)
    n_wins = 0
    total_turns = 0
    for result in iter_games(players, n_games, rng):
        n_wins += result.won
        total_turns += result.n_turns

    LOGGER.debug(
        "Scenario finished",
        extra={
            "stage": "simulation",
            "scenario": label,
            "n_games": n_games,
            "n_wins": n_wins,
            "seed": seed,
        },
    )
    return ScenarioResult(
        label=label,
        n_games=n_games,
        n_wins=n_wins,
        total_turns=total_turns,
        seed=seed,
    )
