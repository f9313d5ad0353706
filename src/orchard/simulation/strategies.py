# src/orchard/simulation/strategies.py
"""Basket strategies for the Orchard engine.

A basket roll lets the active player pick any two pieces of fruit. The
strategies here differ only in how they rank the trees: the greedy family
sorts by how much fruit is left, the cherry lover always goes for cherries
first. Helpers at the bottom turn configuration tokens into strategies.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence, TypeVar

import numpy as np

from orchard.game.dice import Fruit
from orchard.game.engine import OrchardState

__all__: list[str] = [
    "BASKET_SIZE",
    "FruitOrder",
    "Player",
    "GreedyStrategy",
    "CherryLover",
    "pick_from_basket",
    "parse_player",
    "parse_players",
    "describe_players",
]

BASKET_SIZE: int = 2

_T = TypeVar("_T")


def pick_from_basket(candidates: Iterable[_T], take: Callable[[_T], bool]) -> int:
    """Walk *candidates* in order until ``BASKET_SIZE`` takes succeed.

    Failed takes (bare tree) do not count towards the limit.

    Returns
    -------
    int
        Pieces actually picked, between 0 and ``BASKET_SIZE``.
    """
    picked = 0
    for candidate in candidates:
        if picked == BASKET_SIZE:
            break
        if take(candidate):
            picked += 1
    return picked


class Player(ABC):
    """Decision rule applied when the die shows the basket."""

    @abstractmethod
    def take_basket(self, state: OrchardState, rng: np.random.Generator) -> int:
        """Pick up to two pieces from *state* and return how many were taken."""


# ---------------------------------------------------------------------------
# Greedy family
# ---------------------------------------------------------------------------


class FruitOrder(Enum):
    """Which trees a greedy player empties first."""

    MOST_FIRST = "most_first"
    FEWEST_FIRST = "fewest_first"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class GreedyStrategy(Player):
    """Rank trees by the fruit left on them.

    Each tree enters the candidate list twice, once with its current count and
    once with that count minus one, so a well stocked tree can be picked twice
    while still competing fairly with the runner-up. Counts are read once when
    the list is built. Candidates are shuffled before the stable sort, which
    breaks ties uniformly at random.
    """

    order: FruitOrder = FruitOrder.MOST_FIRST

    def candidates(self, state: OrchardState, rng: np.random.Generator) -> list[tuple[Fruit, int]]:
        """Return the ranked ``(fruit, snapshot_count)`` list for *state*."""
        ranked = [(fruit, state.count(fruit) - delta) for delta in (0, 1) for fruit in Fruit]
        rng.shuffle(ranked)
        ranked.sort(key=lambda c: c[1], reverse=self.order is FruitOrder.MOST_FIRST)
        return ranked

    def take_basket(self, state: OrchardState, rng: np.random.Generator) -> int:
        return pick_from_basket(self.candidates(state, rng), lambda c: state.take_one(c[0]))

    def __str__(self) -> str:
        return f"Greedy({self.order})"


# ---------------------------------------------------------------------------
# Cherry lover
# ---------------------------------------------------------------------------


_NOT_CHERRY: tuple[Fruit, ...] = (Fruit.PLUM, Fruit.APPLE, Fruit.PEAR)


@dataclass(frozen=True)
class CherryLover(Player):
    """Take cherries while there are any, then two random other pieces."""

    def candidates(self, rng: np.random.Generator) -> list[Fruit]:
        others = list(_NOT_CHERRY) * 2
        rng.shuffle(others)
        return [Fruit.CHERRY, Fruit.CHERRY, *others]

    def take_basket(self, state: OrchardState, rng: np.random.Generator) -> int:
        return pick_from_basket(self.candidates(rng), state.take_one)

    def __str__(self) -> str:
        return "CherryLover"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


_PLAYER_TOKENS: dict[str, Callable[[], Player]] = {
    "greedy": lambda: GreedyStrategy(FruitOrder.MOST_FIRST),
    "most_first": lambda: GreedyStrategy(FruitOrder.MOST_FIRST),
    "conservative": lambda: GreedyStrategy(FruitOrder.FEWEST_FIRST),
    "fewest_first": lambda: GreedyStrategy(FruitOrder.FEWEST_FIRST),
    "cherry": CherryLover,
    "cherry_lover": CherryLover,
}


def parse_player(token: str) -> Player:
    """Return the strategy named by *token*.

    Tokens are case-insensitive and accept ``-`` in place of ``_``.

    Raises
    ------
    ValueError
        If *token* names no known strategy.
    """
    key = token.strip().lower().replace("-", "_")
    try:
        factory = _PLAYER_TOKENS[key]
    except KeyError:
        known = ", ".join(sorted(_PLAYER_TOKENS))
        raise ValueError(f"Unknown player {token!r}; expected one of: {known}") from None
    return factory()


def parse_players(tokens: Sequence[str]) -> list[Player]:
    """Parse a seating order of tokens; an empty list is rejected."""
    if not tokens:
        raise ValueError("A scenario needs at least one player")
    return [parse_player(t) for t in tokens]


def describe_players(players: Sequence[Player]) -> str:
    """Label a seating order, e.g. ``[Greedy(most_first), CherryLover]``."""
    return "[" + ", ".join(str(p) for p in players) + "]"
