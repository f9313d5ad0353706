from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Sequence

import numpy as np

from orchard.game.dice import FRUIT_FACES, DieFace, Fruit, roll_die

if TYPE_CHECKING:  # pragma: no cover - typing only
    from orchard.simulation.strategies import Player

"""engine.py
============
Orchard state and single-game engine.

High-level flow
---------------
* OrchardGame.play rolls the die once per turn, handing the turn to the
  players in seating order, until the trees are empty (win) or the raven
  puzzle is complete (loss).
* resolve_turn applies one die face to the OrchardState; basket faces are
  delegated to the active player's strategy.

The module keeps no global state; randomness comes from the
numpy Generator handed to each game by the simulation layer.
"""


__all__ = [
    "FRUITS_PER_KIND",
    "RAVEN_PIECES",
    "TURN_LIMIT",
    "OrchardState",
    "GameResult",
    "resolve_turn",
    "OrchardGame",
    "play_orchard",
]

# Fixed rules of the game
FRUITS_PER_KIND: int = 10
RAVEN_PIECES: int = 9

# No real game comes close; exceeding it means the state stopped changing
TURN_LIMIT: int = 10_000


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------


def _full_trees() -> Dict[Fruit, int]:
    return {fruit: FRUITS_PER_KIND for fruit in Fruit}


@dataclass(slots=True)
class OrchardState:
    """Fruit left on each tree plus the number of raven pieces laid."""

    fruits: Dict[Fruit, int] = field(default_factory=_full_trees)
    raven: int = 0

    def count(self, fruit: Fruit) -> int:
        return self.fruits[fruit]

    def take_one(self, fruit: Fruit) -> bool:
        """Pick one piece of *fruit*.

        Returns
        -------
        bool
            ``True`` if a piece was taken, ``False`` if the tree was already
            bare (the state is left untouched).
        """
        if self.fruits[fruit] > 0:
            self.fruits[fruit] -= 1
            return True
        return False

    def add_raven_piece(self) -> None:
        self.raven += 1

    @property
    def fruit_left(self) -> int:
        return sum(self.fruits.values())

    @property
    def won(self) -> bool:
        return all(n == 0 for n in self.fruits.values())

    @property
    def lost(self) -> bool:
        return self.raven == RAVEN_PIECES

    def outcome(self) -> tuple[bool, bool]:
        """Return ``(won, lost)`` for the current board."""
        return self.won, self.lost


@dataclass(slots=True)
class GameResult:
    """Summary of one finished game.

    Attributes
    ----------
    won
        ``True`` if the players emptied the trees before the raven arrived.
    n_turns
        Die rolls made before the game ended.
    raven
        Raven pieces on the board at the end.
    fruit_left
        Pieces still on the trees at the end (``0`` for a win).
    basket_pieces
        Pieces picked through basket rolls.
    """

    won: bool
    n_turns: int
    raven: int
    fruit_left: int
    basket_pieces: int = 0


# ---------------------------------------------------------------------------
# Turns
# ---------------------------------------------------------------------------


def resolve_turn(
    face: DieFace,
    state: OrchardState,
    player: Player,
    rng: np.random.Generator,
) -> int:
    """Apply one die roll to *state*.

    Inputs
    ------
    face
        The rolled face.
    state
        Board to mutate in place.
    player
        The active player; consulted only for basket rolls.
    rng
        Generator handed to the player's strategy for tie-breaking.

    Returns
    -------
    int
        Fruit pieces removed by this roll (0 to 2).

    Raises
    ------
    RuntimeError
        If *face* is not one of the six faces of the die.
    """
    if face in FRUIT_FACES:
        return int(state.take_one(FRUIT_FACES[face]))
    if face == DieFace.RAVEN:
        state.add_raven_piece()
        return 0
    if face == DieFace.BASKET:
        return player.take_basket(state, rng)
    raise RuntimeError(f"Unknown die face {face!r} - the die is corrupt.")


# ---------------------------------------------------------------------------
# Game driver
# ---------------------------------------------------------------------------


class OrchardGame:
    """Driver for a *single* Orchard game."""

    def __init__(
        self,
        players: Sequence[Player],
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Create a new game instance.

        Inputs
        ------
        players
            Participants in turn order. The same strategy object may appear
            more than once.
        rng
            Generator for the die and for the players' tie-breaks. ``None``
            draws fresh OS entropy.
        """
        if not players:
            raise ValueError("OrchardGame needs at least one player")
        self.players: List[Player] = list(players)
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self.state = OrchardState()

    def play(self) -> GameResult:
        """Roll until the game is decided and return its summary.

        An empty orchard is checked before the raven, so a roll that could
        satisfy both counts as a win.

        Raises
        ------
        RuntimeError
            If the game runs past ``TURN_LIMIT`` rolls.
        """
        state = self.state
        basket_pieces = 0
        n_players = len(self.players)
        turn = 0
        while turn < TURN_LIMIT:
            player = self.players[turn % n_players]
            face = roll_die(self.rng)
            picked = resolve_turn(face, state, player, self.rng)
            if face == DieFace.BASKET:
                basket_pieces += picked
            turn += 1

            won, lost = state.outcome()
            if won or lost:
                return GameResult(
                    won=won,
                    n_turns=turn,
                    raven=state.raven,
                    fruit_left=state.fruit_left,
                    basket_pieces=basket_pieces,
                )
        raise RuntimeError(f"Game exceeded {TURN_LIMIT} turns - aborting.")


def play_orchard(players: Sequence[Player], rng: np.random.Generator | None = None) -> bool:
    """Play one game with *players* and return ``True`` on a win."""
    return OrchardGame(players, rng=rng).play().won
