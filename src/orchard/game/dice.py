# src/orchard/game/dice.py
"""The Orchard die and the fruit kinds it names."""

from __future__ import annotations

from enum import Enum, IntEnum

import numpy as np

__all__ = ["Fruit", "DieFace", "FRUIT_FACES", "N_FACES", "roll_die"]


class Fruit(Enum):
    """The four kinds of fruit hanging in the orchard."""

    PLUM = "plum"
    PEAR = "pear"
    CHERRY = "cherry"
    APPLE = "apple"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


class DieFace(IntEnum):
    """One side of the six-sided die."""

    PLUM = 0
    PEAR = 1
    CHERRY = 2
    APPLE = 3
    BASKET = 4
    RAVEN = 5

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name.lower()


N_FACES: int = len(DieFace)

FRUIT_FACES: dict[DieFace, Fruit] = {
    DieFace.PLUM: Fruit.PLUM,
    DieFace.PEAR: Fruit.PEAR,
    DieFace.CHERRY: Fruit.CHERRY,
    DieFace.APPLE: Fruit.APPLE,
}


def roll_die(rng: np.random.Generator) -> DieFace:
    """Roll the die once using *rng*; every face has probability 1/6."""
    return DieFace(int(rng.integers(0, N_FACES)))
