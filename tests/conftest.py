# pragma: no cover
import itertools
import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))
TEST_PATH = PROJECT_ROOT / "tests"
if TEST_PATH.exists():
    sys.path.insert(0, str(TEST_PATH))


class ScriptedDie(np.random.Generator):
    """Generator whose ``integers`` cycles through a fixed list of faces.

    Shuffles still use the real PCG64 stream, so strategies keep working.
    """

    def __init__(self, faces, seed: int = 0):
        super().__init__(np.random.PCG64(seed))
        self._cycle = itertools.cycle(int(f) for f in faces)

    def integers(self, low, high=None, size=None, dtype=np.int64, endpoint=False):  # noqa: ARG002
        if size is None:
            return next(self._cycle)
        n = int(np.prod(size))
        return np.fromiter((next(self._cycle) for _ in range(n)), dtype=dtype, count=n).reshape(size)


@pytest.fixture
def scripted_die():
    """Factory fixture: ``scripted_die([faces...])`` -> deterministic generator."""
    return ScriptedDie


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
