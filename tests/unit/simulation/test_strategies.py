import pickle
from collections import Counter

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from orchard.game.dice import Fruit
from orchard.game.engine import OrchardState
from orchard.simulation.strategies import (
    BASKET_SIZE,
    CherryLover,
    FruitOrder,
    GreedyStrategy,
    describe_players,
    parse_player,
    parse_players,
    pick_from_basket,
)

ALL_STRATEGIES = [
    GreedyStrategy(FruitOrder.MOST_FIRST),
    GreedyStrategy(FruitOrder.FEWEST_FIRST),
    CherryLover(),
]


def make_state(plum=0, pear=0, cherry=0, apple=0, raven=0):
    return OrchardState(
        fruits={Fruit.PLUM: plum, Fruit.PEAR: pear, Fruit.CHERRY: cherry, Fruit.APPLE: apple},
        raven=raven,
    )


# ---------------------------------------------------------------------------
# pick_from_basket
# ---------------------------------------------------------------------------


def test_pick_stops_after_two_successes():
    attempts = []

    def take(x):
        attempts.append(x)
        return True

    assert pick_from_basket(range(10), take) == 2
    assert attempts == [0, 1]


def test_pick_skips_failed_takes():
    attempts = []

    def take(x):
        attempts.append(x)
        return x % 2 == 1

    assert pick_from_basket(range(10), take) == 2
    assert attempts == [0, 1, 2, 3]


def test_pick_may_run_out_of_candidates():
    assert pick_from_basket([1, 2, 3], lambda _: False) == 0
    assert pick_from_basket([], lambda _: True) == 0


# ---------------------------------------------------------------------------
# Greedy family
# ---------------------------------------------------------------------------


def test_greedy_candidates_are_counts_and_counts_minus_one(rng):
    state = make_state(plum=5, pear=3, cherry=0, apple=7)
    cands = GreedyStrategy().candidates(state, rng)
    assert sorted(cands, key=lambda c: (c[0].value, c[1])) == sorted(
        [(f, state.count(f) - d) for f in Fruit for d in (0, 1)],
        key=lambda c: (c[0].value, c[1]),
    )
    assert [c[1] for c in cands] == [7, 6, 5, 4, 3, 2, 0, -1]


def test_fewest_first_sorts_ascending(rng):
    state = make_state(plum=5, pear=3, cherry=0, apple=7)
    cands = GreedyStrategy(FruitOrder.FEWEST_FIRST).candidates(state, rng)
    assert [c[1] for c in cands] == [-1, 0, 2, 3, 4, 5, 6, 7]


def test_most_first_picks_fullest_tree_twice(rng):
    state = make_state(plum=5, pear=3, cherry=0, apple=7)
    assert GreedyStrategy().take_basket(state, rng) == 2
    assert state.fruits == make_state(plum=5, pear=3, cherry=0, apple=5).fruits


def test_most_first_splits_between_equal_trees(rng):
    state = make_state(plum=4, pear=4, cherry=1, apple=0)
    GreedyStrategy().take_basket(state, rng)
    assert state.fruits == make_state(plum=3, pear=3, cherry=1, apple=0).fruits


def test_fewest_first_picks_smallest_nonempty_tree(rng):
    state = make_state(plum=5, pear=3, cherry=0, apple=0)
    assert GreedyStrategy(FruitOrder.FEWEST_FIRST).take_basket(state, rng) == 2
    assert state.fruits == make_state(plum=5, pear=1).fruits


def test_fewest_first_finishes_single_pieces(rng):
    state = make_state(plum=1, pear=1)
    assert GreedyStrategy(FruitOrder.FEWEST_FIRST).take_basket(state, rng) == 2
    assert state.fruit_left == 0


def test_greedy_ties_are_broken_randomly():
    rng = np.random.default_rng(99)
    first_pick = Counter()
    for _ in range(400):
        state = make_state(plum=3, pear=3, cherry=3, apple=3)
        cands = GreedyStrategy().candidates(state, rng)
        first_pick[cands[0][0]] += 1
    assert set(first_pick) == set(Fruit)
    assert min(first_pick.values()) > 50


# ---------------------------------------------------------------------------
# Cherry lover
# ---------------------------------------------------------------------------


def test_cherry_lover_candidate_layout(rng):
    cands = CherryLover().candidates(rng)
    assert len(cands) == 8
    assert cands[:2] == [Fruit.CHERRY, Fruit.CHERRY]
    assert Counter(cands[2:]) == {Fruit.PLUM: 2, Fruit.PEAR: 2, Fruit.APPLE: 2}


def test_cherry_lover_takes_two_cherries(rng):
    state = make_state(plum=2, pear=2, cherry=5, apple=2)
    assert CherryLover().take_basket(state, rng) == 2
    assert state.count(Fruit.CHERRY) == 3
    assert state.fruit_left == 9


def test_cherry_lover_last_cherry_then_other(rng):
    state = make_state(plum=2, pear=2, cherry=1, apple=2)
    assert CherryLover().take_basket(state, rng) == 2
    assert state.count(Fruit.CHERRY) == 0
    assert state.fruit_left == 5


def test_cherry_lover_without_cherries_takes_two_others(rng):
    state = make_state(plum=1, pear=1, cherry=0, apple=1)
    assert CherryLover().take_basket(state, rng) == 2
    assert state.count(Fruit.CHERRY) == 0
    assert state.fruit_left == 1
    assert sorted(state.fruits.values()) == [0, 0, 0, 1]


def test_single_piece_left_gives_one_pick(rng):
    for strategy in ALL_STRATEGIES:
        state = make_state(pear=1)
        assert strategy.take_basket(state, rng) == 1
        assert state.fruit_left == 0


@settings(max_examples=200, deadline=None)
@given(
    counts=st.tuples(*[st.integers(min_value=0, max_value=10)] * 4),
    strategy=st.sampled_from(ALL_STRATEGIES),
    seed=st.integers(min_value=0, max_value=2**32 - 1),
)
def test_basket_takes_min_of_two_and_fruit_left(counts, strategy, seed):
    state = make_state(*counts)
    before = state.fruit_left
    picked = strategy.take_basket(state, np.random.default_rng(seed))
    assert picked <= BASKET_SIZE
    assert picked == min(BASKET_SIZE, before)
    assert state.fruit_left == before - picked
    assert all(n >= 0 for n in state.fruits.values())
    assert state.raven == 0


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "token,expected",
    [
        ("greedy", GreedyStrategy(FruitOrder.MOST_FIRST)),
        ("Most-First", GreedyStrategy(FruitOrder.MOST_FIRST)),
        ("conservative", GreedyStrategy(FruitOrder.FEWEST_FIRST)),
        ("fewest_first", GreedyStrategy(FruitOrder.FEWEST_FIRST)),
        ("cherry", CherryLover()),
        (" cherry_lover ", CherryLover()),
    ],
)
def test_parse_player(token, expected):
    assert parse_player(token) == expected


def test_parse_player_unknown():
    with pytest.raises(ValueError, match="Unknown player"):
        parse_player("banana")


def test_parse_players_rejects_empty_table():
    with pytest.raises(ValueError):
        parse_players([])


def test_labels():
    assert str(GreedyStrategy()) == "Greedy(most_first)"
    assert str(GreedyStrategy(FruitOrder.FEWEST_FIRST)) == "Greedy(fewest_first)"
    assert str(CherryLover()) == "CherryLover"
    assert describe_players(parse_players(["cherry", "greedy"])) == "[CherryLover, Greedy(most_first)]"


def test_strategies_pickle_roundtrip():
    for strategy in ALL_STRATEGIES:
        assert pickle.loads(pickle.dumps(strategy)) == strategy
