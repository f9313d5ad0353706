import pandas as pd
import pytest

from orchard.game.engine import GameResult
from orchard.simulation.simulation import (
    ScenarioResult,
    games_frame,
    simulate_many_games,
    simulate_one_game,
)
from orchard.simulation.strategies import CherryLover, GreedyStrategy


def test_simulate_one_game_is_seeded():
    a = simulate_one_game(players=[GreedyStrategy()], seed=11)
    b = simulate_one_game(players=[GreedyStrategy()], seed=11)
    assert isinstance(a, GameResult)
    assert a == b


def test_simulate_many_games_counts():
    res = simulate_many_games(players=[GreedyStrategy(), CherryLover()], n_games=200, seed=5)
    assert isinstance(res, ScenarioResult)
    assert res.label == "[Greedy(most_first), CherryLover]"
    assert res.n_games == 200
    assert 0 < res.n_wins < 200
    assert res.win_rate == pytest.approx(res.n_wins / 200)
    # a game needs at least 20 rolls to win or 9 to lose
    assert res.mean_turns >= 9


def test_simulate_many_games_reproducible():
    a = simulate_many_games(players=[CherryLover()], n_games=100, seed=3)
    b = simulate_many_games(players=[CherryLover()], n_games=100, seed=3)
    assert (a.n_wins, a.total_turns) == (b.n_wins, b.total_turns)


def test_simulate_many_games_validates():
    with pytest.raises(ValueError):
        simulate_many_games(players=[GreedyStrategy()], n_games=0)
    with pytest.raises(ValueError):
        simulate_many_games(players=[], n_games=10)


def test_scenario_row_fields():
    res = ScenarioResult(label="[CherryLover]", n_games=100, n_wins=50, total_turns=4000, seed=1)
    row = res.as_row()
    assert row["win_rate"] == pytest.approx(0.5)
    assert row["stderr"] == pytest.approx(0.05)
    assert row["ci_lower"] < 0.5 < row["ci_upper"]
    assert row["mean_turns"] == pytest.approx(40.0)
    assert row["label"] == "[CherryLover]"


def test_games_frame_matches_many_games():
    df = games_frame(players=[GreedyStrategy()], n_games=50, seed=8)
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["won", "n_turns", "raven", "fruit_left", "basket_pieces"]
    assert len(df) == 50
    agg = simulate_many_games(players=[GreedyStrategy()], n_games=50, seed=8)
    assert int(df["won"].sum()) == agg.n_wins
    assert int(df["n_turns"].sum()) == agg.total_turns
    assert (df.loc[df["won"], "fruit_left"] == 0).all()
    assert (df.loc[~df["won"], "raven"] == 9).all()
