"""Unit tests for :mod:`orchard.utils.stats`."""

from __future__ import annotations

import math

import pytest

from orchard.utils.stats import binomial_stderr, expected_sigma_pct, wilson_ci


def test_expected_sigma_pct():
    assert expected_sigma_pct(500_000) == pytest.approx(100 / math.sqrt(500_000))
    assert f"{expected_sigma_pct(500_000):.2f}" == "0.14"
    assert expected_sigma_pct(10_000) == pytest.approx(1.0)


def test_expected_sigma_pct_rejects_zero():
    with pytest.raises(ValueError):
        expected_sigma_pct(0)


def test_binomial_stderr():
    assert binomial_stderr(50, 100) == pytest.approx(0.05)
    assert binomial_stderr(0, 100) == 0.0
    with pytest.raises(ValueError):
        binomial_stderr(5, 0)
    with pytest.raises(ValueError):
        binomial_stderr(11, 10)


def test_wilson_ci_balanced_sample() -> None:
    lower, upper = wilson_ci(5, 10)

    assert lower == pytest.approx(0.2365930905, rel=1e-9)
    assert upper == pytest.approx(0.7634069095, rel=1e-9)


def test_wilson_ci_handles_extreme_counts() -> None:
    low_success = wilson_ci(0, 10)
    high_success = wilson_ci(10, 10)

    assert low_success[0] == pytest.approx(0.0)
    assert high_success[1] == pytest.approx(1.0)
    assert low_success[0] <= low_success[1]
    assert high_success[0] <= high_success[1]


@pytest.mark.parametrize(
    "k,n,alpha",
    [
        (-1, 10, 0.05),
        (11, 10, 0.05),
        (1, 0, 0.05),
        (1, 10, -0.1),
        (1, 10, 1.0),
    ],
)
def test_wilson_ci_invalid_inputs(k: int, n: int, alpha: float) -> None:
    with pytest.raises(ValueError):
        wilson_ci(k, n, alpha)
