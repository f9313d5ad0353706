# src/orchard/utils/stats.py
"""Statistical helpers for Monte Carlo win-rate estimates.

* ``expected_sigma_pct`` is the headline standard error printed once per run.
* ``binomial_stderr`` is the standard error of one observed proportion.
* ``wilson_ci`` gives a confidence interval that stays inside ``[0, 1]``.
"""

from __future__ import annotations

from math import sqrt

from scipy.stats import norm


def expected_sigma_pct(n_games: int) -> float:
    """Return ``100 / sqrt(n_games)``, the run-wide standard error in percent.

    This is an upper bound on twice the binomial standard error (reached at
    ``p = 0.5``) and depends only on the number of games, so it is reported
    once for the whole run rather than once per scenario.
    """
    if n_games <= 0:
        raise ValueError("n_games must be positive")
    return 100.0 / sqrt(n_games)


def binomial_stderr(k: int, n: int) -> float:
    """Return ``sqrt(p * (1 - p) / n)`` for ``p = k / n``."""
    if n <= 0:
        raise ValueError("n must be positive")
    if not 0 <= k <= n:
        raise ValueError("k must be between 0 and n (inclusive)")
    p = k / n
    return sqrt(p * (1.0 - p) / n)


def wilson_ci(k: int, n: int, alpha: float = 0.05) -> tuple[float, float]:
    """Return the Wilson score confidence interval for a binomial proportion.

    Parameters
    ----------
    k :
        Number of observed successes. Must satisfy ``0 <= k <= n``.
    n :
        Total number of Bernoulli trials. Must be positive.
    alpha :
        Two-sided significance level. ``alpha=0.05`` yields a 95 % interval.

    Returns
    -------
    tuple[float, float]
        ``(lower, upper)`` bounds clipped to ``[0, 1]`` with ``lower <= upper``.

    Raises
    ------
    ValueError
        If ``n <= 0``, ``k`` lies outside ``[0, n]``, or ``alpha`` is not in ``(0, 1)``.
    """

    if n <= 0:
        raise ValueError("n must be positive")
    if not 0 <= k <= n:
        raise ValueError("k must be between 0 and n (inclusive)")
    if not 0.0 < alpha < 1.0:
        raise ValueError("alpha must be in (0, 1)")

    proportion = k / n
    z = norm.ppf(1.0 - alpha / 2.0)
    z2 = z * z
    denom = 1.0 + z2 / n
    center = proportion + z2 / (2.0 * n)
    margin = z * sqrt((proportion * (1.0 - proportion) + z2 / (4.0 * n)) / n)
    lower = float(max(0.0, min(1.0, (center - margin) / denom)))
    upper = float(max(0.0, min(1.0, (center + margin) / denom)))
    if lower > upper:  # numeric noise
        lower = upper
    return lower, upper


__all__ = ["binomial_stderr", "expected_sigma_pct", "wilson_ci"]
