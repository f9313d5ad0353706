# src/orchard/utils/parallel.py
"""Parallel execution helpers used by simulations.

Small, testable utilities for mapping work with a ProcessPoolExecutor.
Keep simulation-specific logic outside utils.
"""

from __future__ import annotations

import contextlib
from concurrent.futures import ProcessPoolExecutor, as_completed


def process_map(fn, items, *, n_jobs=None, window=0):
    """Map ``fn`` across ``items`` with optional multiprocessing support.

    Results are yielded in completion order, not input order; callers that
    care about ordering must carry an index through ``items``.
    """
    if n_jobs in (None, 0, 1):
        for it in items:
            yield fn(it)
        return
    if window <= 0:
        window = n_jobs * 4

    with ProcessPoolExecutor(max_workers=n_jobs) as pool:
        it = iter(items)
        futs = []
        # prefill the window
        for _ in range(window):
            try:
                futs.append(pool.submit(fn, next(it)))
            except StopIteration:
                break
        while futs:
            done = next(as_completed(futs))
            futs.remove(done)
            yield done.result()
            with contextlib.suppress(StopIteration):
                futs.append(pool.submit(fn, next(it)))


__all__ = ["process_map"]
