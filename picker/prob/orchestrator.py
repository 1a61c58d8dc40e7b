"""
Exact inclusion probabilities for weighted draws.

``compute_inclusion_probabilities`` answers, for every item of a weight table,
the probability that it appears in a draw of ``k`` items. Closed forms are used
whenever they exist; the general non-repetitive case with unequal weights is
enumerated exactly by ``InclusionTreeWalker`` instances, one per first-level
branch, run in parallel groups.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from scipy.special import perm

from picker.errors import InvalidAmountError, ThreadError
from picker.prob.walker import walk_partition
from picker.table import NormalizedTable, WeightTable, as_weight_table

logger = logging.getLogger(__name__)

EXECUTORS = ("process", "thread", "serial")


def compute_inclusion_probabilities(
    table: Mapping[Hashable, float],
    repetitive: bool = False,
    inversed: bool = False,
    k: int = 1,
    *,
    max_workers: Optional[int] = None,
    executor: str = "process",
) -> Dict[Hashable, float]:
    """
    Probability of each item being part of a draw of ``k`` items.

    Shortcuts are checked in order: ``k == 0``; ``k`` larger than the drawable
    items (non-repetitive, error); ``k`` equal to it (non-repetitive); uniform
    weights (non-repetitive, ``k / n``); ``k == 1`` (the normalized weight);
    repetitive mode (``1 - (1 - w)**k``). Everything else is enumerated.

    Args:
        table: Mapping (or ``WeightTable``) from item key to weight.
        repetitive: Draw with replacement.
        inversed: Use ``1/w`` instead of ``w`` for every weight.
        k: Amount of items per draw.
        max_workers: Upper bound on concurrently running walkers. Defaults to
            the CPU count.
        executor: ``"process"``, ``"thread"`` or ``"serial"``.

    Returns:
        Dictionary mapping every key of ``table`` to its probability. Keys
        filtered out for a zero weight map to 0.0.

    Raises:
        InvalidTableError: If the table fails validation.
        InvalidAmountError: If ``k`` is negative, or exceeds the drawable items
            in non-repetitive mode.
        ThreadError: If a parallel worker fails.
    """
    wt = as_weight_table(table)
    normalized = wt.to_normalized(inversed)
    n = len(normalized)
    k = int(k)
    if k < 0:
        raise InvalidAmountError(f"k must be non-negative, got {k}")

    if k == 0:
        return _fill(wt, normalized, np.zeros(n))

    if not repetitive:
        if k > n:
            raise InvalidAmountError(f"Cannot draw {k} non-repetitive items from a table of {n}")
        if k == n:
            return _fill(wt, normalized, np.ones(n))
        if wt.is_uniform():
            logger.debug(f"Uniform table of {n} items, closed form k/n")
            return _fill(wt, normalized, np.full(n, float(k) / float(n)))

    w = normalized.weights
    if k == 1:
        return _fill(wt, normalized, w)
    if repetitive:
        return _fill(wt, normalized, 1.0 - np.power(1.0 - w, k))

    result = enumerate_inclusion(normalized, k, max_workers=max_workers, executor=executor)
    return _fill(wt, normalized, result)


def enumerate_inclusion(
    normalized: NormalizedTable,
    k: int,
    *,
    max_workers: Optional[int] = None,
    executor: str = "process",
) -> np.ndarray:
    """
    Enumerate the non-repetitive selection tree and return the result vector.

    The table's index range is split into groups of at most ``max_workers``
    branches. Groups run one after another; the branches of a group run
    concurrently, each walking the subtree below its fixed first index. Partial
    results are reduced in submission order, so repeated calls are
    bit-identical.

    Raises:
        ThreadError: If any walker fails; no partial result is returned.
    """
    executor = str(executor).strip().lower()
    if executor not in EXECUTORS:
        raise ValueError(f"Unknown executor: {executor!r}")
    n = len(normalized)
    k = int(k)
    if not 1 <= k <= n:
        raise InvalidAmountError(f"k must be in [1, {n}], got {k}")

    weights: List[float] = normalized.weights.tolist()
    final = np.array(weights, dtype=float)
    if k == 1:
        return final

    group_size = _group_size(max_workers, n)
    groups = [list(range(start, min(start + group_size, n))) for start in range(0, n, group_size)]
    logger.debug(
        f"Enumerating {estimate_node_count(n, k)} nodes for n={n}, k={k} "
        f"in {len(groups)} group(s) of up to {group_size} ({executor})"
    )

    pool = _make_pool(executor, group_size)
    try:
        for g, group in enumerate(groups):
            for fixed_index, sub in _run_group(pool, weights, k, group):
                final += weights[fixed_index] * sub
            logger.debug(f"Group {g + 1}/{len(groups)} joined")
    finally:
        if pool is not None:
            pool.shutdown(wait=True)
    return final


def estimate_node_count(n: int, k: int) -> int:
    """Number of tree nodes visited by a full enumeration (sum of n!/(n-d)!)."""
    return int(sum(perm(int(n), d, exact=True) for d in range(1, int(k) + 1)))


def _run_group(
    pool: Optional[Executor],
    weights: Sequence[float],
    k: int,
    group: Sequence[int],
) -> List[Tuple[int, np.ndarray]]:
    try:
        if pool is None:
            return [walk_partition(weights, k, i) for i in group]
        futures = [pool.submit(walk_partition, weights, k, i) for i in group]
        return [f.result() for f in futures]
    except Exception as exc:
        raise ThreadError(f"Worker failed during probability calculation: {exc!r}") from exc


def _make_pool(executor: str, workers: int) -> Optional[Executor]:
    if executor == "serial":
        return None
    if executor == "thread":
        return ThreadPoolExecutor(max_workers=workers)
    return ProcessPoolExecutor(max_workers=workers)


def _group_size(max_workers: Optional[int], n: int) -> int:
    if max_workers is None:
        max_workers = os.cpu_count() or 4
    if int(max_workers) < 1:
        raise ValueError("max_workers must be at least 1")
    return max(1, min(int(max_workers), int(n)))


def _fill(table: WeightTable, normalized: NormalizedTable, vector: np.ndarray) -> Dict[Hashable, float]:
    by_key = normalized.rekey(vector)
    return {key: by_key.get(key, 0.0) for key in table}
