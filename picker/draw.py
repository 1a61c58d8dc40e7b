"""
Weighted random draws from a weight table.

The engine maps a uniform 32-bit value onto the cumulative grid of the
normalized table. Non-repetitive draws use rejection: when an index that is
already part of the current result comes up, the replacement is drawn from a
grid rebuilt over the unpicked items only.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import Dict, Hashable, List, Mapping, MutableSequence, Optional

import numpy as np

from picker.errors import InvalidAmountError
from picker.random_source import (
    U32_MAX,
    RandomSource,
    RandomSourceLike,
    as_random_source,
    uniform_u32,
)
from picker.table import NormalizedTable, as_weight_table

logger = logging.getLogger(__name__)


class DrawEngine:
    """
    Generator of groups of weighted random items.

    Items in each group are either repetitive (drawn with replacement) or
    non-repetitive (without replacement). One engine owns one random source
    and is not meant to be shared between threads.
    """

    def __init__(
        self,
        normalized: NormalizedTable,
        repetitive: bool = False,
        random_source: RandomSourceLike = None,
    ) -> None:
        if len(normalized) == 0:
            raise ValueError("normalized table cannot be empty")
        self.table = normalized
        self.repetitive = bool(repetitive)
        self.random_source: RandomSource = as_random_source(random_source)
        self.grid: np.ndarray = normalized.grid()
        self.grid_width = float(self.grid[-1])
        self._grid_values: List[float] = self.grid.tolist()

    @classmethod
    def build(
        cls,
        table: Mapping[Hashable, float],
        repetitive: bool = False,
        inversed: bool = False,
        random_source: RandomSourceLike = None,
    ) -> "DrawEngine":
        """
        Build an engine from a weight table.

        Args:
            table: Mapping (or ``WeightTable``) from item key to weight.
            repetitive: Allow the same item more than once per draw.
            inversed: Use ``1/w`` instead of ``w`` for every weight.
            random_source: Entropy source, seed or numpy Generator. ``None``
                selects the OS random source.

        Raises:
            InvalidTableError: If the table fails validation.
        """
        normalized = as_weight_table(table).to_normalized(inversed)
        return cls(normalized, repetitive=repetitive, random_source=random_source)

    @property
    def table_len(self) -> int:
        """Number of drawable items (weight > 0)."""
        return len(self.table)

    def draw_one(self) -> int:
        """
        Draw one index proportionally to its weight.

        Raises:
            RandomSourceError: If the random source cannot supply bytes.
        """
        val = uniform_u32(self.random_source) / U32_MAX * self.grid_width
        i = bisect_left(self._grid_values, val)
        if i >= len(self._grid_values):
            # only reachable through rounding at the upper bound
            return len(self._grid_values) - 1
        return i

    def draw_indexes(self, amount: int) -> List[int]:
        """
        Draw ``amount`` indexes.

        Raises:
            InvalidAmountError: If non-repetitive and ``amount`` exceeds
                ``table_len``. Checked before drawing.
            RandomSourceError: If the random source fails.
        """
        amount = int(amount)
        if amount < 0:
            raise InvalidAmountError(f"amount must be non-negative, got {amount}")
        if not self.repetitive and amount > self.table_len:
            raise InvalidAmountError(
                f"Cannot draw {amount} non-repetitive items from a table of {self.table_len}"
            )
        if self.repetitive:
            return [self.draw_one() for _ in range(amount)]

        picked = [False] * self.table_len
        out: List[int] = []
        while len(out) < amount:
            i = self.draw_one()
            if picked[i]:
                i = self._draw_unpicked(picked)
            picked[i] = True
            out.append(i)
        return out

    def _draw_unpicked(self, picked: List[bool]) -> int:
        # conditional distribution of a rejected draw; cells that round to
        # zero width in the full grid stay reachable here
        rest = [i for i, p in enumerate(picked) if not p]
        grid = np.cumsum(self.table.weights[rest]).tolist()
        val = uniform_u32(self.random_source) / U32_MAX * grid[-1]
        return rest[min(bisect_left(grid, val), len(rest) - 1)]

    def draw_many(self, amount: int) -> List[Hashable]:
        """Draw ``amount`` items and return their keys."""
        keys = self.table.keys
        return [keys[i] for i in self.draw_indexes(amount)]

    def draw_into(self, dest: MutableSequence[Hashable]) -> None:
        """Fill ``dest`` in place; its length is the amount drawn."""
        keys = self.table.keys
        for pos, i in enumerate(self.draw_indexes(len(dest))):
            dest[pos] = keys[i]

    def sample_frequencies(self, amount: int, trials: int) -> Dict[Hashable, float]:
        """
        Estimate inclusion probabilities by repeated drawing.

        For each of ``trials`` groups of ``amount`` items, an item is counted
        once if it appears in the group (duplicates in repetitive mode are
        counted once).

        Returns:
            Dictionary mapping each key to the fraction of groups containing it.
        """
        trials = int(trials)
        if trials <= 0:
            raise ValueError("trials must be positive")
        counts = np.zeros(self.table_len, dtype=np.int64)
        for _ in range(trials):
            idx = self.draw_indexes(amount)
            if self.repetitive:
                idx = list(set(idx))
            counts[idx] += 1
        logger.debug(f"Sampled {trials} groups of {amount} from {self.table_len} items")
        return self.table.rekey(counts / float(trials))


def pick(
    amount: int,
    table: Mapping[Hashable, float],
    *,
    repetitive: bool = False,
    inversed: bool = False,
    random_source: Optional[RandomSourceLike] = None,
) -> List[Hashable]:
    """
    Convenience wrapper for exactly one draw.

    Example:
        >>> picks = pick(2, {"a": 1, "b": 15, "c": 1.5})
        >>> len(set(picks))
        2
    """
    engine = DrawEngine.build(
        table, repetitive=repetitive, inversed=inversed, random_source=random_source
    )
    return engine.draw_many(amount)
