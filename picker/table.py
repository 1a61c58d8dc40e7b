"""
Weight tables and their normalized form.

A ``WeightTable`` is the caller-facing mapping from item keys to non-negative
weights. ``NormalizedTable`` is the ordered, positional view derived from it
that the draw engine and the probability calculator both consume.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Hashable, Iterator, Mapping, Optional, Sequence, Tuple

import numpy as np

from picker.errors import InvalidTableError


@dataclass(frozen=True)
class NormalizedTable:
    """
    Ordered (key, weight) pairs with weights in (0, 1] summing to 1.

    Result vectors produced by the engines are indexed positionally against
    ``keys``.
    """

    keys: Tuple[Hashable, ...]
    weights: np.ndarray  # shape (len(keys),)

    def __post_init__(self) -> None:
        if self.weights.ndim != 1:
            raise ValueError("weights must be 1D")
        if int(self.weights.shape[0]) != len(self.keys):
            raise ValueError("weights has wrong length")

    def __len__(self) -> int:
        return len(self.keys)

    def grid(self) -> np.ndarray:
        """Cumulative sums of the weights (monotonically non-decreasing)."""
        return np.cumsum(self.weights)

    def index_of(self, key: Hashable) -> int:
        try:
            return self.keys.index(key)
        except ValueError as exc:
            raise KeyError(key) from exc

    def rekey(self, vector: Sequence[float]) -> Dict[Hashable, float]:
        values = np.asarray(vector, dtype=float)
        if values.shape != self.weights.shape:
            raise ValueError("vector has wrong length")
        return {k: float(v) for k, v in zip(self.keys, values)}

    def to_dict(self) -> Dict[Hashable, float]:
        return self.rekey(self.weights)


class WeightTable:
    """
    Immutable mapping from item key to weight.

    Weights are proportional to the probability of an item being drawn in
    single-item or repetitive mode. Insertion order of the source mapping is
    kept and determines the positional order of the normalized table.
    """

    def __init__(self, weights: Mapping[Hashable, float]) -> None:
        self._weights: Dict[Hashable, float] = {k: float(v) for k, v in weights.items()}

    def __len__(self) -> int:
        return len(self._weights)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._weights)

    def __contains__(self, key: object) -> bool:
        return key in self._weights

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightTable):
            return NotImplemented
        return self._weights == other._weights

    def __repr__(self) -> str:
        return f"WeightTable({self._weights!r})"

    def keys(self) -> Tuple[Hashable, ...]:
        return tuple(self._weights)

    def items(self) -> Tuple[Tuple[Hashable, float], ...]:
        return tuple(self._weights.items())

    def get(self, key: Hashable, default: Optional[float] = None) -> Optional[float]:
        return self._weights.get(key, default)

    def validate(self, inversed: bool = False) -> None:
        """
        Check whether the table can be used by the engines.

        Args:
            inversed: Whether weights will be inverted (``w -> 1/w``) before use.

        Raises:
            InvalidTableError: If the table is empty, holds a negative or non-finite
                weight, holds a zero weight while ``inversed`` is set, or has no
                strictly positive weight.
        """
        if not self._weights:
            raise InvalidTableError("Weight table cannot be empty")
        non_empty = False
        for key, w in self._weights.items():
            if not math.isfinite(w) or w < 0.0:
                raise InvalidTableError(f"Invalid weight {w} for key={key!r}")
            if inversed and w == 0.0:
                raise InvalidTableError(f"Zero weight for key={key!r} cannot be inversed")
            if w > 0.0:
                non_empty = True
        if not non_empty:
            raise InvalidTableError("At least one weight must be positive")

    def is_valid(self, inversed: bool = False) -> bool:
        try:
            self.validate(inversed)
        except InvalidTableError:
            return False
        return True

    def is_uniform(self) -> bool:
        """Return True if the table is valid and all weights are equal."""
        if not self.is_valid():
            return False
        values = list(self._weights.values())
        return all(v == values[0] for v in values[1:])

    def to_normalized(self, inversed: bool = False) -> NormalizedTable:
        """
        Build the normalized positional table.

        With ``inversed`` every weight is replaced by its reciprocal; otherwise
        items with a zero weight are dropped. The remaining weights are divided
        by their total.

        Raises:
            InvalidTableError: If ``validate(inversed)`` fails.
        """
        self.validate(inversed)
        if inversed:
            pairs = [(k, 1.0 / w) for k, w in self._weights.items()]
        else:
            pairs = [(k, w) for k, w in self._weights.items() if w > 0.0]
        keys = tuple(k for k, _ in pairs)
        raw = np.array([w for _, w in pairs], dtype=float)
        return NormalizedTable(keys=keys, weights=raw / float(np.sum(raw)))


def as_weight_table(table: Mapping[Hashable, float]) -> WeightTable:
    if isinstance(table, WeightTable):
        return table
    return WeightTable(table)
