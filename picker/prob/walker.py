"""
Exact enumeration of the non-repetitive selection tree.

Nodes of the tree are partial sequences of distinct indexes with length up to
the pick amount. The probability of a node is the product, along its path, of
each chosen weight divided by the weight mass still unpicked at that step.
Every visited node adds its probability to the result slot of the index it
selected last (preorder accumulation), so after a full walk ``result[i]`` is
the probability that index ``i`` is drawn at any position.

The walk is iterative with an explicit stack bounded by the pick amount.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np


class InclusionTreeWalker:
    """
    Single-use depth-first walker over one partition of the selection tree.

    Args:
        weights: Normalized weights (positional).
        pick_amount: Total amount of items per draw, including the indexes
            already marked in ``picked``.
        picked: Flags of indexes fixed as the partition prefix.

    The probabilities accumulated by ``run`` are conditional on the prefix
    having been drawn already.
    """

    def __init__(self, weights: Sequence[float], pick_amount: int, picked: Sequence[bool]) -> None:
        if len(weights) != len(picked):
            raise ValueError("weights and picked must have the same length")
        self.weights: List[float] = [float(w) for w in weights]
        self.picked: List[bool] = [bool(p) for p in picked]

        stack_size = int(pick_amount)
        rem_width = 0.0
        for w, p in zip(self.weights, self.picked):
            if p:
                stack_size -= 1
            else:
                rem_width += w
        self.stack_size = max(stack_size, 0)
        self.rem_width = rem_width

        self.stack: List[Tuple[int, float]] = []
        self.result: List[float] = [0.0] * len(self.weights)
        self._done = False

    def run(self) -> np.ndarray:
        """Walk the whole partition and return the accumulated result vector."""
        if self._done:
            raise RuntimeError("InclusionTreeWalker can only be run once")
        self._done = True
        while self._descend() or self._advance_sibling() or self._backtrack():
            pass
        return np.asarray(self.result, dtype=float)

    def _descend(self) -> bool:
        if len(self.stack) >= self.stack_size:
            return False
        i_next = self._next_unpicked(0)
        if i_next is None:
            return False

        parent_prob = self.stack[-1][1] if self.stack else 1.0
        prob = parent_prob * self.weights[i_next] / self.rem_width

        self.stack.append((i_next, prob))
        self.picked[i_next] = True
        self.rem_width -= self.weights[i_next]
        self.result[i_next] += prob
        return True

    def _advance_sibling(self) -> bool:
        if not self.stack:
            return False
        i_prev = self.stack[-1][0]
        i_next = self._next_unpicked(i_prev + 1)
        if i_next is None:
            return False

        parent_prob = self.stack[-2][1] if len(self.stack) >= 2 else 1.0
        parent_rem_width = self.rem_width + self.weights[i_prev]
        prob = parent_prob * self.weights[i_next] / parent_rem_width

        self.stack[-1] = (i_next, prob)
        self.picked[i_prev] = False
        self.picked[i_next] = True
        self.rem_width = parent_rem_width - self.weights[i_next]
        self.result[i_next] += prob
        return True

    def _backtrack(self) -> bool:
        while self.stack:
            i_prev, _ = self.stack.pop()
            self.picked[i_prev] = False
            self.rem_width += self.weights[i_prev]
            if self._advance_sibling():
                return True
        return False

    def _next_unpicked(self, start: int) -> Optional[int]:
        for i in range(start, len(self.picked)):
            if not self.picked[i]:
                return i
        return None


def walk_partition(weights: Sequence[float], pick_amount: int, fixed_index: int) -> Tuple[int, np.ndarray]:
    """
    Walk the first-level branch rooted at ``fixed_index``.

    Module-level so it can be shipped to a process pool.
    """
    picked = [False] * len(weights)
    picked[fixed_index] = True
    walker = InclusionTreeWalker(weights, pick_amount, picked)
    return fixed_index, walker.run()
