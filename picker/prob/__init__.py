"""
Exact inclusion probabilities for weighted draws.

Unlike ``DrawEngine.sample_frequencies`` (empirical Monte Carlo frequencies),
everything here is computed analytically: closed forms where they exist, and an
exhaustive walk of the non-repetitive selection tree otherwise.
"""

from picker.prob.walker import InclusionTreeWalker, walk_partition
from picker.prob.orchestrator import (
    compute_inclusion_probabilities,
    enumerate_inclusion,
    estimate_node_count,
)

__all__ = [
    "InclusionTreeWalker",
    "walk_partition",
    "compute_inclusion_probabilities",
    "enumerate_inclusion",
    "estimate_node_count",
]
