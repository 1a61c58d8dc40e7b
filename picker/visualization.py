"""
Visualization tools for weighted draws.

This module provides plotting for inclusion probability tables (optionally
against empirical frequencies) and for small non-repetitive selection trees.
"""

from __future__ import annotations

from itertools import permutations
from typing import Dict, Hashable, List, Mapping, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from picker.table import NormalizedTable, as_weight_table


def build_selection_tree(normalized: NormalizedTable, k: int, max_nodes: int = 500) -> nx.DiGraph:
    """
    Build the non-repetitive selection tree as a directed graph.

    Nodes are tuples of drawn keys (the root is ``()``) with attributes
    ``prob`` (path probability) and ``depth``. Edges point from a partial
    draw to its one-item extension.

    Raises:
        ValueError: If the tree would exceed ``max_nodes`` nodes.
    """
    n = len(normalized)
    k = int(k)
    if not 0 <= k <= n:
        raise ValueError(f"k must be in [0, {n}], got {k}")
    count = 1
    width = 1
    for d in range(k):
        width *= n - d
        count += width
    if count > int(max_nodes):
        raise ValueError(f"Selection tree too large to build ({count} nodes, max_nodes={int(max_nodes)})")

    w = normalized.weights
    keys = normalized.keys
    g = nx.DiGraph()
    g.add_node((), prob=1.0, depth=0)
    for depth in range(1, k + 1):
        for path in permutations(range(n), depth):
            parent = tuple(keys[i] for i in path[:-1])
            rem = 1.0 - float(sum(w[i] for i in path[:-1]))
            prob = g.nodes[parent]["prob"] * float(w[path[-1]]) / rem
            node = parent + (keys[path[-1]],)
            g.add_node(node, prob=prob, depth=depth)
            g.add_edge(parent, node)
    return g


def _tree_layout(g: nx.DiGraph) -> Dict[Tuple[Hashable, ...], Tuple[float, float]]:
    pos: Dict[Tuple[Hashable, ...], Tuple[float, float]] = {}
    leaves = [n for n in nx.dfs_preorder_nodes(g, ()) if g.out_degree(n) == 0]
    for x, leaf in enumerate(leaves):
        pos[leaf] = (float(x), -float(g.nodes[leaf]["depth"]))
    for node in nx.dfs_postorder_nodes(g, ()):
        if node in pos:
            continue
        xs = [pos[c][0] for c in g.successors(node)]
        pos[node] = (float(np.mean(xs)), -float(g.nodes[node]["depth"]))
    return pos


class ProbabilityVisualizer:
    """Plots inclusion probabilities and selection trees."""

    @staticmethod
    def plot_probabilities(
        probabilities: Mapping[Hashable, float],
        frequencies: Optional[Mapping[Hashable, float]] = None,
        ax: Optional[plt.Axes] = None,
        *,
        sort: bool = False,
    ) -> plt.Axes:
        """
        Bar chart of inclusion probabilities.

        Args:
            probabilities: Key to exact probability.
            frequencies: Optional key to empirical frequency, drawn as a second
                bar series next to the exact values.
            ax: Matplotlib axes to plot on. If None, creates new figure.
            sort: Order bars by decreasing probability instead of table order.

        Returns:
            Matplotlib axes object.

        Raises:
            ValueError: If probabilities is empty, or frequencies misses a key.
        """
        if not probabilities:
            raise ValueError("probabilities cannot be empty")
        if ax is None:
            _, ax = plt.subplots(figsize=(10, 5))

        keys: List[Hashable] = list(probabilities.keys())
        if sort:
            keys.sort(key=lambda k: -float(probabilities[k]))
        x = np.arange(len(keys))
        exact = np.array([float(probabilities[k]) for k in keys])

        if frequencies is None:
            ax.bar(x, exact, color="tab:blue", label="Exact")
        else:
            missing = [k for k in keys if k not in frequencies]
            if missing:
                raise ValueError(f"frequencies missing key {missing[0]!r}")
            empirical = np.array([float(frequencies[k]) for k in keys])
            ax.bar(x - 0.2, exact, width=0.4, color="tab:blue", label="Exact")
            ax.bar(x + 0.2, empirical, width=0.4, color="tab:orange", label="Empirical")

        ax.set_xticks(x)
        ax.set_xticklabels([str(k) for k in keys])
        ax.set_ylabel("Inclusion probability")
        ax.set_ylim(0.0, max(1.0, float(exact.max()) * 1.05))
        ax.set_title("Inclusion Probabilities")
        ax.legend()
        return ax

    @staticmethod
    def plot_selection_tree(
        table: Mapping[Hashable, float],
        k: int,
        ax: Optional[plt.Axes] = None,
        *,
        inversed: bool = False,
        max_nodes: int = 200,
    ) -> plt.Axes:
        """
        Draw the non-repetitive selection tree of a small table.

        Each node is labelled with its last drawn key and its path probability.

        Returns:
            Matplotlib axes object.
        """
        normalized = as_weight_table(table).to_normalized(inversed)
        g = build_selection_tree(normalized, k, max_nodes=max_nodes)
        if ax is None:
            _, ax = plt.subplots(figsize=(12, 6))

        pos = _tree_layout(g)
        labels = {
            node: ("root" if not node else f"{node[-1]}\n{g.nodes[node]['prob']:.3f}")
            for node in g.nodes
        }
        nx.draw_networkx_edges(g, pos, ax=ax, arrows=False, alpha=0.5)
        nx.draw_networkx_nodes(
            g,
            pos,
            ax=ax,
            node_size=[300 + 900 * float(g.nodes[n]["prob"]) for n in g.nodes],
            node_color="lightsteelblue",
        )
        nx.draw_networkx_labels(g, pos, labels=labels, ax=ax, font_size=7)
        ax.set_title(f"Selection Tree (k={int(k)})")
        ax.axis("off")
        return ax
