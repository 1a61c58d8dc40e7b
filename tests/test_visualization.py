"""
Unit tests for probability plots and selection trees.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from picker.table import WeightTable
from picker.visualization import ProbabilityVisualizer, build_selection_tree


class TestSelectionTree:
    """Test suite for build_selection_tree."""

    def test_node_count_and_leaf_mass(self) -> None:
        normalized = WeightTable({"a": 5.0, "b": 3.0, "c": 2.0}).to_normalized()
        g = build_selection_tree(normalized, 2)
        assert g.number_of_nodes() == 1 + 3 + 6
        leaves = [n for n in g.nodes if g.nodes[n]["depth"] == 2]
        assert sum(g.nodes[n]["prob"] for n in leaves) == pytest.approx(1.0)
        assert g.nodes[("a", "b")]["prob"] == pytest.approx(0.5 * 0.3 / 0.5)

    def test_too_large(self) -> None:
        normalized = WeightTable({c: 1.0 for c in "abcdefgh"}).to_normalized()
        with pytest.raises(ValueError, match="too large"):
            build_selection_tree(normalized, 4, max_nodes=100)


class TestProbabilityVisualizer:
    """Test suite for ProbabilityVisualizer."""

    def test_plot_probabilities(self) -> None:
        ax = ProbabilityVisualizer.plot_probabilities({"a": 0.7, "b": 0.3})
        assert ax is not None
        assert len(ax.patches) == 2

    def test_plot_with_frequencies(self) -> None:
        ax = ProbabilityVisualizer.plot_probabilities(
            {"a": 0.7, "b": 0.3}, {"a": 0.69, "b": 0.31}, sort=True
        )
        assert len(ax.patches) == 4

    def test_missing_frequency(self) -> None:
        with pytest.raises(ValueError, match="missing key"):
            ProbabilityVisualizer.plot_probabilities({"a": 0.7, "b": 0.3}, {"a": 0.7})

    def test_empty(self) -> None:
        with pytest.raises(ValueError):
            ProbabilityVisualizer.plot_probabilities({})

    def test_plot_selection_tree(self) -> None:
        ax = ProbabilityVisualizer.plot_selection_tree({"a": 1.0, "b": 2.0, "c": 3.0}, 2)
        assert ax is not None
