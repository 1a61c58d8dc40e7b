"""
Unit tests for the draw engine.

Tests grid lookup at the boundaries, rejection in non-repetitive mode,
amount checks, reproducibility with a seeded source and error surfacing.
"""

import os
import subprocess
import sys

import pytest

from picker.draw import DrawEngine, pick
from picker.errors import InvalidAmountError, InvalidTableError, RandomSourceError
from picker.random_source import U32_MAX, SeededRandomSource


class BrokenSource:
    def fill_bytes(self, n: int) -> bytes:
        raise OSError("device gone")


class TestBuild:
    """Test suite for DrawEngine.build."""

    def test_zero_weights_are_not_drawable(self) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 0.0, "c": 1.0}, random_source=1)
        assert engine.table_len == 2
        assert engine.table.keys == ("a", "c")

    def test_invalid_table(self) -> None:
        with pytest.raises(InvalidTableError):
            DrawEngine.build({})
        with pytest.raises(InvalidTableError):
            DrawEngine.build({"a": 0.0, "b": 1.0}, inversed=True)

    def test_grid(self) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 1.0, "c": 2.0}, random_source=1)
        assert engine.grid.tolist() == [0.25, 0.5, 1.0]
        assert engine.grid_width == 1.0


class TestDrawOne:
    """Test suite for single draws."""

    def test_lower_bound(self, scripted_source) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 1.0}, random_source=scripted_source([0]))
        assert engine.draw_one() == 0

    def test_upper_bound(self, scripted_source) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 1.0, "c": 1.0}, random_source=scripted_source([U32_MAX]))
        assert engine.draw_one() == 2

    def test_middle(self, scripted_source) -> None:
        # 0.6 of the grid width lands in the second cell of [0.25, 0.75, 1.0]
        engine = DrawEngine.build(
            {"a": 1.0, "b": 2.0, "c": 1.0},
            random_source=scripted_source([int(0.6 * U32_MAX)]),
        )
        assert engine.draw_one() == 1

    def test_random_source_error(self) -> None:
        engine = DrawEngine.build({"a": 1.0}, random_source=BrokenSource())
        with pytest.raises(RandomSourceError, match="device gone"):
            engine.draw_one()


class TestDrawMany:
    """Test suite for group draws."""

    def test_rejection_skips_drawn_index(self, scripted_source) -> None:
        """Test that an already drawn index is drawn again."""
        source = scripted_source([0, 0, U32_MAX])
        engine = DrawEngine.build({"a": 1.0, "b": 1.0, "c": 1.0}, random_source=source)
        assert engine.draw_indexes(2) == [0, 2]
        assert source.reads == 3

    def test_rejected_draw_reaches_vanishing_weight(self, scripted_source) -> None:
        """Test that an item whose grid cell rounds to zero width is still drawn."""
        source = scripted_source([0, 0, 0])
        engine = DrawEngine.build({"a": 1.0, "b": 1e-20}, random_source=source)
        assert engine.grid.tolist() == [1.0, 1.0]
        assert engine.draw_many(2) == ["a", "b"]
        assert source.reads == 3

    def test_full_draw_with_vanishing_weight_terminates(self) -> None:
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        code = (
            "from picker.draw import DrawEngine\n"
            "for seed in range(20):\n"
            "    drawn = DrawEngine.build({'a': 1.0, 'b': 1e-20, 'c': 1e-30}, random_source=seed).draw_many(3)\n"
            "    assert sorted(drawn) == ['a', 'b', 'c']\n"
        )
        result = subprocess.run(
            [sys.executable, "-c", code],
            env={**os.environ, "PYTHONPATH": root},
            capture_output=True,
            text=True,
            timeout=30,
        )
        assert result.returncode == 0, result.stderr

    def test_repetitive_keeps_duplicates(self, scripted_source) -> None:
        source = scripted_source([0])
        engine = DrawEngine.build({"a": 1.0, "b": 1.0}, repetitive=True, random_source=source)
        assert engine.draw_many(4) == ["a", "a", "a", "a"]

    def test_amount_exceeds_table(self) -> None:
        """Test that an oversized amount fails before drawing."""
        engine = DrawEngine.build({"a": 1.0, "b": 0.0, "c": 1.0}, random_source=BrokenSource())
        with pytest.raises(InvalidAmountError):
            engine.draw_many(3)

    def test_repetitive_allows_large_amount(self) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 1.0}, repetitive=True, random_source=5)
        assert len(engine.draw_many(10)) == 10

    def test_negative_amount(self) -> None:
        engine = DrawEngine.build({"a": 1.0}, random_source=5)
        with pytest.raises(InvalidAmountError):
            engine.draw_indexes(-1)

    def test_full_draw_is_permutation(self, letter_weights) -> None:
        engine = DrawEngine.build(letter_weights, random_source=11)
        drawn = engine.draw_many(len(letter_weights))
        assert sorted(drawn) == sorted(letter_weights)

    def test_zero_amount(self) -> None:
        engine = DrawEngine.build({"a": 1.0}, random_source=5)
        assert engine.draw_many(0) == []

    def test_draw_into(self) -> None:
        engine = DrawEngine.build({"a": 1.0, "b": 2.0, "c": 3.0}, random_source=5)
        dest = [None, None]
        engine.draw_into(dest)
        assert len(set(dest)) == 2
        assert set(dest) <= {"a", "b", "c"}

    def test_seeded_reproducibility(self, letter_weights) -> None:
        """Test that the same seed yields identical sequences."""
        e1 = DrawEngine.build(letter_weights, random_source=SeededRandomSource(42))
        e2 = DrawEngine.build(letter_weights, random_source=SeededRandomSource(42))
        assert [e1.draw_many(5) for _ in range(50)] == [e2.draw_many(5) for _ in range(50)]

    def test_pick_wrapper(self) -> None:
        picks = pick(2, {"a": 1, "b": 15, "c": 1.5}, random_source=3)
        assert len(set(picks)) == 2
        assert any(k in ("a", "c") for k in picks)


class TestSampleFrequencies:
    """Test suite for the Monte Carlo frequency consumer."""

    def test_repetitive_counts_once_per_group(self) -> None:
        engine = DrawEngine.build({"a": 1.0}, repetitive=True, random_source=1)
        assert engine.sample_frequencies(3, 10) == {"a": 1.0}

    def test_frequencies_sum_to_amount(self, small_weights) -> None:
        engine = DrawEngine.build(small_weights, random_source=9)
        freqs = engine.sample_frequencies(2, 1000)
        assert abs(sum(freqs.values()) - 2.0) < 1e-9

    def test_invalid_trials(self) -> None:
        engine = DrawEngine.build({"a": 1.0}, random_source=1)
        with pytest.raises(ValueError):
            engine.sample_frequencies(1, 0)
