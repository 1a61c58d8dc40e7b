"""
Weighted Random Picker Package.

Draws weighted random groups of items from a weight table, with or without
replacement, and computes the exact probability of each item being part of a
group of a given size.
"""

from picker.errors import (
    InvalidAmountError,
    InvalidTableError,
    PickerError,
    RandomSourceError,
    ThreadError,
)
from picker.table import NormalizedTable, WeightTable
from picker.random_source import OsRandomSource, RandomSource, SeededRandomSource
from picker.draw import DrawEngine, pick
from picker.prob import compute_inclusion_probabilities
from picker.config import PickerConfig, format_table

__version__ = "0.2.0"

__all__ = [
    "PickerError",
    "InvalidTableError",
    "InvalidAmountError",
    "RandomSourceError",
    "ThreadError",
    "WeightTable",
    "NormalizedTable",
    "RandomSource",
    "OsRandomSource",
    "SeededRandomSource",
    "DrawEngine",
    "pick",
    "compute_inclusion_probabilities",
    "PickerConfig",
    "format_table",
]
