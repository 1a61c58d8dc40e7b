"""
Exception types raised by the picker package.

All errors derive from ``PickerError`` so callers can catch the whole family,
while still subclassing the closest builtin (``ValueError`` for bad inputs,
``RuntimeError`` for failures while computing).
"""

from __future__ import annotations


class PickerError(Exception):
    """Base class for every error raised by this package."""


class InvalidTableError(PickerError, ValueError):
    """
    The weight table cannot be used.

    Raised for an empty table, a negative (or NaN) weight, a zero weight when
    inversion is requested, or a table without any strictly positive weight.
    """


class InvalidAmountError(PickerError, ValueError):
    """The requested amount exceeds the drawable items in non-repetitive mode."""


class RandomSourceError(PickerError, RuntimeError):
    """The entropy source failed to supply random bytes."""


class ThreadError(PickerError, RuntimeError):
    """A parallel worker of the probability calculation could not be joined."""
