"""
Entropy sources for the draw engine.

The engine only needs uniformly distributed random bytes. Two sources are
provided: the operating system CSPRNG and a seeded numpy generator that is fast
and reproducible. Any object with a ``fill_bytes(n)`` method can be injected.
"""

from __future__ import annotations

import os
from typing import Optional, Protocol, Union

import numpy as np

from picker.errors import RandomSourceError


U32_MAX = 2**32 - 1


class RandomSource(Protocol):
    def fill_bytes(self, n: int) -> bytes:
        ...


class OsRandomSource:
    """Operating-system random source (``os.urandom``)."""

    def fill_bytes(self, n: int) -> bytes:
        try:
            return os.urandom(int(n))
        except (OSError, NotImplementedError) as exc:
            raise RandomSourceError(f"OS random source failed: {exc}") from exc

    def __repr__(self) -> str:
        return "OsRandomSource()"


class SeededRandomSource:
    """
    Deterministic pseudo-random source backed by ``numpy.random.Generator``.

    The same seed yields the same byte stream, which makes draw sequences
    reproducible across runs.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        generator: Optional[np.random.Generator] = None,
    ) -> None:
        self.seed = seed
        self._rng = generator if generator is not None else np.random.default_rng(seed)

    def fill_bytes(self, n: int) -> bytes:
        return self._rng.bytes(int(n))

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r})"


RandomSourceLike = Union[RandomSource, np.random.Generator, int, None]


def as_random_source(source: RandomSourceLike = None) -> RandomSource:
    """
    Coerce ``source`` into a ``RandomSource``.

    ``None`` selects the OS source, an ``int`` seeds a ``SeededRandomSource``
    and a numpy ``Generator`` is wrapped as-is.
    """
    if source is None:
        return OsRandomSource()
    if isinstance(source, np.random.Generator):
        return SeededRandomSource(generator=source)
    if isinstance(source, (int, np.integer)) and not isinstance(source, bool):
        return SeededRandomSource(int(source))
    if callable(getattr(source, "fill_bytes", None)):
        return source
    raise TypeError(f"Unsupported random source: {source!r}")


def uniform_u32(source: RandomSource) -> int:
    """Read four bytes from ``source`` as an unsigned 32-bit integer."""
    try:
        data = source.fill_bytes(4)
    except RandomSourceError:
        raise
    except Exception as exc:
        raise RandomSourceError(f"Random source failed: {exc!r}") from exc
    if len(data) != 4:
        raise RandomSourceError(f"Random source returned {len(data)} bytes, expected 4")
    return int.from_bytes(data, "little")
