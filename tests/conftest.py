"""
Shared fixtures for the picker test suite.
"""

from typing import Dict, List

import pytest


LETTER_WEIGHTS: Dict[str, float] = {
    "a": 856, "b": 139, "c": 297, "d": 378, "e": 1304,
    "f": 289, "g": 199, "h": 528, "i": 627, "j": 13,
    "k": 42, "l": 339, "m": 249, "n": 707, "o": 797,
    "p": 199, "q": 12, "r": 677, "s": 607, "t": 1045,
    "u": 249, "v": 92, "w": 149, "x": 17, "y": 199, "z": 8,
}


class ScriptedSource:
    """Random source returning a fixed sequence of unsigned 32-bit values."""

    def __init__(self, values: List[int]) -> None:
        self.values = list(values)
        self.reads = 0

    def fill_bytes(self, n: int) -> bytes:
        assert n == 4
        value = self.values[self.reads % len(self.values)]
        self.reads += 1
        return int(value).to_bytes(4, "little")


@pytest.fixture
def letter_weights() -> Dict[str, float]:
    return dict(LETTER_WEIGHTS)


@pytest.fixture
def small_weights() -> Dict[str, float]:
    return {"x": 5.0, "y": 3.0, "z": 2.0}


@pytest.fixture
def scripted_source():
    return ScriptedSource
