"""
Text configuration for weight tables.

The format is line oriented; ``;`` also separates lines::

    # comment
    repetitive = true
    inversed = false
    [items]
    oxygen = 47
    silicon 28; iron=5
    delete silicon

Each line is split on spaces, tabs and ``=``. The first token names the item
(or a flag); the last token carries the value. Lines that do not parse are
ignored. The bare words ``power_inversed`` and ``repetitive_picking`` from the
older format switch on their flags.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Hashable, Mapping, Optional, Union

from picker.draw import DrawEngine
from picker.errors import InvalidTableError
from picker.prob.orchestrator import compute_inclusion_probabilities
from picker.random_source import RandomSourceLike
from picker.table import WeightTable

logger = logging.getLogger(__name__)

_LINE_SEP = re.compile(r"[\r\n;]")
_TOKEN_SEP = re.compile(r"[ \t=]+")


def _parse_bool(token: str) -> Optional[bool]:
    if token == "true":
        return True
    if token == "false":
        return False
    return None


@dataclass
class PickerConfig:
    """
    Weight table plus the two drawing flags.

    Attributes:
        table: Item name to weight.
        inversed: Use ``1/w`` for every weight.
        repetitive: Allow the same item more than once per draw.
    """

    table: Dict[str, float] = field(default_factory=dict)
    inversed: bool = False
    repetitive: bool = False

    @classmethod
    def from_str(cls, text: str) -> "PickerConfig":
        conf = cls()
        conf.append_str(text)
        return conf

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PickerConfig":
        return cls.from_str(Path(path).read_text(encoding="utf-8"))

    def append_str(self, text: str) -> None:
        """Append, modify or delete items according to ``text``."""
        for line in _LINE_SEP.split(text):
            tokens = [t for t in _TOKEN_SEP.split(line) if t]
            if not tokens or tokens[0].startswith("#"):
                continue
            name = tokens[0]

            if name == "power_inversed":
                self.inversed = True
                continue
            if name == "repetitive_picking":
                self.repetitive = True
                continue
            if len(tokens) < 2:
                logger.debug(f"Ignoring line without value: {line.strip()!r}")
                continue

            value = tokens[-1]
            if name == "delete":
                self.table.pop(value, None)
            elif name in ("inversed", "repetitive"):
                flag = _parse_bool(value)
                if flag is None:
                    logger.debug(f"Ignoring non-boolean value for {name}: {value!r}")
                else:
                    setattr(self, name, flag)
            else:
                try:
                    self.table[name] = float(value)
                except ValueError:
                    logger.debug(f"Ignoring non-numeric weight for {name!r}: {value!r}")

    def weight_table(self) -> WeightTable:
        return WeightTable(self.table)

    def check(self) -> None:
        """
        Raises:
            InvalidTableError: If the table cannot be used with these flags.
        """
        self.weight_table().validate(self.inversed)

    def is_valid(self) -> bool:
        try:
            self.check()
        except InvalidTableError:
            return False
        return True

    def is_fair(self) -> bool:
        """True if all items have equal and valid weights."""
        return self.weight_table().is_uniform()

    def calc_probabilities(self, k: int, **opts: object) -> Dict[Hashable, float]:
        return compute_inclusion_probabilities(
            self.weight_table(),
            repetitive=self.repetitive,
            inversed=self.inversed,
            k=k,
            **opts,
        )

    def build_engine(self, random_source: RandomSourceLike = None) -> DrawEngine:
        return DrawEngine.build(
            self.weight_table(),
            repetitive=self.repetitive,
            inversed=self.inversed,
            random_source=random_source,
        )

    def to_str(self) -> str:
        lines = []
        if not self.is_valid():
            lines.append("# INVALID!!!")
        lines.append("[random-picker]")
        lines.append(f"repetitive = {str(self.repetitive).lower()}")
        lines.append(f"inversed = {str(self.inversed).lower()}")
        lines.append("")
        lines.append("[items]")
        return "\n".join(lines) + "\n" + format_table(self.table)

    def __str__(self) -> str:
        return self.to_str()

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_text(self.to_str(), encoding="utf-8")


def format_table(table: Mapping[Hashable, float]) -> str:
    """
    Format a table as right-aligned ``name = value`` lines sorted by name.

    Returns an empty string for an empty table.
    """
    if not table:
        return ""
    names = {k: str(k) for k in table}
    width = max(len(s) for s in names.values())
    rows = sorted(table.items(), key=lambda kv: names[kv[0]])
    return "".join(f"{names[k]:>{width}} = {float(v):>9.6f}\n" for k, v in rows)
