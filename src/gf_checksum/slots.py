from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

import numpy as np

from gf_checksum.errors import IndexOutOfRangeError


@dataclass(frozen=True)
class Present:
    """
    A received slot with a known field element (normalised to 0..255).
    Plain ints and numpy integers are accepted; value is always a plain int.
    """
    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, (int, np.integer)) or isinstance(self.value, bool):
            raise TypeError("Present.value must be int")
        object.__setattr__(self, "value", int(self.value) & 0xFF)


@dataclass(frozen=True)
class Missing:
    """An erased slot whose value must be recovered."""


MISSING = Missing()

Slot = Union[Present, Missing]


def received(values: Iterable[int]) -> List[Slot]:
    """Wrap every value as Present (nothing missing)."""
    return [Present(int(v)) for v in values]


def erase(values: Sequence[int], positions: Iterable[int]) -> List[Slot]:
    """
    Wrap `values` as slots and mark `positions` missing.
    """
    slots = received(values)
    for p in positions:
        if not isinstance(p, int):
            raise TypeError("erase positions must be ints")
        if p < 0 or p >= len(slots):
            raise IndexOutOfRangeError(f"position {p} out of range for {len(slots)} slots")
        slots[p] = MISSING
    return slots


def missing_indices(slots: Sequence[Slot]) -> List[int]:
    """Ascending indices of Missing slots. Non-slot entries raise TypeError."""
    out: List[int] = []
    for i, s in enumerate(slots):
        if isinstance(s, Missing):
            out.append(i)
        elif not isinstance(s, Present):
            raise TypeError(f"slot {i} must be Present or Missing, got {type(s).__name__}")
    return out


def known_values(slots: Sequence[Slot], length: int) -> List[int]:
    """
    Values of the first `length` slots, with Missing slots read as 0.
    """
    if length < 0:
        raise ValueError("length must be >= 0")
    return [s.value if isinstance(s, Present) else 0 for s in slots[:length]]
