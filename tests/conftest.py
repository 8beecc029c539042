from __future__ import annotations

import itertools
import random
from pathlib import Path
from typing import Iterator, List, Tuple


def repo_root() -> Path:
    """
    Find the repository root by walking upward until we find pyproject.toml.
    This is robust regardless of where tests live.
    """
    start = Path(__file__).resolve()
    for p in [start] + list(start.parents):
        if (p / "pyproject.toml").exists():
            return p
    raise RuntimeError("repo_root(): could not find pyproject.toml walking upward")


def random_data(length: int, seed: int) -> bytes:
    """
    Deterministic pseudo-random payload for a given seed.
    """
    rng = random.Random(seed)
    return bytes(rng.randrange(256) for _ in range(length))


def erasure_patterns(total: int, max_missing: int) -> Iterator[Tuple[int, ...]]:
    """
    Every subset of range(total) with at most max_missing elements, smallest first.
    """
    for r in range(max_missing + 1):
        yield from itertools.combinations(range(total), r)


def to_unsigned(values: List[int]) -> bytes:
    """Signed byte literals (e.g. -123) as the unsigned field elements they denote."""
    return bytes(v & 0xFF for v in values)
