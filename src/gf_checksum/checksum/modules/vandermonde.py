from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Tuple

from gf_checksum.checksum.scheme import ChecksumScheme
from gf_checksum.field import MAX_VALUE, gf_pow
from gf_checksum.matrix import Matrix
from gf_checksum.slots import Present, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    General erasure code (k >= 3) from a Vandermonde generator matrix.

    redundancy: number of checksum symbols k; recovers up to k missing slots.
    Data length must be in [3, 254] so every column gets a distinct
    non-zero base.
    """
    redundancy: int = 3


def vandermonde_element(row: int, col: int) -> int:
    return gf_pow(col + 1, row)


@lru_cache(maxsize=None)
def vandermonde(redundancy: int, length: int) -> Matrix:
    """
    k x N generator: M[row][col] = (col + 1) ** row.
    Built on first use for each (k, N) and reused afterwards.
    """
    logger.debug("building %dx%d Vandermonde matrix", redundancy, length)
    return Matrix.build(redundancy, length, vandermonde_element)


@lru_cache(maxsize=256)
def recovery_matrix(redundancy: int, length: int, missing: Tuple[int, ...]) -> Matrix:
    """
    Inverse of the square system relating the first `length` surviving slots
    to the data, for one erasure pattern. Singular patterns raise
    SingularMatrixError and are not cached.
    """
    # Stack [I; M], drop the rows of missing slots and keep the first n
    # remaining, so data rows win over checksum rows.
    system = Matrix.identity(length).append_rows(vandermonde(redundancy, length))
    system = system.without_rows(missing)
    if system.num_rows > length:
        system = system.without_rows(range(length, system.num_rows))
    logger.debug("inverting recovery system for k=%d n=%d missing=%s", redundancy, length, missing)
    return system.inverse()


class VandermondeScheme(ChecksumScheme):
    min_data_length = 3
    max_data_length = MAX_VALUE - 1

    def __init__(self, cfg: Any = None):
        super().__init__(cfg if cfg is not None else Config())
        self.redundancy = _get_redundancy(self.cfg)

    def _parity(self, data: List[int]) -> List[int]:
        m = vandermonde(self.redundancy, len(data))
        return m.times(Matrix.column_vector(data)).get_col(0).tolist()

    def _recover(self, slots: List[Slot], data: List[int], missing: List[int]) -> List[int]:
        n = len(data)
        inverse = recovery_matrix(self.redundancy, n, tuple(missing))
        known = [s.value for s in slots if isinstance(s, Present)][:n]
        solution = inverse.times(Matrix.column_vector(known))
        return solution.get_col(0).tolist()


def _get_redundancy(cfg: Any) -> int:
    k = getattr(cfg, "redundancy", None)
    if k is None:
        raise AttributeError("cfg missing required int attribute: redundancy")
    if not isinstance(k, int) or isinstance(k, bool):
        raise TypeError("cfg.redundancy must be int")
    if k < 3:
        raise ValueError("cfg.redundancy must be >= 3")
    return k


Scheme = VandermondeScheme
