from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Tuple

import numpy as np

from gf_checksum.checksum.scheme import ChecksumScheme
from gf_checksum.errors import SingularMatrixError
from gf_checksum.field import FIELD_SIZE, gf_add, gf_div, gf_double, gf_mul
from gf_checksum.slots import Present, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    RAID6-style dual parity (k=2).

    P = sum of data bytes
    Q = sum of data[i] * 2^i
    Any two missing slots are recoverable, except two data slots whose
    distance is a multiple of 51 (the order of 2 in this field).
    """
    redundancy: int = 2


def q_checksum(data: List[int]) -> int:
    """Horner fold from the highest index down: q = 2*q + data[i]."""
    q = 0
    for v in reversed(data):
        q = gf_add(gf_double(q), v)
    return q


@lru_cache(maxsize=1)
def coefficient_tables() -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    (power_of_two, A, B), built once per process.

    power_of_two[i] = 2^i
    A[x][y] = 2^|y-x| / (2^|y-x| + 1)
    B[x][y] = 2^-min(x,y) / (2^|y-x| + 1)
    """
    logger.debug("building dual-parity coefficient tables")
    pow2 = [1] * FIELD_SIZE
    for i in range(1, FIELD_SIZE):
        pow2[i] = gf_double(pow2[i - 1])

    a = np.zeros((FIELD_SIZE, FIELD_SIZE), dtype=np.uint8)
    b = np.zeros((FIELD_SIZE, FIELD_SIZE), dtype=np.uint8)
    for x in range(FIELD_SIZE):
        for y in range(FIELD_SIZE):
            d = pow2[abs(y - x)]
            denom = gf_add(d, 1)
            a[x, y] = gf_div(d, denom)
            b[x, y] = gf_div(gf_div(1, pow2[min(x, y)]), denom)

    tables = (np.asarray(pow2, dtype=np.uint8), a, b)
    for t in tables:
        t.flags.writeable = False
    return tables


class DoubleScheme(ChecksumScheme):
    redundancy = 2
    min_data_length = 2
    max_data_length = FIELD_SIZE

    def __init__(self, cfg: Any = None):
        super().__init__(cfg)
        self._pow2, self._a, self._b = coefficient_tables()

    def _parity(self, data: List[int]) -> List[int]:
        return [gf_add(*data), q_checksum(data)]

    def _recover(self, slots: List[Slot], data: List[int], missing: List[int]) -> List[int]:
        p_slot, q_slot = slots[-2], slots[-1]
        x = missing[0]

        # Missing data entries read as 0, so these are sums over the known data.
        known_p = gf_add(*data)
        known_q = q_checksum(data)

        if isinstance(p_slot, Present) and (len(missing) == 1 or not isinstance(q_slot, Present)):
            data[x] = gf_add(p_slot.value, known_p)
            return data

        if not isinstance(p_slot, Present):
            data[x] = gf_div(gf_add(known_q, q_slot.value), int(self._pow2[x]))
            return data

        y = missing[1]
        if gf_add(int(self._pow2[y - x]), 1) == 0:
            raise SingularMatrixError(
                f"data slots {x} and {y} cannot both be recovered: 2^{y - x} + 1 == 0"
            )
        p_delta = gf_add(p_slot.value, known_p)
        q_delta = gf_add(known_q, q_slot.value)
        data[x] = gf_add(gf_mul(int(self._a[x, y]), p_delta), gf_mul(int(self._b[x, y]), q_delta))
        data[y] = gf_add(p_slot.value, *data)
        return data


Scheme = DoubleScheme
