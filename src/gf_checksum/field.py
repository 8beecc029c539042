from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np

from gf_checksum.errors import InvalidDimensionError

# GF(2^8) with reducing polynomial 0x11B (x^8 + x^4 + x^3 + x + 1), generator 0x03.
# Elements are unsigned ints 0..255; signed byte inputs are folded with & 0xFF.

MAX_VALUE = 255
FIELD_SIZE = MAX_VALUE + 1
GENERATOR = 0x03
REDUCTION = 0x1B


def gf_double(a: int) -> int:
    """Multiply by 2: shift left, reduce when the high bit falls off."""
    a &= 0xFF
    r = (a << 1) & 0xFF
    if a & 0x80:
        r ^= REDUCTION
    return r


def _slow_mul(a: int, b: int) -> int:
    # Russian peasant multiply; only used before the log tables exist.
    r = 0
    while a:
        if a & 1:
            r ^= b
        b = gf_double(b)
        a >>= 1
    return r


_GF_EXP = [0] * FIELD_SIZE
_GF_LOG = [0] * FIELD_SIZE

_x = 1
for i in range(FIELD_SIZE):
    _GF_EXP[i] = _x
    _x = _slow_mul(_x, GENERATOR)
for i in range(MAX_VALUE):
    _GF_LOG[_GF_EXP[i]] = i


def gf_add(*values: int) -> int:
    """XOR-fold of all operands (addition and subtraction coincide)."""
    s = 0
    for v in values:
        s ^= v & 0xFF
    return s


gf_sub = gf_add


def gf_mul(a: int, b: int) -> int:
    a &= 0xFF
    b &= 0xFF
    if a == 0 or b == 0:
        return 0
    return _GF_EXP[(_GF_LOG[a] + _GF_LOG[b]) % MAX_VALUE]


def gf_div(a: int, b: int) -> int:
    """
    Field division. Division by zero yields 0 rather than raising;
    callers that need singularity detection check the divisor themselves.
    """
    a &= 0xFF
    b &= 0xFF
    if a == 0 or b == 0:
        return 0
    return _GF_EXP[(_GF_LOG[a] - _GF_LOG[b] + MAX_VALUE) % MAX_VALUE]


def gf_pow(base: int, exponent: int) -> int:
    """base**exponent in the field. Any base to the 0th power is 1 (0 included)."""
    if not isinstance(exponent, int):
        raise TypeError("exponent must be int")
    if exponent < 0:
        raise ValueError("exponent must be >= 0")
    if exponent == 0:
        return 1
    base &= 0xFF
    if base == 0:
        return 0
    return _GF_EXP[(_GF_LOG[base] * exponent) % MAX_VALUE]


_GF_SQUARE = [gf_mul(v, v) for v in range(FIELD_SIZE)]
_GF_SQRT = [0] * FIELD_SIZE
for i, sq in enumerate(_GF_SQUARE):
    _GF_SQRT[sq] = i


def gf_square(a: int) -> int:
    return _GF_SQUARE[a & 0xFF]


def gf_sqrt(a: int) -> int:
    # Squaring is the Frobenius automorphism, so every element has exactly one root.
    return _GF_SQRT[a & 0xFF]


def gf_dot(v1: Sequence[int], v2: Sequence[int]) -> int:
    """Sum of pairwise products. Vectors of unequal length are rejected."""
    a = as_elements(v1)
    b = as_elements(v2)
    if a.size != b.size:
        raise InvalidDimensionError(f"vector lengths differ: {a.size} != {b.size}")
    if a.size == 0:
        return 0
    return int(np.bitwise_xor.reduce(_MUL_TABLE[a, b]))


def as_elements(values: Iterable[int]) -> np.ndarray:
    """
    Normalise bytes / ints / arrays to a 1-D uint8 array of field elements.
    """
    if isinstance(values, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(values), dtype=np.uint8).copy()
    if isinstance(values, np.ndarray):
        return (values.astype(np.int64).reshape(-1) & 0xFF).astype(np.uint8)
    out: List[int] = []
    for v in values:
        if not isinstance(v, (int, np.integer)):
            raise TypeError(f"field elements must be ints, got {type(v).__name__}")
        out.append(int(v) & 0xFF)
    return np.asarray(out, dtype=np.uint8)


def _build_mul_table() -> np.ndarray:
    t = np.zeros((FIELD_SIZE, FIELD_SIZE), dtype=np.uint8)
    for a in range(1, FIELD_SIZE):
        for b in range(1, FIELD_SIZE):
            t[a, b] = _GF_EXP[(_GF_LOG[a] + _GF_LOG[b]) % MAX_VALUE]
    t.flags.writeable = False
    return t


_MUL_TABLE = _build_mul_table()


def gf_mul_table() -> np.ndarray:
    """Read-only 256x256 product table: gf_mul_table()[a, b] == gf_mul(a, b)."""
    return _MUL_TABLE
