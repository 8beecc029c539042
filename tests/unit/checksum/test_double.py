import pytest

from gf_checksum.checksum.modules.double import Config, DoubleScheme, coefficient_tables, q_checksum
from gf_checksum.errors import (
    ExcessMissingValuesError,
    InsufficientDataError,
    InvalidDimensionError,
    SingularMatrixError,
)
from gf_checksum.field import gf_add, gf_mul, gf_pow
from gf_checksum.slots import MISSING, Present, erase

from tests.conftest import erasure_patterns, random_data, to_unsigned

DATA = to_unsigned([45, -123, 10])


def test_encode_empty():
    with pytest.raises(InsufficientDataError):
        DoubleScheme().encode(b"")


def test_encode_too_small():
    with pytest.raises(InsufficientDataError):
        DoubleScheme().encode(b"\x00")


def test_encode_p_and_q():
    enc = DoubleScheme().encode(DATA)
    assert enc[:3] == DATA
    assert enc[3] == gf_add(*DATA)
    assert enc[4] == gf_add(*(gf_mul(gf_pow(2, i), v) for i, v in enumerate(DATA)))


def test_q_checksum_is_horner_fold():
    assert q_checksum([]) == 0
    assert q_checksum([1, 24, 54]) == gf_add(1, gf_mul(2, 24), gf_mul(4, 54))


@pytest.mark.parametrize("n_slots", [0, 1, 2, 3])
def test_decode_too_small(n_slots):
    with pytest.raises(InsufficientDataError):
        DoubleScheme().decode([MISSING] * n_slots)


def test_decode_too_many_missing():
    with pytest.raises(ExcessMissingValuesError):
        DoubleScheme().decode([Present(45), MISSING, MISSING, MISSING])


@pytest.mark.parametrize(
    "positions",
    [
        (),
        (0, 1),
        (0, 3),
        (0, 4),
        (3, 4),
        (0,),
        (3,),
        (4,),
        (1, 2),
        (1, 3),
        (2, 4),
    ],
)
def test_decode_reference_cases(positions):
    scheme = DoubleScheme()
    enc = scheme.encode(DATA)
    assert scheme.decode(erase(enc, positions)) == DATA


@pytest.mark.parametrize("length", [2, 3, 8, 50])
def test_every_pair_of_erasures_recovers(length):
    scheme = DoubleScheme()
    data = random_data(length, seed=0xD0 + length)
    enc = scheme.encode(data)
    for positions in erasure_patterns(len(enc), 2):
        assert scheme.decode(erase(enc, positions)) == data, f"positions={positions}"


def test_coefficient_tables():
    pow2, a, b = coefficient_tables()
    assert pow2[0] == 1
    assert [int(v) for v in pow2[:9]] == [1, 2, 4, 8, 16, 32, 64, 128, 27]
    # 2 has multiplicative order 51 in this field.
    assert pow2[51] == 1
    assert coefficient_tables() is coefficient_tables()
    assert a.shape == b.shape == (256, 256)


def test_data_slots_51_apart_are_degenerate():
    scheme = DoubleScheme()
    data = random_data(60, seed=51)
    enc = scheme.encode(data)
    with pytest.raises(SingularMatrixError):
        scheme.decode(erase(enc, [3, 54]))
    # Any other pair still works.
    assert scheme.decode(erase(enc, [3, 53])) == data


def test_data_too_long():
    with pytest.raises(InvalidDimensionError):
        DoubleScheme().encode(bytes(257))


def test_config_default():
    assert DoubleScheme(Config()).redundancy == Config().redundancy == 2
