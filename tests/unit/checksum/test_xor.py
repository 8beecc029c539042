import pytest

from gf_checksum.checksum.modules.xor import Config, XorScheme
from gf_checksum.errors import ExcessMissingValuesError, InsufficientDataError
from gf_checksum.slots import MISSING, Present, erase

from tests.conftest import erasure_patterns, random_data, to_unsigned

DATA = to_unsigned([45, -123, 10])


def test_with_checksums():
    expected = DATA + bytes([(45 ^ -123 ^ 10) & 0xFF])
    assert XorScheme().encode([45, -123, 10]) == expected


def test_encode_empty():
    with pytest.raises(InsufficientDataError):
        XorScheme().encode(b"")


def test_decode_empty():
    with pytest.raises(InsufficientDataError):
        XorScheme().decode([])


def test_decode_too_small():
    with pytest.raises(InsufficientDataError):
        XorScheme().decode([MISSING])


def test_decode_too_many_missing():
    with pytest.raises(ExcessMissingValuesError) as exc:
        XorScheme().decode([Present(45), MISSING, MISSING])
    assert exc.value.num_missing == 2
    assert exc.value.max_recoverable == 1


def test_decode_missing_data_value():
    slots = [Present(45), MISSING, Present(10), Present(45 ^ -123 ^ 10)]
    assert XorScheme().decode(slots) == DATA


def test_decode_missing_checksum_value():
    slots = [Present(45), Present(-123), Present(10), MISSING]
    assert XorScheme().decode(slots) == DATA


def test_decode_nothing_missing():
    scheme = XorScheme()
    assert scheme.decode(erase(scheme.encode(DATA), [])) == DATA


@pytest.mark.parametrize("length", [1, 2, 7, 64])
def test_every_single_erasure_recovers(length):
    scheme = XorScheme(Config())
    data = random_data(length, seed=length)
    enc = scheme.encode(data)
    for positions in erasure_patterns(len(enc), 1):
        assert scheme.decode(erase(enc, positions)) == data, f"positions={positions}"


def test_error_counts_are_optional():
    exc = ExcessMissingValuesError("too many missing")
    assert exc.num_missing is None and exc.max_recoverable is None
    short = InsufficientDataError("too short", length=0, minimum=1)
    assert (short.length, short.minimum) == (0, 1)
    assert isinstance(short, ValueError)
