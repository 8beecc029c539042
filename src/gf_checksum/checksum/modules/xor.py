from __future__ import annotations

from dataclasses import dataclass
from typing import List

from gf_checksum.checksum.scheme import ChecksumScheme
from gf_checksum.field import gf_add
from gf_checksum.slots import Slot


@dataclass(frozen=True)
class Config:
    """
    Single parity (k=1): one XOR checksum over all data bytes.
    Recovers any one missing slot.
    """
    redundancy: int = 1


class XorScheme(ChecksumScheme):
    redundancy = 1
    min_data_length = 1

    def _parity(self, data: List[int]) -> List[int]:
        return [gf_add(*data)]

    def _recover(self, slots: List[Slot], data: List[int], missing: List[int]) -> List[int]:
        x = missing[0]
        # data[x] reads as 0, so the sum over `data` is the sum over the known values.
        data[x] = gf_add(slots[-1].value, *data)
        return data


Scheme = XorScheme
