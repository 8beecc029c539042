from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from gf_checksum.errors import ExcessMissingValuesError, InsufficientDataError, InvalidDimensionError
from gf_checksum.field import as_elements
from gf_checksum.slots import Slot, known_values, missing_indices


class ChecksumScheme(ABC):
    """
    Systematic erasure code over GF(2^8): encode() appends `redundancy`
    symbols to the data, decode() recovers the data from any received
    sequence with at most `redundancy` slots missing.

    Uniform scheme API:
      encode(data) -> bytes            (len(data) + redundancy)
      decode(slots) -> bytes           (len(slots) - redundancy)
    """

    redundancy: int = 0
    min_data_length: int = 1
    max_data_length: Optional[int] = None

    def __init__(self, cfg: Any = None):
        self.cfg = cfg

    def encode(self, data: Sequence[int]) -> bytes:
        d = as_elements(data)
        self._check_data_length(d.size)
        parity = self._parity(d.tolist())
        return bytes(d.tolist()) + bytes(parity)

    def decode(self, slots: Sequence[Slot]) -> bytes:
        slots = list(slots)
        k = self.redundancy
        n = len(slots) - k
        if n < self.min_data_length:
            raise InsufficientDataError(
                f"{len(slots)} slots is too few to hold {self.min_data_length} data and {k} checksum values",
                length=max(n, 0),
                minimum=self.min_data_length,
            )
        self._check_data_length(n)

        missing = missing_indices(slots)
        if len(missing) > k:
            raise ExcessMissingValuesError(
                f"too many missing values ({len(missing)}); can only recover {k}",
                num_missing=len(missing),
                max_recoverable=k,
            )

        data = known_values(slots, n)
        if not any(i < n for i in missing):
            return bytes(data)
        return bytes(self._recover(slots, data, missing))

    def _check_data_length(self, n: int) -> None:
        if n < self.min_data_length:
            raise InsufficientDataError(
                f"data must have at least {self.min_data_length} elements, got {n}",
                length=n,
                minimum=self.min_data_length,
            )
        if self.max_data_length is not None and n > self.max_data_length:
            raise InvalidDimensionError(
                f"data must have at most {self.max_data_length} elements, got {n}"
            )

    @abstractmethod
    def _parity(self, data: List[int]) -> List[int]:
        """Redundancy symbols for validated data."""

    @abstractmethod
    def _recover(self, slots: List[Slot], data: List[int], missing: List[int]) -> List[int]:
        """
        Fill in missing data values. `data` holds the data prefix with missing
        entries read as 0; `missing` is ascending and includes at least one
        data index.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(redundancy={self.redundancy})"
