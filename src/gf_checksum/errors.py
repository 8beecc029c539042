"""
Exception hierarchy for field, matrix and checksum operations.

Every error derives from ChecksumError and also from the built-in exception
callers would otherwise expect (ValueError / IndexError), so existing
`except ValueError` handling keeps working.
"""

from __future__ import annotations

from typing import Optional


class ChecksumError(Exception):
    """Base class for all gf_checksum errors."""


class InvalidDimensionError(ChecksumError, ValueError):
    """Empty or ragged matrix, or shapes that cannot be combined."""


class IndexOutOfRangeError(ChecksumError, IndexError):
    """Row, column or slot index outside the valid range (negatives included)."""


class NonSquareOperationError(ChecksumError, ValueError):
    """Determinant, cofactor or inverse requested on a non-square matrix."""


class DegenerateRemovalError(ChecksumError, ValueError):
    """Row removal would leave a matrix with no rows."""


class SingularMatrixError(ChecksumError, ValueError):
    """The system has determinant 0 and cannot be inverted."""


class InsufficientDataError(ChecksumError, ValueError):
    """Data shorter than the scheme's minimum length."""

    def __init__(self, message: str, length: Optional[int] = None, minimum: Optional[int] = None):
        super().__init__(message)
        self.length = length
        self.minimum = minimum


class ExcessMissingValuesError(ChecksumError, ValueError):
    """More slots missing than the scheme's redundancy can recover."""

    def __init__(self, message: str, num_missing: Optional[int] = None, max_recoverable: Optional[int] = None):
        super().__init__(message)
        self.num_missing = num_missing
        self.max_recoverable = max_recoverable
