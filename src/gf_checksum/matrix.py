from __future__ import annotations

import threading
from typing import Any, Callable, Iterable

import numpy as np

from gf_checksum.errors import (
    DegenerateRemovalError,
    IndexOutOfRangeError,
    InvalidDimensionError,
    NonSquareOperationError,
    SingularMatrixError,
)
from gf_checksum.field import as_elements, gf_add, gf_div, gf_mul, gf_mul_table


def _as_grid(data: Any) -> np.ndarray:
    """
    Validate and copy a nested sequence / 2-D array into a read-only uint8 grid.
    """
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise InvalidDimensionError(f"matrix data must be 2-D, got {data.ndim}-D")
        rows = [data[r] for r in range(data.shape[0])]
    else:
        if data is None:
            raise TypeError("matrix data must not be None")
        rows = list(data)

    if len(rows) == 0:
        raise InvalidDimensionError("both dimensions of a matrix must be non-zero")

    elems = [as_elements(r) for r in rows]
    cols = elems[0].size
    if cols == 0:
        raise InvalidDimensionError("both dimensions of a matrix must be non-zero")
    for i, r in enumerate(elems):
        if r.size != cols:
            raise InvalidDimensionError(
                f"all rows must be the same length (row 0 has {cols}, row {i} has {r.size})"
            )

    grid = np.stack(elems).astype(np.uint8)
    grid.flags.writeable = False
    return grid


class Matrix:
    """
    Immutable rows x cols matrix over GF(2^8).

    Every algebraic operation returns a new Matrix. Derived values
    (determinant, transpose, cofactor, inverse) are memoised per instance.
    """

    __slots__ = ("_grid", "_memo", "_lock")

    def __init__(self, data: Any):
        self._grid = _as_grid(data)
        self._memo: dict = {}
        self._lock = threading.RLock()

    @classmethod
    def _wrap(cls, grid: np.ndarray) -> "Matrix":
        # Trusted internal constructor: grid is already a fresh uint8 2-D array.
        m = cls.__new__(cls)
        grid.flags.writeable = False
        m._grid = grid
        m._memo = {}
        m._lock = threading.RLock()
        return m

    # ----------------------------
    # Constructors
    # ----------------------------

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        if size < 1:
            raise InvalidDimensionError("identity size must be >= 1")
        return cls._wrap(np.eye(size, dtype=np.uint8))

    @classmethod
    def build(cls, rows: int, cols: int, generator: Callable[[int, int], int]) -> "Matrix":
        """Element (r, c) is generator(r, c)."""
        if rows < 1 or cols < 1:
            raise InvalidDimensionError(f"cannot build a {rows}x{cols} matrix")
        if not callable(generator):
            raise TypeError("generator must be callable")
        grid = np.empty((rows, cols), dtype=np.uint8)
        for r in range(rows):
            for c in range(cols):
                grid[r, c] = int(generator(r, c)) & 0xFF
        return cls._wrap(grid)

    @classmethod
    def column_vector(cls, values: Iterable[int]) -> "Matrix":
        v = as_elements(values)
        if v.size == 0:
            raise InvalidDimensionError("column vector must not be empty")
        return cls._wrap(v.reshape(-1, 1).copy())

    @classmethod
    def row_vector(cls, values: Iterable[int]) -> "Matrix":
        v = as_elements(values)
        if v.size == 0:
            raise InvalidDimensionError("row vector must not be empty")
        return cls._wrap(v.reshape(1, -1).copy())

    # ----------------------------
    # Accessors
    # ----------------------------

    @property
    def num_rows(self) -> int:
        return int(self._grid.shape[0])

    @property
    def num_cols(self) -> int:
        return int(self._grid.shape[1])

    @property
    def is_square(self) -> bool:
        return self.num_rows == self.num_cols

    def get_data(self) -> np.ndarray:
        return self._grid.copy()

    def get_row(self, row: int) -> np.ndarray:
        self._check_row(row)
        return self._grid[row].copy()

    def get_col(self, col: int) -> np.ndarray:
        self._check_col(col)
        return self._grid[:, col].copy()

    def _check_row(self, row: int) -> None:
        if not isinstance(row, (int, np.integer)):
            raise TypeError("row index must be int")
        if row < 0 or row >= self.num_rows:
            raise IndexOutOfRangeError(
                f"row index {row} out of bounds for matrix with {self.num_rows} rows"
            )

    def _check_col(self, col: int) -> None:
        if not isinstance(col, (int, np.integer)):
            raise TypeError("column index must be int")
        if col < 0 or col >= self.num_cols:
            raise IndexOutOfRangeError(
                f"column index {col} out of bounds for matrix with {self.num_cols} cols"
            )

    def _require_square(self, op: str) -> None:
        if not self.is_square:
            raise NonSquareOperationError(
                f"{op} requires a square matrix, got {self.num_rows}x{self.num_cols}"
            )

    def _memoised(self, key: str, compute: Callable[[], Any]) -> Any:
        with self._lock:
            if key not in self._memo:
                self._memo[key] = compute()
            return self._memo[key]

    # ----------------------------
    # Algebra
    # ----------------------------

    def minor(self, row: int, col: int) -> "Matrix":
        """This matrix with `row` and `col` deleted."""
        self._check_row(row)
        self._check_col(col)
        if self.num_rows == 1 or self.num_cols == 1:
            raise InvalidDimensionError("minor of a single-row or single-column matrix is empty")
        g = np.delete(np.delete(self._grid, row, axis=0), col, axis=1)
        return Matrix._wrap(g)

    def determinant(self) -> int:
        self._require_square("determinant")
        return self._memoised("determinant", self._compute_determinant)

    def _compute_determinant(self) -> int:
        g = self._grid
        n = self.num_rows
        if n == 1:
            return int(g[0, 0])
        if n == 2:
            return gf_add(gf_mul(int(g[0, 0]), int(g[1, 1])), gf_mul(int(g[0, 1]), int(g[1, 0])))

        # Laplace expansion; subtraction is addition here, so no signs. Expand
        # along the sparsest line (first row on ties) and skip zero entries.
        row_nz = np.count_nonzero(g, axis=1)
        col_nz = np.count_nonzero(g, axis=0)
        r = int(np.argmin(row_nz))
        c = int(np.argmin(col_nz))
        if row_nz[r] == 0 or col_nz[c] == 0:
            return 0

        total = 0
        if row_nz[r] <= col_nz[c]:
            for j in np.flatnonzero(g[r]):
                total ^= gf_mul(int(g[r, j]), self.minor(r, int(j)).determinant())
        else:
            for i in np.flatnonzero(g[:, c]):
                total ^= gf_mul(int(g[i, c]), self.minor(int(i), c).determinant())
        return total

    def transpose(self) -> "Matrix":
        return self._memoised("transpose", lambda: Matrix._wrap(self._grid.T.copy()))

    def cofactor(self) -> "Matrix":
        """Entry (i, j) is the determinant of minor(i, j)."""
        self._require_square("cofactor")
        return self._memoised("cofactor", self._compute_cofactor)

    def _compute_cofactor(self) -> "Matrix":
        n = self.num_rows
        if n == 1:
            # The empty minor has determinant 1.
            return Matrix._wrap(np.ones((1, 1), dtype=np.uint8))
        out = np.empty((n, n), dtype=np.uint8)
        for i in range(n):
            for j in range(n):
                out[i, j] = self.minor(i, j).determinant()
        return Matrix._wrap(out)

    def times(self, other: Any) -> "Matrix":
        """Scalar multiple when `other` is an int, matrix product when it is a Matrix."""
        if isinstance(other, Matrix):
            return self._times_matrix(other)
        if isinstance(other, (int, np.integer)) and not isinstance(other, bool):
            return self._times_scalar(int(other))
        raise TypeError(f"cannot multiply a Matrix by {type(other).__name__}")

    def _times_scalar(self, constant: int) -> "Matrix":
        table = gf_mul_table()
        return Matrix._wrap(table[self._grid, constant & 0xFF].copy())

    def _times_matrix(self, other: "Matrix") -> "Matrix":
        if self.num_cols != other.num_rows:
            raise InvalidDimensionError(
                f"cannot multiply {self.num_rows}x{self.num_cols} by {other.num_rows}x{other.num_cols}"
            )
        table = gf_mul_table()
        # products[i, k, j] = a[i, k] * b[k, j]; field-sum over k.
        products = table[self._grid[:, :, None], other._grid[None, :, :]]
        out = np.bitwise_xor.reduce(products, axis=1).astype(np.uint8)
        return Matrix._wrap(out)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._times_matrix(other)

    def divide_by(self, constant: int) -> "Matrix":
        """Element-wise field division. Dividing by 0 yields a zero matrix."""
        c = int(constant) & 0xFF
        if c == 0:
            return Matrix._wrap(np.zeros_like(self._grid))
        return self._times_scalar(gf_div(1, c))

    def inverse(self) -> "Matrix":
        """
        Adjugate inverse: transpose().cofactor() / determinant().

        Raises SingularMatrixError when the determinant is 0.
        """
        self._require_square("inverse")
        return self._memoised("inverse", self._compute_inverse)

    def _compute_inverse(self) -> "Matrix":
        det = self.determinant()
        if det == 0:
            raise SingularMatrixError(f"{self.num_rows}x{self.num_cols} matrix is singular")
        return self.transpose().cofactor().divide_by(det)

    def solve(self, product: "Matrix") -> "Matrix":
        """X such that self.times(X) == product."""
        if not isinstance(product, Matrix):
            raise TypeError("product must be a Matrix")
        return self.inverse().times(product)

    # ----------------------------
    # Row surgery
    # ----------------------------

    def append_rows(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            raise TypeError("append_rows expects a Matrix")
        if self.num_cols != other.num_cols:
            raise InvalidDimensionError(
                f"column counts differ: {self.num_cols} != {other.num_cols}"
            )
        return Matrix._wrap(np.concatenate([self._grid, other._grid], axis=0))

    def without_rows(self, indices: Iterable[int]) -> "Matrix":
        """
        Remaining rows in their original relative order.
        """
        if indices is None:
            raise TypeError("indices must not be None")
        drop = set()
        for i in indices:
            if i is None:
                raise TypeError("row indices must not be None")
            self._check_row(i)
            drop.add(int(i))
        if len(drop) == self.num_rows:
            raise DegenerateRemovalError("cannot remove every row of a matrix")
        keep = [r for r in range(self.num_rows) if r not in drop]
        return Matrix._wrap(self._grid[keep].copy())

    # ----------------------------
    # Value semantics
    # ----------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._grid.shape == other._grid.shape and bool(np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash((self._grid.shape, self._grid.tobytes()))

    def __repr__(self) -> str:
        return f"Matrix({self._grid.tolist()!r})"

    def __str__(self) -> str:
        return "\n".join(str(row) for row in self._grid.tolist())

