"""
Matrix: dense single-precision matrix value type.

Wraps a float32 array of fixed shape (rows x cols, both > 0). The backing
array is read-only from the outside; elements change only through the
explicit set() mutator. transposed() always returns a new Matrix, so two
Matrix objects never share storage.

Every decomposition is available both as a free function in
pydecomp.linalg and as a method here:

    m = Matrix([[4, 2], [2, 3]])
    m.cholesky().L
    m.det()         # 8.0
"""

from __future__ import annotations

from typing import Any, Iterable
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import STORAGE_DTYPE
from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.core.validation import (
    check_2d,
    check_array,
    check_finite,
    check_nonempty,
)
from pydecomp.linalg.cholesky import CholeskyResult, cholesky
from pydecomp.linalg.eigen import EigenResult, eigen
from pydecomp.linalg.inverse import inv
from pydecomp.linalg.lu import LUResult, lu
from pydecomp.linalg.pinv import pinv
from pydecomp.linalg.qr import QRResult, qr
from pydecomp.linalg.scalars import cond, det, frobenius_norm, rank, trace
from pydecomp.linalg.solve import solve
from pydecomp.linalg.svd import SVDResult, svd


class Matrix:
    """
    Dense, row-major, single-precision matrix.

    Construction:
        Matrix([[1, 2], [3, 4]])
        Matrix.from_array(ndarray)
        Matrix.zeros(3, 2), Matrix.eye(3), Matrix.diag([1, 2, 3])
    """

    __slots__ = ('_data',)

    # Make ndarray @ Matrix defer to __rmatmul__
    __array_ufunc__ = None

    def __init__(self, data: ArrayLike):
        if isinstance(data, Matrix):
            arr = data._data
        else:
            arr = check_array(data, 'data')
        check_2d(arr, 'data')
        check_nonempty(arr, 'data')
        check_finite(arr, 'data')

        self._data = np.array(arr, dtype=STORAGE_DTYPE, copy=True)
        self._data.setflags(write=False)

    # --- Construction ---

    @classmethod
    def from_array(cls, data: ArrayLike) -> Matrix:
        """Build a Matrix from any 2D array-like (always copies)."""
        return cls(data)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> Matrix:
        """
        Build a Matrix from row sequences, which must all have equal length.
        """
        rows = [list(r) for r in rows]
        lengths = {len(r) for r in rows}
        if len(lengths) > 1:
            raise DimensionError(
                f"rows: all rows must have equal length, got lengths {sorted(lengths)}"
            )
        return cls(rows)

    @classmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        return cls(np.zeros((rows, cols), dtype=STORAGE_DTYPE))

    @classmethod
    def eye(cls, n: int) -> Matrix:
        return cls(np.eye(n, dtype=STORAGE_DTYPE))

    @classmethod
    def diag(cls, values: ArrayLike) -> Matrix:
        arr = check_array(values, 'values')
        if arr.ndim != 1:
            raise DimensionError(
                f"values: expected 1D array, got {arr.ndim}D with shape {arr.shape}"
            )
        return cls(np.diag(arr))

    # --- Shape and access ---

    @property
    def data(self) -> NDArray[np.float32]:
        """Read-only view of the backing array (rows x cols)."""
        return self._data

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def __getitem__(self, index):
        value = self._data[index]
        if isinstance(value, np.ndarray):
            return value.copy()
        return float(value)

    def set(self, row: int, col: int, value: float) -> None:
        """Set a single element in place."""
        if not (-self.rows <= row < self.rows and -self.cols <= col < self.cols):
            raise IndexError(
                f"index ({row}, {col}) out of range for matrix of shape {self.shape}"
            )
        value = float(value)
        if not np.isfinite(value):
            raise ValidationError(f"value: must be finite, got {value}")
        self._data.setflags(write=True)
        try:
            self._data[row, col] = value
        finally:
            self._data.setflags(write=False)

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        self.set(row, col, value)

    def row(self, i: int) -> NDArray[np.float32]:
        """Copy of row i as a vector."""
        return self._data[i, :].copy()

    def col(self, j: int) -> NDArray[np.float32]:
        """Copy of column j as a vector."""
        return self._data[:, j].copy()

    def transposed(self) -> Matrix:
        """New Matrix holding the transpose."""
        return Matrix(self._data.T)

    @property
    def T(self) -> Matrix:
        return self.transposed()

    def copy(self) -> Matrix:
        return Matrix(self._data)

    def to_numpy(self) -> NDArray[np.float32]:
        """Writable float32 copy of the data."""
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data.copy()
        return self._data.astype(dtype)

    # --- Arithmetic needed by the engine ---

    def __matmul__(self, other: Any):
        if isinstance(other, Matrix):
            other = other._data
        other = np.asarray(other)
        if other.ndim not in (1, 2):
            return NotImplemented
        if other.shape[0] != self.cols:
            raise DimensionError(
                f"Cannot multiply {self.shape} by {other.shape}: "
                f"inner dimensions {self.cols} and {other.shape[0]} differ"
            )
        product = self._data @ other.astype(STORAGE_DTYPE)
        if product.ndim == 1:
            return product
        return Matrix(product)

    def __rmatmul__(self, other: Any):
        other = np.asarray(other, dtype=STORAGE_DTYPE)
        if other.ndim != 2:
            return NotImplemented
        return Matrix(other) @ self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def allclose(self, other: ArrayLike, rtol: float = 1e-5, atol: float = 1e-6) -> bool:
        """Elementwise comparison within tolerance."""
        other = np.asarray(other)
        return other.shape == self.shape and bool(
            np.allclose(self._data, other, rtol=rtol, atol=atol)
        )

    def __repr__(self) -> str:
        body = np.array2string(self._data, precision=4, suppress_small=True)
        return f"Matrix(rows={self.rows}, cols={self.cols},\n{body})"

    # --- Decompositions ---

    def qr(self) -> QRResult:
        return qr(self._data)

    def eigen(self, **kwargs) -> EigenResult:
        return eigen(self._data, **kwargs)

    def svd(self, **kwargs) -> SVDResult:
        return svd(self._data, **kwargs)

    def lu(self, **kwargs) -> LUResult:
        return lu(self._data, **kwargs)

    def cholesky(self) -> CholeskyResult:
        return cholesky(self._data)

    def inv(self) -> Matrix:
        return Matrix(inv(self._data))

    def pinv(self, **kwargs) -> Matrix:
        return Matrix(pinv(self._data, **kwargs))

    def solve(self, b: ArrayLike, **kwargs):
        """Solve self @ x = b; returns a vector for vector b, else a Matrix."""
        if isinstance(b, Matrix):
            return Matrix(solve(self._data, b._data, **kwargs))
        return solve(self._data, b, **kwargs)

    # --- Scalars ---

    def det(self, **kwargs) -> float:
        return det(self._data, **kwargs)

    def trace(self) -> float:
        return trace(self._data)

    def rank(self, **kwargs) -> int:
        return rank(self._data, **kwargs)

    def cond(self, **kwargs) -> float:
        return cond(self._data, **kwargs)

    def frobenius_norm(self) -> float:
        return frobenius_norm(self._data)
