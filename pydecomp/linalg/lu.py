"""
LU factorization with an explicit permutation record.

A single primitive serves determinant, inverse and solve:

    'partial'  Gaussian elimination choosing the largest-magnitude pivot in
               each column. A[perm] = L @ U.
    'none'     Doolittle elimination without row exchanges. perm is the
               identity. Unstable for matrices that need row exchanges;
               intended for diagonally dominant or SPD input.

L is unit lower triangular, U upper triangular.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import ZERO_TOL
from pydecomp.core.exceptions import SingularMatrixError, ValidationError
from pydecomp.linalg._common import as_square


Pivoting = Literal['partial', 'none']


@dataclass(frozen=True)
class LUResult:
    """
    Result of LU factorization, A[perm] ~= L @ U.

    Attributes:
        L: Unit lower triangular factor (n x n)
        U: Upper triangular factor (n x n)
        perm: Row permutation applied to A (n,)
        sign: Parity of the permutation, +1 or -1
        pivoting: Strategy used, 'partial' or 'none'
    """
    L: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]]
    perm: NDArray[np.intp]
    sign: int
    pivoting: str

    @property
    def P(self) -> NDArray[np.floating[Any]]:
        """Permutation matrix with P @ A = L @ U."""
        n = len(self.perm)
        return np.eye(n, dtype=self.L.dtype)[self.perm]

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """P' @ L @ U, the matrix that was factored."""
        LU = self.L @ self.U
        A = np.empty_like(LU)
        A[self.perm] = LU
        return A


def _singular(k: int, pivot: float, pivoting: str) -> SingularMatrixError:
    return SingularMatrixError(
        f"Matrix is singular: pivot {k} has magnitude {abs(pivot):.3g} "
        f"(threshold {ZERO_TOL:g}, pivoting={pivoting!r})",
        matrix_name='A',
    )


def lu_partial(
    A: NDArray[np.float64],
    raise_on_singular: bool = True,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.intp], int]:
    """
    Gaussian elimination with partial pivoting on a float64 working array.

    With raise_on_singular=False a column whose largest candidate pivot is
    below ZERO_TOL is zeroed and skipped instead of raising, so U carries a
    zero on its diagonal. The determinant relies on this.

    Returns:
        (L, U, perm, sign)
    """
    n = A.shape[0]
    U = A.copy()
    L = np.eye(n, dtype=A.dtype)
    perm = np.arange(n)
    sign = 1

    for k in range(n):
        p = k + int(np.argmax(np.abs(U[k:, k])))
        pivot = U[p, k]

        if abs(pivot) < ZERO_TOL:
            if raise_on_singular:
                raise _singular(k, pivot, 'partial')
            # Numerically zero column: nothing to eliminate
            U[k:, k] = 0.0
            continue

        if p != k:
            U[[k, p], :] = U[[p, k], :]
            L[[k, p], :k] = L[[p, k], :k]
            perm[[k, p]] = perm[[p, k]]
            sign = -sign

        factors = U[k + 1:, k] / U[k, k]
        L[k + 1:, k] = factors
        U[k + 1:, k:] -= np.outer(factors, U[k, k:])
        U[k + 1:, k] = 0.0

    return L, U, perm, sign


def lu_doolittle(
    A: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Doolittle factorization without pivoting on a float64 working array.

    Row k of U, then column k of L. Raises when U[k, k] is below ZERO_TOL
    while column k of L still has entries to derive.

    Returns:
        (L, U)
    """
    n = A.shape[0]
    L = np.eye(n, dtype=A.dtype)
    U = np.zeros_like(A)

    for k in range(n):
        U[k, k:] = A[k, k:] - L[k, :k] @ U[:k, k:]
        if k + 1 < n:
            if abs(U[k, k]) < ZERO_TOL:
                raise _singular(k, U[k, k], 'none')
            L[k + 1:, k] = (A[k + 1:, k] - L[k + 1:, :k] @ U[:k, k]) / U[k, k]

    return L, U


def factor(
    A: NDArray[np.float64],
    pivoting: Pivoting = 'partial',
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.intp], int]:
    """Dispatch to the requested pivoting strategy on a working array."""
    if pivoting == 'partial':
        return lu_partial(A)
    if pivoting == 'none':
        L, U = lu_doolittle(A)
        return L, U, np.arange(A.shape[0]), 1
    raise ValidationError(
        f"Unknown pivoting: {pivoting!r}. Must be 'partial' or 'none'."
    )


def lu(A: ArrayLike, *, pivoting: Pivoting = 'partial') -> LUResult:
    """
    LU factorization of a square matrix.

    Args:
        A: Square matrix (n x n)
        pivoting: 'partial' (row exchanges, default) or 'none' (Doolittle)

    Returns:
        LUResult with A[perm] ~= L @ U and diag(L) == 1. Under the default
        partial pivoting L @ U reproduces the row-permuted matrix, not A:
        for [[3, 1], [5, 10]] perm is [1, 0]. Use result.reconstruct() to
        recover A, or pivoting='none' when A ~= L @ U is needed directly.

    Raises:
        DimensionError: If A is not square
        ValidationError: If pivoting is unknown
        SingularMatrixError: If a pivot falls below ZERO_TOL
    """
    X = as_square(A, 'A')
    L, U, perm, sign = factor(X, pivoting)

    return LUResult(
        L=to_storage(L),
        U=to_storage(U),
        perm=perm,
        sign=sign,
        pivoting=pivoting,
    )
