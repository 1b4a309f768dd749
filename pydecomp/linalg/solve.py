"""
Linear system solving through LU factorization.

A x = b is reduced to L y = P b (forward substitution) and U x = y
(back substitution). A matrix right-hand side is solved one column at a
time against a single factorization.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import ZERO_TOL
from pydecomp.core.exceptions import SingularMatrixError
from pydecomp.linalg._common import as_rhs, as_square
from pydecomp.linalg.lu import Pivoting, factor


def forward_substitution(
    L: NDArray[np.float64],
    b: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Solve L y = b for lower triangular L."""
    n = L.shape[0]
    y = np.zeros(n, dtype=L.dtype)
    for i in range(n):
        diag = L[i, i]
        if abs(diag) < ZERO_TOL:
            raise SingularMatrixError(
                f"Lower triangular factor is singular at row {i} "
                f"(|L[{i},{i}]| = {abs(diag):.3g})",
                matrix_name='L',
            )
        y[i] = (b[i] - L[i, :i] @ y[:i]) / diag
    return y


def back_substitution(
    U: NDArray[np.float64],
    y: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Solve U x = y for upper triangular U."""
    n = U.shape[0]
    x = np.zeros(n, dtype=U.dtype)
    for i in range(n - 1, -1, -1):
        diag = U[i, i]
        if abs(diag) < ZERO_TOL:
            raise SingularMatrixError(
                f"Upper triangular factor is singular at row {i} "
                f"(|U[{i},{i}]| = {abs(diag):.3g})",
                matrix_name='U',
            )
        x[i] = (y[i] - U[i, i + 1:] @ x[i + 1:]) / diag
    return x


def lu_solve_working(
    L: NDArray[np.float64],
    U: NDArray[np.float64],
    perm: NDArray[np.intp],
    B: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Solve with precomputed factors, one column of B at a time."""
    X = np.zeros((U.shape[1], B.shape[1]), dtype=U.dtype)
    Bp = B[perm]
    for col in range(B.shape[1]):
        y = forward_substitution(L, Bp[:, col])
        X[:, col] = back_substitution(U, y)
    return X


def solve(
    A: ArrayLike,
    b: ArrayLike,
    *,
    pivoting: Pivoting = 'partial',
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b (or A X = B) for square A.

    Args:
        A: Square coefficient matrix (n x n)
        b: Right-hand side, vector (n,) or matrix (n x k)
        pivoting: LU strategy, 'partial' (default) or 'none'

    Returns:
        Solution with the same shape as b

    Raises:
        DimensionError: If A is not square or b does not have n rows
        SingularMatrixError: If A is numerically singular
    """
    X = as_square(A, 'A')
    B, is_vector = as_rhs(b, X.shape[0], 'b')

    L, U, perm, _ = factor(X, pivoting)
    solution = lu_solve_working(L, U, perm, B)

    if is_vector:
        solution = solution[:, 0]
    return to_storage(solution)
