"""
Cholesky factorization of symmetric positive-definite matrices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import SYMMETRY_TOL
from pydecomp.core.exceptions import NotPositiveDefiniteError
from pydecomp.core.validation import check_symmetric
from pydecomp.linalg._common import as_square


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of Cholesky factorization, A ~= L @ L'.

    Attributes:
        L: Lower triangular factor with positive diagonal (n x n)
    """
    L: NDArray[np.floating[Any]]

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """L @ L'."""
        return self.L @ self.L.T


def cholesky(A: ArrayLike) -> CholeskyResult:
    """
    Cholesky factorization.

    Symmetry is checked exactly (|A[i,j] - A[j,i]| <= 1e-10) before any
    arithmetic. L is then built row by row; each diagonal entry is the
    square root of A[j,j] minus the squared norm of the row so far, and
    must be strictly positive.

    Args:
        A: Symmetric positive-definite matrix (n x n)

    Returns:
        CholeskyResult with lower triangular L

    Raises:
        DimensionError: If A is not square
        ValidationError: If A is not symmetric
        NotPositiveDefiniteError: If a diagonal radicand is <= 0
    """
    X = as_square(A, 'A')
    check_symmetric(X, 'A', atol=SYMMETRY_TOL)

    n = X.shape[0]
    L = np.zeros_like(X)

    for i in range(n):
        for j in range(i):
            L[i, j] = (X[i, j] - L[i, :j] @ L[j, :j]) / L[j, j]

        radicand = X[i, i] - L[i, :i] @ L[i, :i]
        if radicand <= 0.0:
            raise NotPositiveDefiniteError(
                f"Matrix is not positive definite: diagonal {i} would be "
                f"sqrt({radicand:.6g})",
                matrix_name='A',
                column=i,
            )
        L[i, i] = np.sqrt(radicand)

    return CholeskyResult(L=to_storage(L))
