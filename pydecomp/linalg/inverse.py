"""
Matrix inverse through the partially pivoted LU factorization.

inv(A) solves A X = I: the identity is permuted with the pivot record and
each column goes through forward and back substitution.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.linalg._common import as_square
from pydecomp.linalg.lu import lu_partial
from pydecomp.linalg.solve import lu_solve_working


def inverse_working(A: NDArray[np.float64]) -> NDArray[np.float64]:
    """Inverse of a float64 working array; raises SingularMatrixError."""
    n = A.shape[0]
    L, U, perm, _ = lu_partial(A)
    return lu_solve_working(L, U, perm, np.eye(n, dtype=A.dtype))


def inv(A: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Inverse of a square matrix.

    Args:
        A: Square matrix (n x n)

    Returns:
        A^{-1} (n x n)

    Raises:
        DimensionError: If A is not square
        SingularMatrixError: If any selected pivot is below ZERO_TOL
    """
    X = as_square(A, 'A')
    return to_storage(inverse_working(X))
