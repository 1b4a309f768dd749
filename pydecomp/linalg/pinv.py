"""
Moore-Penrose pseudo-inverse and least squares.

A+ = V diag(s+) U' with s+_k = 1 / s_k above the cutoff and 0 below it.
Defined for any shape and any rank.
"""

from __future__ import annotations

from typing import Any
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import default_cutoff, to_storage
from pydecomp.core.compute.tolerances import ZERO_TOL
from pydecomp.core.exceptions import ValidationError
from pydecomp.linalg._common import as_matrix, as_rhs
from pydecomp.linalg.svd import svd_working


def pinv_working(
    A: NDArray[np.float64],
    rcond: float | None = None,
) -> tuple[NDArray[np.float64], bool]:
    """
    Pseudo-inverse of a float64 working array.

    Returns:
        (A+, converged) where converged reports the inner eigen iteration
    """
    U, s, V, converged, _ = svd_working(A)
    cutoff = default_cutoff(s, A.shape, rcond=rcond, floor=ZERO_TOL)

    s_inv = np.zeros_like(s)
    keep = s > cutoff
    s_inv[keep] = 1.0 / s[keep]

    # A+[i, j] = sum_k V[i, k] * s_inv[k] * U[j, k]
    return np.einsum('ik,k,jk->ij', V, s_inv, U), converged


def pinv(
    A: ArrayLike,
    *,
    rcond: float | None = None,
    warn: bool = True,
) -> NDArray[np.floating[Any]]:
    """
    Moore-Penrose pseudo-inverse.

    Args:
        A: Matrix (m x n), any shape, any rank
        rcond: Relative cutoff for small singular values. Singular values
            at or below max(ZERO_TOL, rcond * s_max) are treated as zero.
            Defaults to max(m, n) * eps(float32).
        warn: Emit a RuntimeWarning if the underlying SVD did not converge

    Returns:
        A+ (n x m)

    Raises:
        ValidationError: If A is not a finite numeric array or rcond < 0
        DimensionError: If A is not 2D or has an empty dimension
    """
    X = as_matrix(A, 'A')
    if rcond is not None and rcond < 0:
        raise ValidationError(f"rcond: must be >= 0, got {rcond}")

    result, converged = pinv_working(X, rcond)
    if not converged and warn:
        warnings.warn(
            "pinv: SVD eigen iteration did not converge; pseudo-inverse may be inaccurate",
            RuntimeWarning,
            stacklevel=2,
        )
    return to_storage(result)


def lstsq(
    A: ArrayLike,
    b: ArrayLike,
    *,
    rcond: float | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Minimum-norm least squares solution of A x ~= b via the pseudo-inverse.

    Args:
        A: Design matrix (m x n)
        b: Response, vector (m,) or matrix (m x k)
        rcond: Passed to the pseudo-inverse cutoff

    Returns:
        x with shape (n,) or (n x k)

    Raises:
        DimensionError: If b does not have m rows
    """
    X = as_matrix(A, 'A')
    B, is_vector = as_rhs(b, X.shape[0], 'b')
    if rcond is not None and rcond < 0:
        raise ValidationError(f"rcond: must be >= 0, got {rcond}")

    X_pinv, _ = pinv_working(X, rcond)
    solution = X_pinv @ B
    if is_vector:
        solution = solution[:, 0]
    return to_storage(solution)
