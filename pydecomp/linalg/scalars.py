"""
Scalar quantities derived from the decompositions.

    det         LU diagonal product (or explicit Laplace expansion)
    trace       diagonal sum
    rank        singular value count (or explicit Gaussian elimination)
    cond        ||A||_F * ||A^-1||_F by default, s_max / s_min for norm=2
    frobenius_norm
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import EPSILON_32, default_cutoff
from pydecomp.core.compute.tolerances import COND_SENTINEL, ZERO_TOL
from pydecomp.core.exceptions import SingularMatrixError, ValidationError
from pydecomp.linalg._common import as_matrix, as_square
from pydecomp.linalg.inverse import inverse_working
from pydecomp.linalg.lu import lu_partial
from pydecomp.linalg.svd import svd_working


DetMethod = Literal['lu', 'cofactor']
RankMethod = Literal['svd', 'gaussian']


def frobenius_norm(A: ArrayLike) -> float:
    """Square root of the sum of squared entries."""
    X = as_matrix(A, 'A')
    return float(np.sqrt(np.sum(X * X)))


def trace(A: ArrayLike) -> float:
    """
    Sum of the diagonal of a square matrix.

    Raises:
        DimensionError: If A is not square
    """
    X = as_square(A, 'A')
    return float(np.sum(np.diag(X)))


# ---------------------------------------------------------------------------
# Determinant
# ---------------------------------------------------------------------------


def _det_cofactor(X: NDArray[np.float64]) -> float:
    """Laplace expansion along the first row. O(n!)."""
    n = X.shape[0]
    if n == 1:
        return float(X[0, 0])
    if n == 2:
        return float(X[0, 0] * X[1, 1] - X[0, 1] * X[1, 0])

    total = 0.0
    for j in range(n):
        if X[0, j] == 0.0:
            continue
        minor = np.delete(X[1:], j, axis=1)
        sign = 1.0 if j % 2 == 0 else -1.0
        total += sign * X[0, j] * _det_cofactor(minor)
    return total


def _det_lu(X: NDArray[np.float64]) -> float:
    _, U, _, sign = lu_partial(X, raise_on_singular=False)
    return float(sign * np.prod(np.diag(U)))


def det(A: ArrayLike, *, method: DetMethod = 'lu') -> float:
    """
    Determinant of a square matrix.

    1x1 and 2x2 matrices use the closed form. Larger matrices use the
    product of the pivots of the partially pivoted LU factorization, signed
    by the permutation parity; a numerically zero pivot column gives 0.
    method='cofactor' selects recursive Laplace expansion instead, which is
    exact in structure but O(n!) and meant for small matrices and
    cross-checks.

    Args:
        A: Square matrix (n x n)
        method: 'lu' (default) or 'cofactor'

    Returns:
        det(A) as a float

    Raises:
        DimensionError: If A is not square
        ValidationError: If method is unknown
    """
    X = as_square(A, 'A')
    if method not in ('lu', 'cofactor'):
        raise ValidationError(
            f"Unknown determinant method: {method!r}. Must be 'lu' or 'cofactor'."
        )

    n = X.shape[0]
    if n <= 2 or method == 'cofactor':
        return _det_cofactor(X)
    return _det_lu(X)


# ---------------------------------------------------------------------------
# Rank
# ---------------------------------------------------------------------------


def _rank_svd(X: NDArray[np.float64], tol: float | None) -> int:
    _, s, _, _, _ = svd_working(X)
    cutoff = default_cutoff(s, X.shape, floor=ZERO_TOL) if tol is None else tol
    return int(np.sum(s > cutoff))


def _rank_gaussian(X: NDArray[np.float64], tol: float | None) -> int:
    """Row echelon form with partial pivoting; counts accepted pivots."""
    if tol is None:
        tol = max(ZERO_TOL, max(X.shape) * EPSILON_32 * float(np.max(np.abs(X))))

    M = X.copy()
    rows, cols = M.shape
    rank = 0
    for col in range(cols):
        if rank == rows:
            break
        p = rank + int(np.argmax(np.abs(M[rank:, col])))
        if abs(M[p, col]) <= tol:
            continue
        if p != rank:
            M[[rank, p], :] = M[[p, rank], :]
        factors = M[rank + 1:, col] / M[rank, col]
        M[rank + 1:, col:] -= np.outer(factors, M[rank, col:])
        rank += 1
    return rank


def rank(
    A: ArrayLike,
    *,
    method: RankMethod = 'svd',
    tol: float | None = None,
) -> int:
    """
    Numerical rank.

    Args:
        A: Matrix (m x n), any shape
        method: 'svd' counts singular values above the cutoff (default);
            'gaussian' counts non-negligible pivots of row reduction with
            partial pivoting. The two can differ on borderline input.
        tol: Absolute threshold. Defaults to
            max(ZERO_TOL, max(m, n) * eps(float32) * scale) where scale is
            s_max for 'svd' and max|A| for 'gaussian'. Pass tol=ZERO_TOL
            for the fixed absolute 1e-10 threshold, which ignores scale.

    Returns:
        Rank as an int in [0, min(m, n)]

    Raises:
        ValidationError: If method is unknown or tol is negative
    """
    X = as_matrix(A, 'A')
    if tol is not None and tol < 0:
        raise ValidationError(f"tol: must be >= 0, got {tol}")
    if method == 'svd':
        return _rank_svd(X, tol)
    if method == 'gaussian':
        return _rank_gaussian(X, tol)
    raise ValidationError(
        f"Unknown rank method: {method!r}. Must be 'svd' or 'gaussian'."
    )


# ---------------------------------------------------------------------------
# Condition number
# ---------------------------------------------------------------------------


def cond(A: ArrayLike, *, norm: Literal['fro', 2] = 'fro') -> float:
    """
    Condition number of a square matrix.

    norm='fro' (default) returns ||A||_F * ||A^-1||_F. This is an upper
    bound on the 2-norm condition number, larger by up to a factor of n.
    norm=2 returns s_max / s_min from the SVD.

    A singular matrix returns COND_SENTINEL (the largest float32) rather
    than raising.

    Raises:
        DimensionError: If A is not square
        ValidationError: If norm is unknown
    """
    X = as_square(A, 'A')

    if norm == 'fro':
        try:
            X_inv = inverse_working(X)
        except SingularMatrixError:
            return COND_SENTINEL
        return float(np.sqrt(np.sum(X * X)) * np.sqrt(np.sum(X_inv * X_inv)))

    if norm == 2:
        _, s, _, _, _ = svd_working(X)
        cutoff = default_cutoff(s, X.shape, floor=ZERO_TOL)
        if s[-1] <= cutoff:
            return COND_SENTINEL
        return float(s[0] / s[-1])

    raise ValidationError(f"Unknown norm: {norm!r}. Must be 'fro' or 2.")
