"""
Singular value decomposition from the Gram matrix.

A'A is symmetric positive semi-definite, so its eigendecomposition by QR
iteration yields V and the squared singular values. U is recovered column
by column as A v_i / sigma_i; columns for singular values at or below
ZERO_TOL stay zero.

Cost is dominated by the O(n^3) eigen iteration on the n x n Gram matrix.
Squaring A also squares its condition number, so singular values below
about sqrt(eps) * sigma_max carry little information.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import EIGEN_MAX_ITER, EIGEN_TOL, ZERO_TOL
from pydecomp.linalg._common import as_matrix
from pydecomp.linalg.eigen import qr_iteration


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition, A ~= U @ diag(s) @ Vt.

    Attributes:
        U: Left singular vectors (m x k), k = min(m, n)
        singular_values: Non-negative, sorted descending (k,)
        Vt: Right singular vectors as rows (k x n)
        converged: Whether the Gram matrix eigen iteration converged
        iterations: QR iterations spent on the Gram matrix
    """
    U: NDArray[np.floating[Any]]
    singular_values: NDArray[np.floating[Any]]
    Vt: NDArray[np.floating[Any]]
    converged: bool
    iterations: int

    @property
    def V(self) -> NDArray[np.floating[Any]]:
        """Right singular vectors as columns (n x k)."""
        return self.Vt.T

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """U @ diag(s) @ Vt."""
        return (self.U * self.singular_values) @ self.Vt


def svd_working(
    A: NDArray[np.float64],
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64], bool, int]:
    """
    SVD of a float64 working array.

    Kernel shared with pinv() and rank(); no validation.

    Returns:
        (U, s, V, converged, iterations) with V as columns (n x k)
    """
    m, n = A.shape
    k = min(m, n)

    gram = A.T @ A
    eigenvalues, V, converged, iterations, _ = qr_iteration(gram, max_iter, tol)

    s = np.sqrt(np.maximum(eigenvalues, 0.0))
    # Clamping can reorder tiny negative eigenvalues; keep pairs together
    order = np.argsort(-s, kind='stable')
    s = s[order][:k]
    V = V[:, order][:, :k]

    U = np.zeros((m, k), dtype=A.dtype)
    nonzero = s > ZERO_TOL
    U[:, nonzero] = (A @ V[:, nonzero]) / s[nonzero]

    return U, s, V, converged, iterations


def svd(
    A: ArrayLike,
    *,
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
    warn: bool = True,
) -> SVDResult:
    """
    Singular value decomposition via eigendecomposition of A'A.

    Args:
        A: Matrix to decompose (m x n), any shape
        max_iter: Maximum QR iterations on the Gram matrix
        tol: Off-diagonal convergence threshold for the Gram matrix
        warn: Emit a RuntimeWarning if the eigen iteration did not converge

    Returns:
        SVDResult with U (m x k), singular values (k,), Vt (k x n)

    Raises:
        ValidationError: If A is not a finite numeric array
        DimensionError: If A is not 2D or has an empty dimension
    """
    X = as_matrix(A, 'A')
    U, s, V, converged, iterations = svd_working(X, max_iter, tol)

    if not converged and warn:
        warnings.warn(
            f"SVD: Gram matrix eigen iteration did not converge after "
            f"{iterations} iterations; singular vectors may be inaccurate",
            RuntimeWarning,
            stacklevel=2,
        )

    return SVDResult(
        U=to_storage(U),
        singular_values=to_storage(s),
        Vt=to_storage(V.T),
        converged=converged,
        iterations=iterations,
    )
