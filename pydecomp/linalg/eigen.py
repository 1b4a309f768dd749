"""
Symmetric eigendecomposition by unshifted QR iteration.

Starting from A_0 = A and V = I, each step factors A_k = Q R and forms
A_{k+1} = R Q and V <- V Q. For symmetric input A_k tends to a diagonal
matrix holding the eigenvalues and the columns of V to the eigenvectors.

Preconditions:
    - A is square and symmetric (Gram, covariance, other PSD matrices).
      There is no spectral shift, so complex eigenvalue pairs cannot be
      represented and eigenvalues of equal magnitude and opposite sign do
      not separate.

Convergence is reported, never hidden: the result carries `converged`,
`iterations` and the final off-diagonal `residual`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import (
    EIGEN_MAX_ITER,
    EIGEN_SYMMETRY,
    EIGEN_TOL,
)
from pydecomp.core.exceptions import ConvergenceError, ValidationError
from pydecomp.core.validation import check_symmetric as require_symmetric
from pydecomp.linalg._common import as_square, off_diagonal_sum
from pydecomp.linalg.qr import gram_schmidt


@dataclass(frozen=True)
class EigenResult:
    """
    Result of eigendecomposition.

    Attributes:
        eigenvalues: Eigenvalues sorted descending (n,)
        eigenvectors: Column i is the eigenvector for eigenvalues[i] (n x n)
        converged: Whether the off-diagonal sum dropped below tolerance
        iterations: Number of QR iterations performed
        residual: Final sum of absolute off-diagonal entries
    """
    eigenvalues: NDArray[np.floating[Any]]
    eigenvectors: NDArray[np.floating[Any]]
    converged: bool
    iterations: int
    residual: float


def qr_iteration(
    A: NDArray[np.float64],
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
) -> tuple[NDArray[np.float64], NDArray[np.float64], bool, int, float]:
    """
    Unshifted QR iteration on a float64 working array.

    Kernel shared with svd(); no validation.

    Returns:
        (eigenvalues, eigenvectors, converged, iterations, residual) with
        eigenpairs sorted by eigenvalue descending.
    """
    n = A.shape[0]
    Ak = A.copy()
    V = np.eye(n, dtype=A.dtype)

    converged = False
    iterations = 0
    residual = off_diagonal_sum(Ak)

    for iterations in range(1, max_iter + 1):
        Q, R = gram_schmidt(Ak)
        Ak = R @ Q
        V = V @ Q

        residual = off_diagonal_sum(Ak)
        if residual < tol:
            converged = True
            break

    eigenvalues = np.diag(Ak).copy()

    # Stable descending sort keeps equal eigenvalues in iteration order
    order = np.argsort(-eigenvalues, kind='stable')
    return eigenvalues[order], V[:, order], converged, iterations, residual


def eigen(
    A: ArrayLike,
    *,
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
    check_symmetric: bool = True,
    strict: bool = False,
    warn: bool = True,
) -> EigenResult:
    """
    Eigendecomposition of a symmetric matrix via the QR algorithm.

    Args:
        A: Square symmetric matrix (n x n)
        max_iter: Maximum number of QR iterations
        tol: Stop once the absolute off-diagonal sum is below this
        check_symmetric: Reject asymmetric input. Disable only for
            matrices known to have real, well-separated eigenvalues.
        strict: Raise ConvergenceError instead of returning a
            non-converged result
        warn: Emit a RuntimeWarning for a non-converged result

    Returns:
        EigenResult with eigenpairs sorted by eigenvalue descending

    Raises:
        DimensionError: If A is not square
        ValidationError: If A is not symmetric, or max_iter/tol are invalid
        ConvergenceError: If strict=True and the iteration did not converge
    """
    X = as_square(A, 'A')

    if max_iter < 1:
        raise ValidationError(f"max_iter: must be >= 1, got {max_iter}")
    if tol <= 0:
        raise ValidationError(f"tol: must be > 0, got {tol}")

    if check_symmetric:
        require_symmetric(X, 'A', atol=EIGEN_SYMMETRY.atol, rtol=EIGEN_SYMMETRY.rtol)

    values, vectors, converged, iterations, residual = qr_iteration(
        X, max_iter=max_iter, tol=tol,
    )

    if not converged:
        message = (
            f"QR eigen iteration did not converge after {iterations} iterations "
            f"(off-diagonal sum {residual:.3g}, tolerance {tol:.3g})"
        )
        if strict:
            raise ConvergenceError(
                message,
                iterations=iterations,
                final_change=residual,
                reason='max_iterations',
                threshold=tol,
            )
        if warn:
            warnings.warn(message, RuntimeWarning, stacklevel=2)

    return EigenResult(
        eigenvalues=to_storage(values),
        eigenvectors=to_storage(vectors),
        converged=converged,
        iterations=iterations,
        residual=residual,
    )
