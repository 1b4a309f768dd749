"""
QR decomposition by classical Gram-Schmidt.

Each column is orthogonalized against the already-normalized columns
(projection coefficients taken against the original column) and then
normalized. A column whose residual norm is at or below ZERO_TOL is left
as zero in Q; its R diagonal keeps the near-zero norm, so rank deficiency
shows up in R without an error being raised.

Classical Gram-Schmidt loses orthogonality for nearly collinear columns.
It is used here as the inner step of the QR eigen iteration, where inputs
are symmetric and the loss is tolerable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage
from pydecomp.core.compute.tolerances import ZERO_TOL
from pydecomp.linalg._common import as_matrix


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Matrix with orthonormal (or zero) columns (m x n)
        R: Upper triangular matrix (n x n)
        rank: Number of R diagonal entries above ZERO_TOL
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Q @ R."""
        return self.Q @ self.R


def gram_schmidt(
    A: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Classical Gram-Schmidt on a float64 working array.

    Kernel shared with the eigen solver; no validation, no copy of A.

    Returns:
        (Q, R) with A ~= Q @ R
    """
    m, n = A.shape
    Q = np.zeros((m, n), dtype=A.dtype)
    R = np.zeros((n, n), dtype=A.dtype)

    for j in range(n):
        a_j = A[:, j]
        # Projection coefficients against the original column
        R[:j, j] = Q[:, :j].T @ a_j
        v = a_j - Q[:, :j] @ R[:j, j]

        norm = float(np.sqrt(v @ v))
        R[j, j] = norm
        if norm > ZERO_TOL:
            Q[:, j] = v / norm

    return Q, R


def qr(A: ArrayLike) -> QRResult:
    """
    QR decomposition by classical Gram-Schmidt.

    Computes A = QR where Q has orthonormal columns (zero columns for
    dependent input columns) and R is upper triangular.

    Args:
        A: Matrix to decompose (m x n), any shape

    Returns:
        QRResult with Q (m x n), R (n x n) and numerical rank

    Raises:
        ValidationError: If A is not a finite numeric array
        DimensionError: If A is not 2D or has an empty dimension
    """
    X = as_matrix(A, 'A')
    Q, R = gram_schmidt(X)

    rank = int(np.sum(np.abs(np.diag(R)) > ZERO_TOL))

    return QRResult(Q=to_storage(Q), R=to_storage(R), rank=rank)
