"""
Dense decomposition engine.

All functions accept a Matrix or any 2D array-like, never modify their
input, compute in float64 and return float32 arrays inside structured
results. Errors are raised immediately with clear messages.

Public API:
    qr(A)              Classical Gram-Schmidt QR
    eigen(A)           Symmetric eigendecomposition (unshifted QR iteration)
    svd(A)             SVD via eigendecomposition of A'A
    lu(A)              LU with partial or no pivoting
    cholesky(A)        Cholesky of symmetric positive-definite A
    inv(A)             Inverse (pivoted LU)
    pinv(A)            Moore-Penrose pseudo-inverse
    lstsq(A, b)        Minimum-norm least squares via pinv
    solve(A, b)        Linear system(s) via LU
    det, trace, rank, cond, frobenius_norm
"""

from pydecomp.linalg.matrix import Matrix
from pydecomp.linalg.qr import QRResult, qr
from pydecomp.linalg.eigen import EigenResult, eigen
from pydecomp.linalg.svd import SVDResult, svd
from pydecomp.linalg.lu import LUResult, lu
from pydecomp.linalg.cholesky import CholeskyResult, cholesky
from pydecomp.linalg.inverse import inv
from pydecomp.linalg.pinv import pinv, lstsq
from pydecomp.linalg.solve import solve, forward_substitution, back_substitution
from pydecomp.linalg.scalars import det, trace, rank, cond, frobenius_norm

__all__ = [
    # Value type
    "Matrix",
    # Decompositions
    "QRResult",
    "qr",
    "EigenResult",
    "eigen",
    "SVDResult",
    "svd",
    "LUResult",
    "lu",
    "CholeskyResult",
    "cholesky",
    # Inverses and solvers
    "inv",
    "pinv",
    "lstsq",
    "solve",
    "forward_substitution",
    "back_substitution",
    # Scalars
    "det",
    "trace",
    "rank",
    "cond",
    "frobenius_norm",
]
