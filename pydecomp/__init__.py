"""
pydecomp: dense single-precision matrix decompositions for Python.

A small numerical engine for feature-covariance sized problems: QR,
symmetric eigendecomposition, SVD, LU, Cholesky, inverse, pseudo-inverse,
linear solves and the scalar quantities derived from them, plus the
PCA / SVD reducers that consume them.

Submodules:
    linalg: Matrix type and decomposition kernels
    reduce: Dimensionality reduction (PCA, SVD projection)
    core: Exceptions, validation, tolerances, timing
"""

__version__ = "0.1.0"

from pydecomp import linalg
from pydecomp import reduce
from pydecomp.linalg import (
    Matrix,
    qr,
    eigen,
    svd,
    lu,
    cholesky,
    inv,
    pinv,
    lstsq,
    solve,
    det,
    trace,
    rank,
    cond,
    frobenius_norm,
)

__all__ = [
    "__version__",
    "linalg",
    "reduce",
    "Matrix",
    "qr",
    "eigen",
    "svd",
    "lu",
    "cholesky",
    "inv",
    "pinv",
    "lstsq",
    "solve",
    "det",
    "trace",
    "rank",
    "cond",
    "frobenius_norm",
]
