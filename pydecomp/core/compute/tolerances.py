"""
Process-wide numeric constants and tolerance tiers.

The kernel constants are fixed for the whole process:
- ZERO_TOL: any pivot, norm or singular value at or below this is zero
- EIGEN_TOL: QR iteration stops once the absolute off-diagonal sum is below
- EIGEN_MAX_ITER: hard cap on QR iterations

Tolerance tiers describe the accuracy expected from each class of kernel
given float32 storage. They are used by the test suite and by the eigen
solver's symmetry precondition.
"""

from dataclasses import dataclass

import numpy as np


# Pivot / norm / singular value threshold
ZERO_TOL = 1e-10

# QR eigen iteration: off-diagonal absolute sum threshold and iteration cap
EIGEN_TOL = 1e-6
EIGEN_MAX_ITER = 100

# Cholesky requires exact symmetry up to this absolute difference
SYMMETRY_TOL = 1e-10

# Returned by cond() when the matrix cannot be inverted
COND_SENTINEL = float(np.finfo(np.float32).max)


@dataclass(frozen=True)
class ToleranceTier:
    """Relative and absolute tolerance pair for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Direct kernels (LU, Cholesky, inverse, solve) on float32 storage
FP32_DIRECT = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32_direct',
    description='Single precision storage, direct factorization',
)

# Iterative kernels (QR iteration, Gram-based SVD, pseudo-inverse)
FP32_ITERATIVE = ToleranceTier(
    rtol=1e-3,
    atol=1e-3,
    name='fp32_iterative',
    description='Single precision storage, iterative eigen solve',
)

# Float64 working precision, used to compare internal arithmetic
FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='Double precision working arrays',
)

# Eigen solver symmetry precondition. Float32 round-off on covariance or
# Gram matrices built outside the engine must pass.
EIGEN_SYMMETRY = ToleranceTier(
    rtol=1e-5,
    atol=ZERO_TOL,
    name='eigen_symmetry',
    description='Symmetry check before QR iteration',
)

_ITERATIVE_KINDS = frozenset({'qr', 'eigen', 'svd', 'pinv', 'rank', 'pca'})


def select_tolerance(kind: str) -> ToleranceTier:
    """Select the tolerance tier for a given kernel name."""
    if kind == 'fp64':
        return FP64
    if kind in _ITERATIVE_KINDS:
        return FP32_ITERATIVE
    return FP32_DIRECT
