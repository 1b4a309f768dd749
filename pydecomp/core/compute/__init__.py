"""
Shared compute infrastructure for pydecomp.

Submodules:
    tolerances: Process-wide numeric constants and tolerance tiers
    precision: Storage/working dtypes and singular value cutoffs
    timing: Execution timing utilities
"""

from pydecomp.core.compute.timing import Timer
from pydecomp.core.compute.tolerances import (
    ZERO_TOL,
    EIGEN_TOL,
    EIGEN_MAX_ITER,
    SYMMETRY_TOL,
    COND_SENTINEL,
    ToleranceTier,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    # Tolerances
    "ZERO_TOL",
    "EIGEN_TOL",
    "EIGEN_MAX_ITER",
    "SYMMETRY_TOL",
    "COND_SENTINEL",
    "ToleranceTier",
    "select_tolerance",
]
