"""
Core infrastructure for pydecomp.

Shared abstractions used by the linalg kernels and the reducers built on
top of them.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Tolerances, precision handling, timing
"""

from pydecomp.core.result import Result
from pydecomp.core.exceptions import (
    PyDecompError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyDecompError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
