"""
Input coercion shared by the linalg kernels.

Every kernel accepts a Matrix or any 2-D array-like, validates it, and
works on a fresh float64 copy.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_working
from pydecomp.core.validation import (
    check_array,
    check_2d,
    check_finite,
    check_nonempty,
    check_square,
)
from pydecomp.core.exceptions import DimensionError


def as_matrix(a: ArrayLike, name: str = 'A') -> NDArray[np.float64]:
    """Validated float64 working copy of a 2-D input."""
    arr = check_array(a, name)
    check_2d(arr, name)
    check_nonempty(arr, name)
    check_finite(arr, name)
    return to_working(arr)


def as_square(a: ArrayLike, name: str = 'A') -> NDArray[np.float64]:
    """Validated float64 working copy of a square 2-D input."""
    arr = as_matrix(a, name)
    check_square(arr, name)
    return arr


def as_rhs(
    b: ArrayLike,
    n_rows: int,
    name: str = 'b',
) -> tuple[NDArray[np.float64], bool]:
    """
    Right-hand side as a 2-D working array.

    Returns:
        (B, is_vector): B has shape (n_rows, k); is_vector tells the caller
        to flatten the solution back to 1-D.
    """
    arr = check_array(b, name)
    check_nonempty(arr, name)
    check_finite(arr, name)
    if arr.ndim == 1:
        is_vector = True
        arr = arr.reshape(-1, 1)
    elif arr.ndim == 2:
        is_vector = False
    else:
        raise DimensionError(
            f"{name}: expected 1D or 2D array, got {arr.ndim}D with shape {arr.shape}"
        )
    if arr.shape[0] != n_rows:
        raise DimensionError(
            f"{name}: has {arr.shape[0]} rows but the coefficient matrix has {n_rows}"
        )
    return to_working(arr), is_vector


def off_diagonal_sum(A: NDArray[np.floating[Any]]) -> float:
    """Sum of absolute values of the off-diagonal entries."""
    return float(np.sum(np.abs(A)) - np.sum(np.abs(np.diag(A))))
