"""
Input validation utilities for pydecomp.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent. Every kernel runs them before
touching the data, so precondition violations never surface as numerical
errors.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pydecomp.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data)
    and complex input, which the engine does not support.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to a real numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype} is not supported, expected real data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_nonempty(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every dimension of the array has positive length.

    Raises:
        DimensionError: If any dimension is zero
    """
    if array.size == 0 or any(d == 0 for d in array.shape):
        raise DimensionError(
            f"{name}: all dimensions must be > 0, got shape {array.shape}"
        )


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If rows != cols
    """
    rows, cols = array.shape
    if rows != cols:
        raise DimensionError(
            f"{name}: expected square matrix, got shape ({rows}, {cols})"
        )


def check_symmetric(
    array: NDArray[np.floating[Any]],
    name: str,
    atol: float,
    rtol: float = 0.0,
) -> None:
    """
    Verify a square array is symmetric within tolerance.

    An entry pair fails when |A[i, j] - A[j, i]| > atol + rtol * max|A|.

    Raises:
        ValidationError: If any mirrored pair differs by more than the bound
    """
    diff = np.abs(array - array.T)
    bound = atol + rtol * float(np.max(np.abs(array)))
    worst = float(np.max(diff))
    if worst > bound:
        i, j = np.unravel_index(int(np.argmax(diff)), diff.shape)
        raise ValidationError(
            f"{name}: matrix must be symmetric, |A[{i},{j}] - A[{j},{i}]| = "
            f"{worst:.3g} exceeds tolerance {bound:.3g}"
        )


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples (rows).

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )
