"""
Storage and working precision.

Matrices are stored in single precision. Kernels copy their input into a
float64 working array, run the algorithm there and cast results back to
float32 storage. Inputs are never modified.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


STORAGE_DTYPE = np.float32
WORKING_DTYPE = np.float64

# Machine epsilon for float32 storage
EPSILON_32: float = float(np.finfo(np.float32).eps)  # ~1.19e-7


def to_working(array: NDArray[np.floating[Any]]) -> NDArray[np.float64]:
    """Fresh float64 copy of the array."""
    return np.array(array, dtype=WORKING_DTYPE, copy=True)


def to_storage(array: NDArray[np.floating[Any]]) -> NDArray[np.float32]:
    """Fresh float32 copy of the array."""
    return np.array(array, dtype=STORAGE_DTYPE, copy=True)


def default_cutoff(
    singular_values: NDArray[np.floating[Any]],
    shape: tuple[int, int],
    rcond: float | None = None,
    floor: float = 0.0,
) -> float:
    """
    Threshold below which a singular value counts as zero.

    max(floor, rcond * sigma_max), where rcond defaults to
    max(M, N) * eps(float32): singular values smaller than that are not
    resolvable from single precision input.
    """
    if rcond is None:
        rcond = max(shape) * EPSILON_32
    sigma_max = float(np.max(singular_values)) if singular_values.size else 0.0
    return max(floor, rcond * sigma_max)
