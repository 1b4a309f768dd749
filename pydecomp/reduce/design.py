"""
ReductionDesign: data wrapper for dimensionality reduction.

Wraps a data matrix (n observations x p features) and provides validation
and metadata for the reducers. Immutable after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import STORAGE_DTYPE
from pydecomp.core.exceptions import ValidationError
from pydecomp.core.validation import check_array, check_finite, check_min_samples


@dataclass(frozen=True)
class ReductionDesign:
    """
    Design for dimensionality reduction.

    Construction:
        ReductionDesign.from_array(X)
    """
    _data: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _columns: tuple[str, ...] | None

    @classmethod
    def from_array(cls, data: ArrayLike) -> ReductionDesign:
        """
        Build ReductionDesign from array-like data.

        Parameters
        ----------
        data : array-like
            2D data matrix. Anything with .values (a DataFrame) is unwrapped
            and its column names kept. 1D input is reshaped to (n, 1).
        """
        if hasattr(data, 'values') and hasattr(data, 'columns'):
            columns = tuple(str(c) for c in data.columns)
            data = data.values
        else:
            columns = None

        arr = check_array(data, 'X')
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        return cls._build(arr, columns)

    @classmethod
    def _build(
        cls,
        data: NDArray,
        columns: tuple[str, ...] | None = None,
    ) -> ReductionDesign:
        """Internal builder with validation."""
        if data.ndim != 2:
            raise ValidationError(
                f"X: must be 2D (observations x features), got {data.ndim}D"
            )

        n, p = data.shape
        check_min_samples(data, 2, 'X')
        if p < 1:
            raise ValidationError(f"X: need at least 1 feature, got {p}")
        check_finite(data, 'X')

        return cls(
            _data=np.array(data, dtype=STORAGE_DTYPE, copy=True),
            _n=n,
            _p=p,
            _columns=columns,
        )

    @property
    def data(self) -> NDArray[np.floating[Any]]:
        """Data matrix (n x p)."""
        return self._data

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of features."""
        return self._p

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Feature names, or None if not available."""
        return self._columns

    def __repr__(self) -> str:
        return f"ReductionDesign(n={self._n}, p={self._p})"
