"""
Dimensionality reduction solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.result import Result
from pydecomp.core.exceptions import DimensionError
from pydecomp.core.validation import check_array, check_finite

if TYPE_CHECKING:
    from pydecomp.reduce.design import ReductionDesign


@dataclass(frozen=True)
class ReductionParams:
    """
    Parameter payload for PCA and SVD reduction.

    Attributes:
        scores: Projected data (n x k)
        components: Projection basis, one column per component (p x k)
        explained_variance: Variance captured by each component (k,)
        explained_variance_ratio: explained_variance / total variance (k,)
        mean: Column means subtracted before projection (p,), zeros for
            SVD reduction which projects the raw data
        singular_values: Singular values for SVD reduction, None for PCA
    """
    scores: NDArray[np.floating[Any]]
    components: NDArray[np.floating[Any]]
    explained_variance: NDArray[np.floating[Any]]
    explained_variance_ratio: NDArray[np.floating[Any]]
    mean: NDArray[np.floating[Any]]
    singular_values: NDArray[np.floating[Any]] | None = None


@dataclass
class ReductionSolution:
    """
    User-facing reduction results.

    Wraps Result[ReductionParams] and provides convenient accessors.
    """
    _result: Result[ReductionParams]
    _design: 'ReductionDesign'

    @property
    def scores(self) -> NDArray[np.floating[Any]]:
        """Projected data, shape (n, k)."""
        return self._result.params.scores

    @property
    def components(self) -> NDArray[np.floating[Any]]:
        """Projection basis, shape (p, k)."""
        return self._result.params.components

    @property
    def explained_variance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.explained_variance

    @property
    def explained_variance_ratio(self) -> NDArray[np.floating[Any]]:
        return self._result.params.explained_variance_ratio

    @property
    def mean(self) -> NDArray[np.floating[Any]]:
        return self._result.params.mean

    @property
    def singular_values(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.singular_values

    @property
    def n_components(self) -> int:
        return self._result.params.components.shape[1]

    @property
    def method(self) -> str:
        return self._result.method

    @property
    def converged(self) -> bool:
        return bool(self._result.info.get('converged', True))

    @property
    def iterations(self) -> int:
        return int(self._result.info.get('iterations', 0))

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def transform(self, X: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Project new observations onto the fitted components.

        Args:
            X: New data (m x p), same features as the fitted data

        Returns:
            Scores (m x k)
        """
        arr = check_array(X, 'X')
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        check_finite(arr, 'X')
        p = self.components.shape[0]
        if arr.ndim != 2 or arr.shape[1] != p:
            raise DimensionError(
                f"X: expected {p} features, got shape {arr.shape}"
            )
        centered = arr.astype(np.float64) - self.mean
        return (centered @ self.components).astype(np.float32)

    def summary(self) -> str:
        """Component table with explained variance."""
        lines = [
            f"{self.method.upper()} reduction: {self._design.n} observations, "
            f"{self._design.p} features -> {self.n_components} components",
            f"{'Component':<12}{'Variance':>14}{'Ratio':>10}{'Cumulative':>12}",
        ]
        cumulative = np.cumsum(self.explained_variance_ratio)
        for i, (var, ratio) in enumerate(
            zip(self.explained_variance, self.explained_variance_ratio)
        ):
            lines.append(
                f"{'PC' + str(i + 1):<12}{var:>14.6g}{ratio:>10.4f}{cumulative[i]:>12.4f}"
            )
        if self._result.has_warning('did not converge'):
            lines.append(f"Warning: eigen iteration did not converge "
                         f"({self.iterations} iterations)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ReductionSolution(method={self.method!r}, "
            f"n_components={self.n_components}, converged={self.converged})"
        )
