"""
Solver dispatch for dimensionality reduction.

Provides pca() (eigendecomposition of the covariance matrix) and
svd_reduce() (projection onto the leading right singular vectors), plus
the covariance() helper that PCA is built on.
"""

from __future__ import annotations

from typing import Any
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import to_storage, to_working
from pydecomp.core.compute.timing import Timer
from pydecomp.core.compute.tolerances import EIGEN_MAX_ITER, EIGEN_TOL
from pydecomp.core.exceptions import ValidationError
from pydecomp.core.result import Result
from pydecomp.linalg.eigen import qr_iteration
from pydecomp.linalg.svd import svd_working
from pydecomp.reduce.design import ReductionDesign
from pydecomp.reduce.solution import ReductionParams, ReductionSolution


def _ensure_design(data: ArrayLike | ReductionDesign) -> ReductionDesign:
    """Convert raw array to ReductionDesign if needed."""
    if isinstance(data, ReductionDesign):
        return data
    return ReductionDesign.from_array(data)


def _check_n_components(n_components: int, p: int) -> None:
    if isinstance(n_components, bool) or not isinstance(n_components, (int, np.integer)):
        raise ValidationError(
            f"n_components: must be an integer, got {type(n_components).__name__}"
        )
    if not 1 <= n_components <= p:
        raise ValidationError(
            f"n_components: must be between 1 and {p} (number of features), "
            f"got {n_components}"
        )


def _covariance_working(X: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """(covariance, column means) of a float64 working array."""
    n = X.shape[0]
    mean = X.mean(axis=0)
    centered = X - mean
    C = centered.T @ centered / (n - 1)
    # Enforce exact symmetry lost to summation order
    return (C + C.T) / 2.0, mean


def covariance(X: ArrayLike | ReductionDesign) -> NDArray[np.floating[Any]]:
    """
    Sample covariance matrix (n - 1 denominator).

    Rows are observations, columns are features.

    Args:
        X: Data (n x p) with n >= 2

    Returns:
        Covariance matrix (p x p)
    """
    design = _ensure_design(X)
    C, _ = _covariance_working(to_working(design.data))
    return to_storage(C)


def pca(
    X: ArrayLike | ReductionDesign,
    n_components: int,
    *,
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
) -> ReductionSolution:
    """
    Principal component analysis.

    Centers the data, eigendecomposes its covariance matrix and projects
    the centered data onto the leading eigenvectors.

    Parameters
    ----------
    X : array-like or ReductionDesign
        Data matrix, observations x features.
    n_components : int
        Number of components to keep, 1 <= n_components <= p.
    max_iter, tol : passed to the QR eigen iteration.

    Returns
    -------
    ReductionSolution with scores (n x k) and components (p x k).
    """
    design = _ensure_design(X)
    _check_n_components(n_components, design.p)

    timer = Timer()
    timer.start()

    with timer.section('covariance'):
        data = to_working(design.data)
        C, mean = _covariance_working(data)

    with timer.section('eigen'):
        values, vectors, converged, iterations, residual = qr_iteration(C, max_iter, tol)

    with timer.section('projection'):
        components = vectors[:, :n_components]
        scores = (data - mean) @ components

    timer.stop()

    values = np.maximum(values, 0.0)
    total = float(np.sum(values))
    explained = values[:n_components]
    ratio = explained / total if total > 0 else np.zeros_like(explained)

    warn_msgs = []
    if not converged:
        msg = (
            f"PCA: covariance eigen iteration did not converge after {iterations} "
            f"iterations (off-diagonal sum {residual:.3g})"
        )
        warn_msgs.append(msg)
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    params = ReductionParams(
        scores=to_storage(scores),
        components=to_storage(components),
        explained_variance=to_storage(explained),
        explained_variance_ratio=to_storage(ratio),
        mean=to_storage(mean),
    )
    result = Result(
        params=params,
        info={
            'method': 'pca',
            'n_components': n_components,
            'converged': converged,
            'iterations': iterations,
            'residual': residual,
        },
        timing=timer.result(),
        method='pca',
        warnings=tuple(warn_msgs),
    )
    return ReductionSolution(_result=result, _design=design)


def svd_reduce(
    X: ArrayLike | ReductionDesign,
    n_components: int,
    *,
    max_iter: int = EIGEN_MAX_ITER,
    tol: float = EIGEN_TOL,
) -> ReductionSolution:
    """
    Reduce dimensionality by projecting onto leading right singular vectors.

    The data is not centered: scores = X @ V[:, :k].

    Parameters
    ----------
    X : array-like or ReductionDesign
        Data matrix, observations x features.
    n_components : int
        Number of components to keep, 1 <= n_components <= p.
    max_iter, tol : passed to the QR eigen iteration on X'X.

    Returns
    -------
    ReductionSolution with scores (n x k), components (p x k) and singular
    values.
    """
    design = _ensure_design(X)
    _check_n_components(n_components, design.p)

    timer = Timer()
    timer.start()

    data = to_working(design.data)
    with timer.section('svd'):
        _, s, V, converged, iterations = svd_working(data, max_iter, tol)

    # V has min(n, p) columns; pad with zeros when n < p
    if V.shape[1] < n_components:
        extra = n_components - V.shape[1]
        V = np.hstack([V, np.zeros((V.shape[0], extra))])
        s = np.concatenate([s, np.zeros(extra)])

    with timer.section('projection'):
        components = V[:, :n_components]
        scores = data @ components

    timer.stop()

    total = float(np.sum(data * data))
    sq = s[:n_components] ** 2
    explained = sq / (design.n - 1)
    ratio = sq / total if total > 0 else np.zeros_like(sq)

    warn_msgs = []
    if not converged:
        msg = (
            f"SVD reduction: Gram matrix eigen iteration did not converge "
            f"after {iterations} iterations"
        )
        warn_msgs.append(msg)
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    params = ReductionParams(
        scores=to_storage(scores),
        components=to_storage(components),
        explained_variance=to_storage(explained),
        explained_variance_ratio=to_storage(ratio),
        mean=np.zeros(design.p, dtype=np.float32),
        singular_values=to_storage(s[:n_components]),
    )
    result = Result(
        params=params,
        info={
            'method': 'svd',
            'n_components': n_components,
            'converged': converged,
            'iterations': iterations,
        },
        timing=timer.result(),
        method='svd',
        warnings=tuple(warn_msgs),
    )
    return ReductionSolution(_result=result, _design=design)
