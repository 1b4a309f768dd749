"""
Dimensionality reduction built on the decomposition engine.

Public API:
    pca(X, n_components)         Principal components of centered data
    svd_reduce(X, n_components)  Projection onto leading right singular vectors
    covariance(X)                Sample covariance (n - 1 denominator)
"""

from pydecomp.reduce.design import ReductionDesign
from pydecomp.reduce.solution import ReductionParams, ReductionSolution
from pydecomp.reduce.solvers import pca, svd_reduce, covariance

__all__ = [
    "pca",
    "svd_reduce",
    "covariance",
    "ReductionDesign",
    "ReductionParams",
    "ReductionSolution",
]
