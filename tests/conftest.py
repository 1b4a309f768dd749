"""
pytest configuration and shared fixtures.

Matrices fed to the iterative kernels (eigen, svd, pinv, rank, cond with
norm=2) are built with a prescribed, well separated spectrum so that the
unshifted QR iteration converges well inside its iteration limit.
"""

import pytest
import numpy as np


def orthogonal(rng, n):
    """Random orthogonal matrix from the QR of a Gaussian matrix."""
    Q, _ = np.linalg.qr(rng.standard_normal((n, n)))
    return Q


def with_spectrum(rng, eigenvalues):
    """Symmetric matrix Q diag(eigenvalues) Q' with a random orthogonal Q."""
    eigenvalues = np.asarray(eigenvalues, dtype=np.float64)
    Q = orthogonal(rng, len(eigenvalues))
    A = Q @ np.diag(eigenvalues) @ Q.T
    return (A + A.T) / 2.0


def with_singular_values(rng, m, n, singular_values):
    """m x n matrix U diag(s) V' with random orthonormal U and V."""
    s = np.asarray(singular_values, dtype=np.float64)
    k = len(s)
    U = orthogonal(rng, m)[:, :k]
    V = orthogonal(rng, n)[:, :k]
    return (U * s) @ V.T


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def make_symmetric(rng):
    """Factory for symmetric matrices with a prescribed spectrum."""
    def _make(eigenvalues):
        return with_spectrum(rng, eigenvalues)
    return _make


@pytest.fixture
def make_matrix(rng):
    """Factory for m x n matrices with prescribed singular values."""
    def _make(m, n, singular_values):
        return with_singular_values(rng, m, n, singular_values)
    return _make


@pytest.fixture
def spd_matrix(rng):
    """4 x 4 symmetric positive definite matrix with a well separated spectrum."""
    return with_spectrum(rng, [10.0, 5.0, 2.0, 1.0])


@pytest.fixture
def diag_dominant(rng):
    """5 x 5 strictly diagonally dominant matrix (non-symmetric)."""
    A = rng.uniform(-1.0, 1.0, size=(5, 5))
    A += np.diag(np.abs(A).sum(axis=1) + 1.0)
    return A


@pytest.fixture
def rank_deficient(rng):
    """6 x 4 matrix of rank 2 with singular values 5 and 2."""
    return with_singular_values(rng, 6, 4, [5.0, 2.0])


@pytest.fixture
def small_spd():
    """The 2 x 2 SPD matrix used in worked examples."""
    return np.array([[4.0, 2.0], [2.0, 3.0]])


@pytest.fixture
def small_singular():
    """A rank-one 2 x 2 matrix."""
    return np.array([[1.0, 2.0], [2.0, 4.0]])
