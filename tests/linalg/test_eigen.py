"""
Tests for symmetric eigendecomposition by unshifted QR iteration.
"""

import warnings

import numpy as np
import pytest

from pydecomp.core.compute import select_tolerance
from pydecomp.core.exceptions import ConvergenceError, DimensionError, ValidationError
from pydecomp.linalg import eigen


ITERATIVE = select_tolerance("eigen")


class TestEigenConverged:

    def test_known_spectrum(self, make_symmetric):
        A = make_symmetric([10.0, 5.0, 2.0, 1.0])
        result = eigen(A)
        assert result.converged
        np.testing.assert_allclose(result.eigenvalues, [10.0, 5.0, 2.0, 1.0], rtol=ITERATIVE.rtol)

    def test_eigenpairs(self, spd_matrix):
        result = eigen(spd_matrix)
        V, lam = result.eigenvectors, result.eigenvalues
        np.testing.assert_allclose(spd_matrix @ V, V * lam, atol=1e-4)

    def test_orthonormal_eigenvectors(self, spd_matrix):
        V = eigen(spd_matrix).eigenvectors
        np.testing.assert_allclose(V.T @ V, np.eye(4), rtol=ITERATIVE.rtol, atol=ITERATIVE.atol)

    def test_sorted_descending(self, make_symmetric):
        result = eigen(make_symmetric([3.0, 8.0, 1.0]))
        assert np.all(np.diff(result.eigenvalues) <= 0)

    def test_matches_numpy(self, spd_matrix):
        ref = np.sort(np.linalg.eigvalsh(spd_matrix))[::-1]
        np.testing.assert_allclose(eigen(spd_matrix).eigenvalues, ref, rtol=ITERATIVE.rtol)

    def test_trace_equals_sum(self, spd_matrix):
        result = eigen(spd_matrix)
        assert np.sum(result.eigenvalues) == pytest.approx(np.trace(spd_matrix), rel=1e-5)

    def test_diagonal_converges_immediately(self):
        result = eigen(np.diag([1.0, 4.0, 2.0]))
        assert result.converged
        assert result.iterations == 1
        np.testing.assert_allclose(result.eigenvalues, [4.0, 2.0, 1.0])

    def test_reports_residual(self, spd_matrix):
        result = eigen(spd_matrix)
        assert result.residual < 1e-6

    def test_one_by_one(self):
        result = eigen([[7.0]])
        assert result.eigenvalues[0] == pytest.approx(7.0)
        np.testing.assert_allclose(np.abs(result.eigenvectors), [[1.0]])


class TestEigenNonConvergence:

    def test_warns_by_default(self):
        A = np.array([[2.0, 1.0], [1.0, 2.0]])
        with pytest.warns(RuntimeWarning, match="did not converge"):
            result = eigen(A, max_iter=2)
        assert not result.converged
        assert result.iterations == 2

    def test_silent_when_warn_disabled(self):
        A = np.array([[2.0, 1.0], [1.0, 2.0]])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = eigen(A, max_iter=2, warn=False)
        assert not result.converged

    def test_strict_raises(self):
        A = np.array([[2.0, 1.0], [1.0, 2.0]])
        with pytest.raises(ConvergenceError) as exc_info:
            eigen(A, max_iter=3, strict=True)
        assert exc_info.value.iterations == 3


class TestEigenValidation:

    def test_rejects_non_square(self):
        with pytest.raises(DimensionError):
            eigen(np.ones((2, 3)))

    def test_rejects_asymmetric(self):
        with pytest.raises(ValidationError, match="symmetric"):
            eigen(np.array([[1.0, 2.0], [0.0, 1.0]]))

    def test_symmetry_check_opt_out(self):
        A = np.array([[3.0, 1.0], [0.0, 1.0]])
        result = eigen(A, check_symmetric=False, warn=False)
        np.testing.assert_allclose(result.eigenvalues, [3.0, 1.0], rtol=ITERATIVE.rtol)

    @pytest.mark.parametrize("kwargs", [{"max_iter": 0}, {"tol": 0.0}, {"tol": -1.0}])
    def test_rejects_bad_controls(self, kwargs):
        with pytest.raises(ValidationError):
            eigen(np.eye(2), **kwargs)


class TestEigenRandomSymmetric:
    """
    Random symmetric input carries no spectral gap guarantee. A converged
    result must satisfy the eigenpair residual bound; otherwise the result
    is flagged and a warning is emitted.
    """

    @pytest.mark.parametrize("seed", range(6))
    @pytest.mark.parametrize("n", range(2, 7))
    def test_residual_bound_follows_convergence(self, n, seed):
        B = np.random.default_rng(seed).standard_normal((n, n))
        A = (B + B.T) / 2.0

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = eigen(A)
        runtime = [w for w in caught if issubclass(w.category, RuntimeWarning)]

        assert np.all(np.diff(result.eigenvalues) <= 0)
        if result.converged:
            assert runtime == []
            V = result.eigenvectors.astype(np.float64)
            for i, lam in enumerate(result.eigenvalues.astype(np.float64)):
                assert np.linalg.norm(A @ V[:, i] - lam * V[:, i]) < 1e-3
        else:
            assert len(runtime) == 1
            assert "did not converge" in str(runtime[0].message)
            assert result.iterations == 100
            assert result.residual >= 1e-6
