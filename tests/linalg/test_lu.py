"""
Tests for LU factorization with partial pivoting and Doolittle elimination.
"""

import numpy as np
import pytest
import scipy.linalg

from pydecomp.core.compute import select_tolerance
from pydecomp.core.exceptions import DimensionError, SingularMatrixError, ValidationError
from pydecomp.linalg import lu


DIRECT = select_tolerance("lu")


class TestPartialPivoting:

    def test_permuted_reconstruction(self, rng):
        A = rng.standard_normal((5, 5))
        result = lu(A)
        np.testing.assert_allclose(result.L @ result.U, A[result.perm], rtol=DIRECT.rtol, atol=DIRECT.atol)
        np.testing.assert_allclose(result.P @ A, result.L @ result.U, rtol=DIRECT.rtol, atol=DIRECT.atol)

    def test_reconstruct_helper(self, rng):
        A = rng.standard_normal((4, 4))
        np.testing.assert_allclose(lu(A).reconstruct(), A, rtol=DIRECT.rtol, atol=DIRECT.atol)

    def test_triangular_factors(self, rng):
        result = lu(rng.standard_normal((4, 4)))
        np.testing.assert_array_equal(np.diag(result.L), np.ones(4))
        assert np.all(np.triu(result.L, k=1) == 0.0)
        assert np.all(np.tril(result.U, k=-1) == 0.0)

    def test_multipliers_bounded(self, rng):
        L = lu(rng.standard_normal((6, 6))).L
        assert np.all(np.abs(L) <= 1.0 + 1e-6)

    def test_matches_scipy(self, rng):
        A = rng.standard_normal((5, 5))
        _, L_ref, U_ref = scipy.linalg.lu(A)
        result = lu(A)
        np.testing.assert_allclose(result.L, L_ref, rtol=DIRECT.rtol, atol=DIRECT.atol)
        np.testing.assert_allclose(result.U, U_ref, rtol=DIRECT.rtol, atol=DIRECT.atol)

    def test_row_exchange_sign(self):
        result = lu(np.array([[0.0, 1.0], [1.0, 0.0]]))
        assert result.sign == -1
        np.testing.assert_array_equal(result.perm, [1, 0])
        assert result.pivoting == 'partial'

    def test_singular_raises(self, small_singular):
        with pytest.raises(SingularMatrixError, match="pivot 1"):
            lu(small_singular)

    def test_float32_factors(self, rng):
        result = lu(rng.standard_normal((3, 3)))
        assert result.L.dtype == np.float32
        assert result.U.dtype == np.float32

    def test_default_factors_permuted_rows(self):
        A = np.array([[3.0, 1.0], [5.0, 10.0]])
        result = lu(A)
        np.testing.assert_array_equal(result.perm, [1, 0])
        np.testing.assert_allclose(result.L @ result.U, A[[1, 0]], rtol=DIRECT.rtol, atol=DIRECT.atol)
        np.testing.assert_allclose(result.reconstruct(), A, rtol=DIRECT.rtol, atol=DIRECT.atol)
        assert not np.allclose(result.L @ result.U, A)

        direct = lu(A, pivoting='none')
        np.testing.assert_allclose(direct.L @ direct.U, A, rtol=DIRECT.rtol, atol=DIRECT.atol)


class TestNoPivoting:

    def test_direct_reconstruction(self, diag_dominant):
        result = lu(diag_dominant, pivoting='none')
        np.testing.assert_allclose(result.L @ result.U, diag_dominant, rtol=DIRECT.rtol, atol=DIRECT.atol)
        np.testing.assert_array_equal(result.perm, np.arange(5))
        assert result.sign == 1

    def test_agrees_with_partial_on_diagonally_dominant(self, diag_dominant):
        none = lu(diag_dominant, pivoting='none')
        partial = lu(diag_dominant)
        np.testing.assert_allclose(none.reconstruct(), partial.reconstruct(), rtol=DIRECT.rtol, atol=DIRECT.atol)

    def test_zero_leading_pivot_raises(self):
        with pytest.raises(SingularMatrixError, match="pivot 0"):
            lu(np.array([[0.0, 1.0], [1.0, 0.0]]), pivoting='none')

    def test_zero_final_pivot_is_kept(self, small_singular):
        result = lu(small_singular, pivoting='none')
        assert result.U[1, 1] == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(result.L, [[1.0, 0.0], [2.0, 1.0]])


class TestLUValidation:

    def test_rejects_non_square(self):
        with pytest.raises(DimensionError, match="square"):
            lu(np.ones((2, 3)))

    def test_rejects_unknown_pivoting(self):
        with pytest.raises(ValidationError, match="pivoting"):
            lu(np.eye(2), pivoting='complete')

    def test_one_by_one(self):
        result = lu([[3.0]])
        assert result.U[0, 0] == pytest.approx(3.0)
        assert result.L[0, 0] == 1.0
