"""
Tests for PCA, SVD reduction and the covariance helper.
"""

import numpy as np
import pytest

from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.reduce import ReductionDesign, covariance, pca, svd_reduce


@pytest.fixture
def scaled(rng, make_matrix):
    """200 x 4 zero-mean observations with principal scales 5, 2, 1, 0.5."""
    Q = make_matrix(4, 4, [1.0, 1.0, 1.0, 1.0])
    Z = rng.standard_normal((200, 4))
    return Z @ np.diag([5.0, 2.0, 1.0, 0.5]) @ Q.T


@pytest.fixture
def data(scaled):
    """The scaled observations shifted away from the origin."""
    return scaled + np.array([1.0, -2.0, 0.5, 3.0])


class TestCovariance:

    def test_matches_numpy(self, data):
        np.testing.assert_allclose(covariance(data), np.cov(data, rowvar=False), rtol=1e-4, atol=1e-5)

    def test_symmetric(self, data):
        C = covariance(data)
        np.testing.assert_array_equal(C, C.T)

    def test_accepts_design(self, data):
        design = ReductionDesign.from_array(data)
        np.testing.assert_array_equal(covariance(design), covariance(data))


class TestPCA:

    def test_explained_variance_matches_numpy(self, data):
        solution = pca(data, 2)
        ref = np.sort(np.linalg.eigvalsh(np.cov(data, rowvar=False)))[::-1]
        np.testing.assert_allclose(solution.explained_variance, ref[:2], rtol=1e-4)
        np.testing.assert_allclose(
            solution.explained_variance_ratio, ref[:2] / ref.sum(), rtol=1e-4,
        )

    def test_shapes(self, data):
        solution = pca(data, 3)
        assert solution.scores.shape == (200, 3)
        assert solution.components.shape == (4, 3)
        assert solution.mean.shape == (4,)
        assert solution.n_components == 3
        assert solution.singular_values is None

    def test_components_orthonormal(self, data):
        W = pca(data, 3).components
        np.testing.assert_allclose(W.T @ W, np.eye(3), atol=1e-5)

    def test_scores_variance_is_explained_variance(self, data):
        solution = pca(data, 2)
        np.testing.assert_allclose(
            np.var(solution.scores.astype(np.float64), axis=0, ddof=1),
            solution.explained_variance,
            rtol=1e-4,
        )

    def test_scores_centered(self, data):
        scores = pca(data, 2).scores
        np.testing.assert_allclose(scores.mean(axis=0), [0.0, 0.0], atol=1e-4)

    def test_mean(self, data):
        np.testing.assert_allclose(pca(data, 1).mean, data.mean(axis=0), rtol=1e-5, atol=1e-5)

    def test_all_components_ratio_sums_to_one(self, data):
        ratio = pca(data, 4).explained_variance_ratio
        assert float(np.sum(ratio)) == pytest.approx(1.0, rel=1e-5)
        assert np.all(np.diff(ratio) <= 0)

    def test_transform_reproduces_scores(self, data):
        solution = pca(data, 2)
        np.testing.assert_allclose(solution.transform(data), solution.scores, atol=1e-4)

    def test_transform_single_row(self, data):
        solution = pca(data, 2)
        assert solution.transform(data[0]).shape == (1, 2)

    def test_transform_feature_mismatch(self, data):
        with pytest.raises(DimensionError, match="features"):
            pca(data, 2).transform(np.ones((3, 5)))

    def test_result_metadata(self, data):
        solution = pca(data, 2)
        assert solution.method == 'pca'
        assert solution.converged
        assert solution.warnings == ()
        assert solution.info['n_components'] == 2
        assert 'eigen' in solution.timing
        assert 'total_seconds' in solution.timing

    def test_one_feature(self, rng):
        x = rng.standard_normal(50)
        solution = pca(x, 1)
        assert solution.explained_variance[0] == pytest.approx(np.var(x, ddof=1), rel=1e-5)
        assert solution.explained_variance_ratio[0] == pytest.approx(1.0)

    def test_non_convergence_recorded(self, data):
        with pytest.warns(RuntimeWarning, match="did not converge"):
            solution = pca(data, 2, max_iter=1)
        assert not solution.converged
        assert len(solution.warnings) == 1
        assert "Warning" in solution.summary()

    def test_summary_and_repr(self, data):
        solution = pca(data, 2)
        text = solution.summary()
        assert "PC1" in text
        assert "PC2" in text
        assert "pca" in repr(solution)


class TestSVDReduce:

    def test_singular_values_match_numpy(self, scaled):
        solution = svd_reduce(scaled, 3)
        ref = np.linalg.svd(scaled, compute_uv=False)
        np.testing.assert_allclose(solution.singular_values, ref[:3], rtol=1e-4)

    def test_scores_are_uncentered_projection(self, scaled):
        solution = svd_reduce(scaled, 2)
        np.testing.assert_allclose(
            solution.scores, scaled @ solution.components, rtol=1e-4, atol=1e-3,
        )
        np.testing.assert_array_equal(solution.mean, np.zeros(4))

    def test_ratio_sums_to_one(self, scaled):
        ratio = svd_reduce(scaled, 4).explained_variance_ratio
        assert float(np.sum(ratio)) == pytest.approx(1.0, rel=1e-5)

    def test_explained_variance(self, scaled):
        solution = svd_reduce(scaled, 2)
        np.testing.assert_allclose(
            solution.explained_variance, solution.singular_values ** 2 / 199, rtol=1e-5,
        )

    def test_fewer_observations_than_features(self, make_matrix):
        X = make_matrix(3, 5, [6.0, 3.0, 1.5])
        solution = svd_reduce(X, 5)
        assert solution.components.shape == (5, 5)
        np.testing.assert_array_equal(solution.components[:, 3:], np.zeros((5, 2)))
        np.testing.assert_array_equal(solution.singular_values[3:], [0.0, 0.0])
        np.testing.assert_allclose(solution.singular_values[:3], [6.0, 3.0, 1.5], rtol=1e-4)

    def test_method(self, scaled):
        solution = svd_reduce(scaled, 1)
        assert solution.method == 'svd'
        assert 'svd' in solution.timing


class TestReductionValidation:

    @pytest.mark.parametrize("n_components", [0, 5, -1])
    def test_out_of_range(self, data, n_components):
        with pytest.raises(ValidationError, match="n_components"):
            pca(data, n_components)

    @pytest.mark.parametrize("n_components", [1.5, True, "2"])
    def test_not_an_integer(self, data, n_components):
        with pytest.raises(ValidationError, match="integer"):
            svd_reduce(data, n_components)

    def test_single_observation(self):
        with pytest.raises(ValidationError, match="at least 2 samples"):
            pca(np.ones((1, 3)), 1)

    def test_non_finite(self):
        with pytest.raises(ValidationError, match="non-finite"):
            pca(np.array([[1.0, np.nan], [2.0, 3.0]]), 1)

    def test_three_dimensional(self):
        with pytest.raises(ValidationError, match="2D"):
            ReductionDesign.from_array(np.ones((2, 2, 2)))

    def test_design_properties(self, data):
        design = ReductionDesign.from_array(data)
        assert design.n == 200
        assert design.p == 4
        assert design.columns is None
        assert design.data.dtype == np.float32
