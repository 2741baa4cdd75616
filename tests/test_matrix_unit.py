"""Tests for dense matrices and the singular value decomposition."""

import numpy as np
import pytest

from mde.config import Tolerances
from mde.errors import ConvergenceError
from mde.matrix import Matrix, svd


def _reconstruct(m: Matrix) -> np.ndarray:
    return (m.left_singular_vectors()
            .product(Matrix.diagonal(m.singular_values()))
            .product(m.right_singular_vectors().transpose())
            .array)


class TestSVD:
    @pytest.mark.parametrize("shape", [(5, 3), (4, 4), (2, 4), (12, 6)])
    def test_reconstructs_input(self, shape):
        rng = np.random.default_rng(7)
        values = rng.normal(size=shape)
        m = Matrix(values)
        assert np.allclose(_reconstruct(m), values, atol=1e-10)

    def test_singular_values_non_negative_and_descending(self):
        rng = np.random.default_rng(3)
        s = Matrix(rng.normal(size=(8, 5))).singular_values()
        assert np.all(s >= 0.0)
        assert np.all(np.diff(s) <= 0.0)

    def test_matches_numpy(self):
        rng = np.random.default_rng(11)
        values = rng.normal(size=(6, 4))
        ours = svd(values).values
        assert np.allclose(ours, np.linalg.svd(values, compute_uv=False))

    def test_rank_deficient_has_zero_singular_value(self):
        values = np.array([[1.0, 2.0], [2.0, 4.0], [3.0, 6.0]])
        s = svd(values).values
        assert s[-1] == pytest.approx(0.0, abs=1e-12)

    def test_sweep_cap_raises(self):
        rng = np.random.default_rng(5)
        with pytest.raises(ConvergenceError, match="did not converge"):
            svd(rng.normal(size=(6, 4)), Tolerances(svd_max_sweeps=1))

    def test_result_is_cached(self):
        m = Matrix([[1.0, 0.0], [0.0, 2.0]])
        assert m.svd() is m.svd()

    def test_cache_respects_tolerances(self):
        rng = np.random.default_rng(5)
        m = Matrix(rng.normal(size=(6, 4)))
        assert m.svd() is m.svd()
        with pytest.raises(ConvergenceError):
            m.svd(Tolerances(svd_max_sweeps=1))


class TestMatrixAlgebra:
    def test_product_shape_mismatch(self):
        with pytest.raises(ValueError, match="Cannot multiply"):
            Matrix(rows=2, cols=3).product(Matrix(rows=2, cols=3))

    def test_sum_and_difference_shape_mismatch(self):
        with pytest.raises(ValueError, match="sizes must match"):
            Matrix(rows=2, cols=2).sum(Matrix(rows=3, cols=2))
        with pytest.raises(ValueError, match="sizes must match"):
            Matrix(rows=2, cols=2).difference(Matrix(rows=2, cols=1))

    def test_submatrix(self):
        m = Matrix([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        assert m.submatrix(1, 2).array.tolist() == [[1.0, 2.0]]
        with pytest.raises(ValueError, match="out of range"):
            m.submatrix(3, 1)

    def test_values_are_read_only(self):
        m = Matrix([[1.0, 2.0]])
        with pytest.raises(ValueError):
            m.array[0, 0] = 5.0

    def test_l2norm_is_rms(self):
        assert Matrix([[1.0, -1.0], [1.0, -1.0]]).l2norm() == pytest.approx(1.0)

    def test_pseudo_inverse_of_diagonal(self):
        inverse = Matrix.diagonal([2.0, 4.0]).pseudo_inverse(0.0)
        assert np.allclose(inverse.array, np.diag([0.5, 0.25]))

    def test_pseudo_inverse_of_zero_matrix(self):
        assert Matrix(rows=2, cols=2).pseudo_inverse(0.1) is None
