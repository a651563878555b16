"""
Tests for linear_regression_inv(), the buffer-level OLS solver.
"""

import numpy as np
import pytest

from pystatgen.core.exceptions import SingularMatrixError
from pystatgen.matrix.buffers import alloc_pivot_buf, alloc_scratch
from pystatgen.matrix.regression import linear_regression_inv


def solve(X, y):
    """Run linear_regression_inv on a sample-major design."""
    sample_ct, predictor_ct = X.shape
    coefs = np.full(predictor_ct, np.nan)
    xtx_inv = np.zeros(predictor_ct * predictor_ct)
    xt_y = np.zeros(predictor_ct)
    linear_regression_inv(
        np.ascontiguousarray(y), np.ascontiguousarray(X.T).ravel(),
        predictor_ct, sample_ct, coefs, xtx_inv, xt_y,
        alloc_pivot_buf(predictor_ct), alloc_scratch(predictor_ct),
    )
    return coefs, xtx_inv.reshape(predictor_ct, predictor_ct), xt_y


class TestLinearRegressionInv:

    def test_recovers_intercept_and_slope(self, backend, rng):
        n = 200
        x = rng.uniform(0, 10, n)
        y = 2.0 + 3.0 * x + rng.standard_normal(n) * 0.5
        X = np.column_stack([np.ones(n), x])

        coefs, _, _ = solve(X, y)

        assert coefs[0] == pytest.approx(2.0, abs=0.3)
        assert coefs[1] == pytest.approx(3.0, abs=0.05)

    def test_matches_lstsq(self, backend, rng):
        X = np.column_stack([np.ones(50), rng.standard_normal((50, 3))])
        y = rng.standard_normal(50)

        coefs, _, _ = solve(X, y)

        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(coefs, expected, rtol=1e-9, atol=1e-12)

    def test_outputs_normal_equations(self, backend, rng):
        X = np.column_stack([np.ones(30), rng.standard_normal((30, 2))])
        y = rng.standard_normal(30)

        _, xtx_inv, xt_y = solve(X, y)

        np.testing.assert_allclose(xt_y, X.T @ y, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(xtx_inv @ (X.T @ X), np.eye(3), atol=1e-10)
        np.testing.assert_allclose(xtx_inv, xtx_inv.T, atol=1e-12)

    def test_duplicate_predictor_raises(self, backend, rng):
        n = 100
        x = rng.uniform(0, 10, n)
        X = np.column_stack([np.ones(n), x, x])
        y = 2.0 + 3.0 * x + rng.standard_normal(n)
        coefs = np.full(3, -1.0)

        with pytest.raises(SingularMatrixError) as exc_info:
            linear_regression_inv(
                y, np.ascontiguousarray(X.T).ravel(), 3, n, coefs,
                np.zeros(9), np.zeros(3), alloc_pivot_buf(3), alloc_scratch(3),
            )

        assert exc_info.value.matrix_name == "X'X"
        assert "Cannot fit" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, SingularMatrixError)
        np.testing.assert_array_equal(coefs, -1.0)

    def test_constant_predictor_raises(self, backend, rng):
        n = 40
        X = np.column_stack([np.ones(n), np.full(n, 5.0)])
        with pytest.raises(SingularMatrixError):
            solve(X, rng.standard_normal(n))
