"""
Tests for LU inversion.

Validates:
    - inv(A) @ A ≈ I on well-conditioned input, per backend
    - exactly singular and numerically singular input raises
      SingularMatrixError
    - check_rcond=False skips only the conditioning check; zero pivots
      still raise
    - the split float32 inversion agrees with the float64 path
    - buffer contracts per backend
"""

import numpy as np
import pytest

from pystatgen.core.exceptions import (
    DimensionError,
    NumericalError,
    SingularMatrixError,
    ValidationError,
)
from pystatgen.core.compute.tolerances import identity_tolerance, select_tolerance
from pystatgen.matrix.buffers import (
    alloc_pivot_buf,
    alloc_scratch,
    matrix_finvert_buf1_size,
    matrix_invert_buf1_size,
    matrix_invert_scratch_size,
)
from pystatgen.matrix.inversion import (
    invert_fmatrix_first_half,
    invert_fmatrix_second_half,
    invert_matrix,
    invert_matrix_checked,
)


def well_conditioned(rng, dim):
    return rng.standard_normal((dim, dim)) + dim * np.eye(dim)


def with_condition(rng, dim, cond):
    """Random matrix with prescribed 2-norm condition number."""
    q1, _ = np.linalg.qr(rng.standard_normal((dim, dim)))
    q2, _ = np.linalg.qr(rng.standard_normal((dim, dim)))
    singular_values = np.logspace(0, -np.log10(cond), dim)
    return q1 @ np.diag(singular_values) @ q2.T


# ═══════════════════════════════════════════════════════════════════════
# Double precision
# ═══════════════════════════════════════════════════════════════════════


class TestInvertMatrix:

    @pytest.mark.parametrize("dim", [1, 2, 5, 12])
    def test_identity_reconstruction(self, backend, rng, dim):
        a = well_conditioned(rng, dim)
        buf = a.ravel().copy()

        invert_matrix(dim, buf, alloc_pivot_buf(dim), alloc_scratch(dim))

        inv = buf.reshape(dim, dim)
        tol = identity_tolerance(dim, 0.01, np.float64)
        np.testing.assert_allclose(inv @ a, np.eye(dim), atol=tol)
        np.testing.assert_allclose(inv, np.linalg.inv(a), rtol=1e-10, atol=1e-12)

    def test_moderately_ill_conditioned_still_inverts(self, backend, rng):
        a = with_condition(rng, 6, 1e8)
        buf = a.ravel().copy()
        invert_matrix(6, buf, alloc_pivot_buf(6), alloc_scratch(6))
        tol = select_tolerance(np.float64, is_ill_conditioned=True)
        np.testing.assert_allclose(buf.reshape(6, 6) @ a, np.eye(6), atol=tol.atol)

    def test_zero_dimension(self, backend):
        invert_matrix(0, np.zeros(0), alloc_pivot_buf(0), alloc_scratch(0))

    def test_exactly_singular(self, backend):
        buf = np.array([[1.0, 2.0], [2.0, 4.0]]).ravel()
        with pytest.raises(SingularMatrixError) as exc_info:
            invert_matrix(2, buf, alloc_pivot_buf(2), alloc_scratch(2))
        assert exc_info.value.dim == 2
        assert exc_info.value.rcond == 0.0

    def test_zero_matrix(self, backend):
        with pytest.raises(SingularMatrixError):
            invert_matrix(3, np.zeros(9), alloc_pivot_buf(3), alloc_scratch(3))

    def test_numerically_singular(self, backend, rng):
        buf = with_condition(rng, 8, 1e17).ravel().copy()
        with pytest.raises(SingularMatrixError):
            invert_matrix(8, buf, alloc_pivot_buf(8), alloc_scratch(8))

    def test_rcond_check_can_be_skipped(self, backend, rng):
        a = with_condition(rng, 8, 1e17)
        with pytest.raises(SingularMatrixError):
            invert_matrix(8, a.ravel().copy(), alloc_pivot_buf(8), alloc_scratch(8))

        buf = a.ravel().copy()
        invert_matrix(
            8, buf, alloc_pivot_buf(8), alloc_scratch(8), check_rcond=False
        )
        assert np.all(np.isfinite(buf))
        assert not np.array_equal(buf, a.ravel())

    def test_zero_pivot_raises_without_rcond_check(self, backend):
        buf = np.array([[1.0, 2.0], [2.0, 4.0]]).ravel()
        with pytest.raises(SingularMatrixError) as exc_info:
            invert_matrix(
                2, buf, alloc_pivot_buf(2), alloc_scratch(2), check_rcond=False
            )
        assert exc_info.value.rcond == 0.0

    def test_unchecked_matches_checked_when_well_conditioned(self, backend, rng):
        a = well_conditioned(rng, 5)
        checked = a.ravel().copy()
        unchecked = a.ravel().copy()
        invert_matrix(5, checked, alloc_pivot_buf(5), alloc_scratch(5))
        invert_matrix(
            5, unchecked, alloc_pivot_buf(5), alloc_scratch(5), check_rcond=False
        )
        np.testing.assert_allclose(unchecked, checked, rtol=1e-14, atol=0)

    def test_non_finite_input_fails(self, backend):
        buf = np.array([[1.0, np.nan], [0.0, 1.0]]).ravel()
        with pytest.raises(NumericalError):
            invert_matrix(2, buf, alloc_pivot_buf(2), alloc_scratch(2))

    def test_inverse_of_transpose(self, backend, rng):
        """Major order does not matter: inverting A^T yields inv(A)^T."""
        a = well_conditioned(rng, 4)
        row = a.ravel().copy()
        col = a.ravel(order='F').copy()
        invert_matrix(4, row, alloc_pivot_buf(4), alloc_scratch(4))
        invert_matrix(4, col, alloc_pivot_buf(4), alloc_scratch(4))
        np.testing.assert_allclose(col.reshape(4, 4), row.reshape(4, 4).T, rtol=1e-10, atol=1e-12)


class TestInvertMatrixChecked:

    def test_inverts(self, backend, rng):
        a = well_conditioned(rng, 5)
        buf = a.ravel().copy()
        invert_matrix_checked(
            5, buf, alloc_pivot_buf(5, checked=True), alloc_scratch(5, checked=True)
        )
        np.testing.assert_allclose(buf.reshape(5, 5), np.linalg.inv(a), rtol=1e-10, atol=1e-12)

    def test_requires_double_scratch(self, backend, rng):
        buf = well_conditioned(rng, 3).ravel().copy()
        with pytest.raises(DimensionError, match="scratch_buf"):
            invert_matrix_checked(
                3, buf, alloc_pivot_buf(3, checked=True), np.zeros(9)
            )

    def test_singular(self, backend):
        with pytest.raises(SingularMatrixError):
            invert_matrix_checked(
                2, np.ones(4), alloc_pivot_buf(2, checked=True), alloc_scratch(2, checked=True)
            )


# ═══════════════════════════════════════════════════════════════════════
# Single precision split inversion
# ═══════════════════════════════════════════════════════════════════════


class TestSplitFloatInversion:

    def _strided(self, a, stride):
        dim = a.shape[0]
        buf = np.full((dim - 1) * stride + dim, -7.0, dtype=np.float32)
        for i in range(dim):
            buf[i * stride:i * stride + dim] = a[i]
        return buf

    def test_matches_double_inverse(self, backend, rng):
        dim, stride = 6, 9
        a = well_conditioned(rng, dim)
        buf = self._strided(a.astype(np.float32), stride)
        pivots = np.zeros(matrix_finvert_buf1_size(dim), dtype=np.uint8)
        scratch = np.zeros(dim * dim, dtype=np.float32)

        absdet = invert_fmatrix_first_half(dim, stride, buf, pivots, scratch)
        assert absdet == pytest.approx(abs(np.linalg.det(a)), rel=1e-4)

        invert_fmatrix_second_half(dim, stride, buf, pivots, scratch)

        inv = np.array([buf[i * stride:i * stride + dim] for i in range(dim)])
        tol = select_tolerance(np.float32)
        np.testing.assert_allclose(inv, np.linalg.inv(a), rtol=tol.rtol, atol=tol.atol)
        # Row padding is never touched
        for i in range(dim - 1):
            assert np.all(buf[i * stride + dim:(i + 1) * stride] == -7.0)

    def test_singular_first_half(self, backend):
        buf = np.array([[1.0, 2.0], [2.0, 4.0]], dtype=np.float32).ravel()
        pivots = np.zeros(matrix_finvert_buf1_size(2), dtype=np.uint8)
        with pytest.raises(SingularMatrixError):
            invert_fmatrix_first_half(2, 2, buf, pivots, np.zeros(4, dtype=np.float32))

    def test_zero_dimension_determinant(self, backend):
        pivots = np.zeros(0, dtype=np.uint8)
        empty = np.zeros(0, dtype=np.float32)
        assert invert_fmatrix_first_half(0, 0, empty, pivots, empty) == 1.0

    def test_rejects_double_matrix(self, backend):
        pivots = np.zeros(matrix_finvert_buf1_size(2), dtype=np.uint8)
        with pytest.raises(ValidationError):
            invert_fmatrix_first_half(2, 2, np.eye(2).ravel(), pivots, np.zeros(4, dtype=np.float32))


# ═══════════════════════════════════════════════════════════════════════
# Buffer contract
# ═══════════════════════════════════════════════════════════════════════


class TestBufferContract:

    def test_pivot_sizes_follow_backend(self, backend):
        assert matrix_invert_buf1_size(10) == 10 * backend.pivot_elem_alloc
        assert matrix_invert_buf1_size(10, checked=True) == 10 * backend.pivot_checked_elem_alloc
        assert matrix_finvert_buf1_size(10) == 10 * backend.pivot_checked_elem_alloc
        assert backend.pivot_elem_alloc >= backend.index_dtype.itemsize

    def test_scratch_sizes(self):
        assert matrix_invert_scratch_size(4) == 16
        assert matrix_invert_scratch_size(4, checked=True) == 32

    def test_undersized_pivot_buffer(self, backend, rng):
        buf = well_conditioned(rng, 4).ravel().copy()
        short = np.zeros(matrix_invert_buf1_size(4) - 1, dtype=np.uint8)
        with pytest.raises(DimensionError, match="pivot_buf"):
            invert_matrix(4, buf, short, alloc_scratch(4))

    def test_pivot_buffer_must_be_bytes(self, backend, rng):
        buf = well_conditioned(rng, 2).ravel().copy()
        with pytest.raises(ValidationError, match="pivot_buf"):
            invert_matrix(2, buf, np.zeros(2, dtype=np.int64), alloc_scratch(2))

    def test_matrix_too_short(self, backend):
        with pytest.raises(DimensionError, match="matrix"):
            invert_matrix(3, np.zeros(8), alloc_pivot_buf(3), alloc_scratch(3))
