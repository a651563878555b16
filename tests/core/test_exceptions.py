"""
Tests for PyStatGen exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyStatGenError)
    - Diagnostic attributes on SingularMatrixError, BackendSolveError,
      BackendUnavailableError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pystatgen.core.exceptions import (
    BackendSolveError,
    BackendUnavailableError,
    DimensionError,
    NumericalError,
    PyStatGenError,
    SingularMatrixError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyStatGenError."""

    def test_validation_error_is_pystatgen_error(self):
        with pytest.raises(PyStatGenError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("stride too small")

    def test_singular_matrix_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise SingularMatrixError("singular")

    def test_backend_solve_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise BackendSolveError("dgesvd failed")

    def test_backend_unavailable_is_not_numerical_error(self):
        err = BackendUnavailableError("no torch", backend='torch')
        assert isinstance(err, PyStatGenError)
        assert not isinstance(err, NumericalError)


# ═══════════════════════════════════════════════════════════════════════
# SingularMatrixError
# ═══════════════════════════════════════════════════════════════════════


class TestSingularMatrixError:
    """SingularMatrixError carries matrix diagnostic attributes."""

    def test_all_attributes(self):
        err = SingularMatrixError(
            "X'X is singular",
            matrix_name="X'X",
            rcond=1e-17,
            dim=4,
            pivot_index=3,
        )
        assert str(err) == "X'X is singular"
        assert err.matrix_name == "X'X"
        assert err.rcond == 1e-17
        assert err.dim == 4
        assert err.pivot_index == 3

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.rcond is None
        assert err.dim is None
        assert err.pivot_index is None

    def test_catchable_with_attributes(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            raise SingularMatrixError("singular", matrix_name="A", rcond=0.0)
        assert exc_info.value.matrix_name == "A"
        assert exc_info.value.rcond == 0.0


# ═══════════════════════════════════════════════════════════════════════
# Backend errors
# ═══════════════════════════════════════════════════════════════════════


class TestBackendErrors:

    def test_solve_error_attributes(self):
        err = BackendSolveError("dsyevr failed", routine='dsyevr', info=2)
        assert err.routine == 'dsyevr'
        assert err.info == 2

    def test_solve_error_defaults(self):
        err = BackendSolveError("failed")
        assert err.routine is None
        assert err.info is None

    def test_unavailable_backend_name(self):
        err = BackendUnavailableError("torch missing", backend='torch')
        assert err.backend == 'torch'
        assert "torch missing" in str(err)
