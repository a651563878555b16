"""
Exception hierarchy for PyStatGen.

All exceptions inherit from PyStatGenError so callers can catch any
library-specific failure. The matrix kernels never return error flags:
a singular matrix or a failed backend routine raises one of the typed
errors below and the caller decides what "cannot fit" means.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyStatGenError(Exception):
    """Base exception for all PyStatGen errors."""
    pass


class ValidationError(PyStatGenError):
    """
    Input validation failed.

    Raised when a caller-supplied buffer, dimension or stride fails a
    precondition check at the public boundary.
    """
    pass


class DimensionError(ValidationError):
    """
    Dimensions, strides or buffer lengths are inconsistent.

    Raised for negative dimensions, strides smaller than the logical
    extent, and buffers too short for the requested view.
    """
    pass


class NumericalError(PyStatGenError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or too ill-conditioned to invert.

    Raised when LU factorization hits an exactly zero pivot or when the
    reciprocal condition estimate falls below MATRIX_SINGULAR_RCOND.
    The contents of the matrix buffer are unspecified afterwards.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rcond: Reciprocal condition estimate, if it was computed
        dim: Dimension of the square matrix
        pivot_index: 1-based index of the zero pivot, if that was the cause
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rcond: float | None = None,
        dim: int | None = None,
        pivot_index: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rcond = rcond
        self.dim = dim
        self.pivot_index = pivot_index


class BackendSolveError(NumericalError):
    """
    A backend routine reported failure.

    Raised when a LAPACK/torch routine returns a nonzero info code or
    fails to converge (SVD, symmetric eigensolver).

    Attributes:
        routine: Name of the failing routine (e.g. 'dgesvd', 'dsyevr')
        info: Backend status code, if available
    """

    def __init__(
        self,
        message: str,
        routine: str | None = None,
        info: int | None = None,
    ):
        super().__init__(message)
        self.routine = routine
        self.info = info


class BackendUnavailableError(PyStatGenError):
    """
    The configured matrix backend cannot be loaded.

    Attributes:
        backend: Name of the requested backend
    """

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(message)
        self.backend = backend
