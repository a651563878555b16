"""
Core infrastructure for PyStatGen.

Shared abstractions used by the matrix primitives and the regression
surface built on them.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Buffer and input validators
    compute: Device selection, timing, numerical thresholds
"""

from pystatgen.core.result import Result
from pystatgen.core.exceptions import (
    PyStatGenError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    BackendSolveError,
    BackendUnavailableError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyStatGenError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "BackendSolveError",
    "BackendUnavailableError",
]
