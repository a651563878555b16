"""
Linear regression on the pystatgen matrix kernels.

Public API:
    fit(X, y) -> LinearSolution

Example:
    >>> from pystatgen.regression import fit
    >>> result = fit(X, y)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pystatgen.regression.design import RegressionDesign
from pystatgen.regression.solution import LinearSolution, LinearParams
from pystatgen.regression.solvers import fit

__all__ = [
    "fit",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]
