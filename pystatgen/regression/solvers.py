"""
Solver dispatch for regression.

This module provides the fit() function (public API).
"""

from numpy.typing import ArrayLike

from pystatgen.core.validation import check_array
from pystatgen.regression.design import RegressionDesign
from pystatgen.regression.solution import LinearSolution
from pystatgen.regression.backends.normal_equations import NormalEquationsBackend


def fit(X: ArrayLike, y: ArrayLike) -> LinearSolution:
    """
    Fit a linear regression model.

    Solves the ordinary least squares problem:
        min_β ||y - Xβ||²

    via the normal equations on the configured matrix backend. X is used
    as given: include a column of ones for an intercept.

    Args:
        X: Design matrix (n x p). Can be any array-like.
        y: Response vector (n,). Can be any array-like.

    Returns:
        LinearSolution with coefficients, diagnostics, and summary methods

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        SingularMatrixError: If predictors are collinear (cannot fit)

    Example:
        >>> import numpy as np
        >>> from pystatgen.regression import fit
        >>>
        >>> X = np.column_stack([np.ones(100), np.random.randn(100, 2)])
        >>> y = X @ [1, 2, 3] + np.random.randn(100) * 0.1
        >>>
        >>> result = fit(X, y)
        >>> print(result.coefficients)
        >>> print(result.summary())
    """
    # === Input Validation ===
    X_arr = check_array(X, 'X')
    y_arr = check_array(y, 'y')

    # === Construct Design ===
    design = RegressionDesign.build(X_arr, y_arr)

    # === Solve ===
    result = NormalEquationsBackend().solve(design)

    # === Wrap and Return ===
    return LinearSolution(_result=result, _design=design)
