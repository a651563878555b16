"""
Regression design.

Holds the validated design matrix and response together with the
predictor-major flat buffer the matrix kernels consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pystatgen.core.validation import (
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_ndim,
)


@dataclass(frozen=True)
class RegressionDesign:
    """
    Validated regression design.

    Immutable after construction. Build with RegressionDesign.build(X, y).

    Attributes:
        X: Design matrix (n x p), sample-major
        y: Response vector (n,)
        predictors_pmaj: X^T as a flat C-contiguous float64 buffer
            (p rows of n), the layout linear_regression_inv() reads
    """
    X: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    predictors_pmaj: NDArray[np.float64]
    n: int
    p: int

    @classmethod
    def build(cls, X: NDArray, y: NDArray) -> RegressionDesign:
        """
        Validate arrays and lay out the predictor-major buffer.

        Raises:
            ValidationError: Wrong shapes, non-finite values, or fewer
                samples than predictors
            DimensionError: X and y lengths differ
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_ndim(X, 2, 'X')
        check_ndim(y, 1, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        check_min_samples(X, p, 'X')

        predictors_pmaj = np.ascontiguousarray(X.T).ravel()
        y = np.ascontiguousarray(y)
        return cls(X=X, y=y, predictors_pmaj=predictors_pmaj, n=n, p=p)
