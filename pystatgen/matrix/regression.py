"""
Ordinary least squares through the normal equations.

Operates on a predictor-major design: row i of ``predictors_pmaj`` is
predictor i across all samples, i.e. X^T stored row-major. That is the
layout genotype-derived covariates arrive in, and it makes X^T X a
self-transpose product.
"""

import numpy as np
from numpy.typing import NDArray

from pystatgen.core.exceptions import SingularMatrixError
from pystatgen.core.validation import check_buffer, check_nonnegative, check_writable
from pystatgen.matrix.inversion import invert_matrix
from pystatgen.matrix.layout import reflect_lower_triangle
from pystatgen.matrix.multiply import multiply_self_transpose, row_major_matrix_multiply


def linear_regression_inv(
    pheno_d: NDArray[np.float64],
    predictors_pmaj: NDArray[np.float64],
    predictor_ct: int,
    sample_ct: int,
    fitted_coefs: NDArray[np.float64],
    xtx_inv: NDArray[np.float64],
    xt_y: NDArray[np.float64],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[np.float64],
) -> None:
    """
    Fit y = X @ beta by OLS, writing beta and (X^T X)^{-1}.

    Args:
        pheno_d: Phenotype vector, sample_ct elements
        predictors_pmaj: predictor_ct x sample_ct, row-major (X^T)
        predictor_ct: Number of predictors, intercept included
        sample_ct: Number of samples
        fitted_coefs: Receives beta, predictor_ct elements
        xtx_inv: Receives (X^T X)^{-1}, predictor_ct x predictor_ct
        xt_y: Receives X^T y, predictor_ct elements
        pivot_buf: Sized by matrix_invert_buf1_size(predictor_ct)
        scratch_buf: Sized by matrix_invert_scratch_size(predictor_ct)

    Raises:
        SingularMatrixError: X^T X is singular or ill-conditioned
            (collinear predictors). ``fitted_coefs`` is not written.
    """
    check_nonnegative(predictor_ct, 'predictor_ct')
    check_nonnegative(sample_ct, 'sample_ct')
    check_buffer(fitted_coefs, np.float64, predictor_ct, 'fitted_coefs')
    check_writable(fitted_coefs, 'fitted_coefs')

    multiply_self_transpose(predictors_pmaj, predictor_ct, sample_ct, xtx_inv)
    reflect_lower_triangle(predictor_ct, xtx_inv)
    row_major_matrix_multiply(
        predictors_pmaj, pheno_d, predictor_ct, 1, sample_ct, xt_y
    )

    try:
        invert_matrix(predictor_ct, xtx_inv, pivot_buf, scratch_buf)
    except SingularMatrixError as e:
        raise SingularMatrixError(
            f"Cannot fit: X'X is singular, predictors are collinear or "
            f"constant ({e})",
            matrix_name="X'X",
            rcond=e.rcond,
            dim=e.dim,
            pivot_index=e.pivot_index,
        ) from e

    row_major_matrix_multiply(
        xtx_inv, xt_y, predictor_ct, 1, predictor_ct, fitted_coefs
    )
