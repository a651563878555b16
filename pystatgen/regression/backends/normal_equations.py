"""
Normal-equations backend for linear regression.

Solves OLS with the buffer kernels: X'X by self-transpose product, X'y by
GEMM, then LU inversion of X'X with the condition check on. The matrix
arithmetic runs on whichever matrix backend is configured.
"""

from typing import Any
import numpy as np

from pystatgen.core.result import Result
from pystatgen.core.compute.timing import Timer
from pystatgen.matrix import backends as _backends
from pystatgen.matrix.buffers import alloc_pivot_buf, alloc_scratch
from pystatgen.matrix.regression import linear_regression_inv
from pystatgen.regression.design import RegressionDesign
from pystatgen.regression.solution import LinearParams


class NormalEquationsBackend:
    """
    Regression backend over linear_regression_inv().

    Collinear or constant predictors make X'X singular; that surfaces as
    SingularMatrixError, never as coefficients.
    """

    @property
    def name(self) -> str:
        return 'normal_equations'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via the normal equations.

        Algorithm:
            1. X'X = (X^T)(X^T)^T from the predictor-major buffer
            2. X'y
            3. (X'X)^{-1} by LU, rejecting rcond < MATRIX_SINGULAR_RCOND
            4. β = (X'X)^{-1} X'y, then residuals and diagnostics

        Raises:
            SingularMatrixError: If X'X is singular or ill-conditioned
        """
        matrix_backend = _backends.get_backend()
        timer = Timer(sync_cuda=matrix_backend.name == 'torch_cuda')
        timer.start()

        n, p = design.n, design.p

        with timer.section('allocate'):
            coefficients = np.empty(p, dtype=np.float64)
            xtx_inv = np.empty(p * p, dtype=np.float64)
            xt_y = np.empty(p, dtype=np.float64)
            pivot_buf = alloc_pivot_buf(p)
            scratch_buf = alloc_scratch(p)

        with timer.section('solve'):
            linear_regression_inv(
                design.y, design.predictors_pmaj, p, n,
                coefficients, xtx_inv, xt_y, pivot_buf, scratch_buf,
            )

        with timer.section('residuals'):
            fitted_values = design.X @ coefficients
            residuals = design.y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            tss = float(np.sum((design.y - np.mean(design.y)) ** 2))

        timer.stop()

        df_residual = n - p
        warnings: tuple[str, ...] = ()
        if df_residual <= 0:
            warnings = (
                f"No residual degrees of freedom (n={n}, p={p}); "
                f"standard errors are undefined",
            )

        params = LinearParams(
            coefficients=coefficients,
            xtx_inv=xtx_inv.reshape(p, p),
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            df_residual=df_residual,
        )

        info: dict[str, Any] = {
            'method': 'normal_equations',
            'matrix_backend': matrix_backend.name,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
