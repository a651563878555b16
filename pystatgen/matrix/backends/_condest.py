"""
1-norm estimation of a matrix inverse from its LU factors.

Hager's method as refined by Higham (the algorithm behind LAPACK's xLACON):
a handful of solves with A and A^T yields a lower bound on ||A^{-1}||_1
that is almost always within a small factor of the true value. The
reciprocal condition estimate is then 1 / (||A||_1 * ||A^{-1}||_1).

Used by backends that have no native condition estimator.
"""

from typing import Any, Callable
import numpy as np
from numpy.typing import NDArray

# solve(x, transpose) returns A^{-1} x, or A^{-T} x when transpose is True
SolveFn = Callable[[NDArray[Any], bool], NDArray[Any]]

MAX_ITERATIONS = 5


def estimate_inverse_norm1(solve: SolveFn, dim: int, dtype: np.dtype | type) -> float:
    """
    Estimate ||A^{-1}||_1 given a solver for A and A^T.

    Args:
        solve: Callable applying A^{-1} (or A^{-T}) to a 1-D vector
        dim: Matrix dimension
        dtype: Element type of the vectors handed to ``solve``

    Returns:
        Lower-bound estimate of the 1-norm of A^{-1}
    """
    if dim == 0:
        return 0.0

    x = np.full(dim, 1.0 / dim, dtype=dtype)
    y = solve(x, False)
    est = float(np.abs(y).sum())
    if dim == 1 or not np.isfinite(est):
        return est

    prev_sign: NDArray[Any] | None = None
    for _ in range(MAX_ITERATIONS):
        sign = np.where(y >= 0, 1.0, -1.0).astype(dtype)
        if prev_sign is not None and np.array_equal(sign, prev_sign):
            break
        prev_sign = sign

        z = solve(sign, True)
        j = int(np.argmax(np.abs(z)))
        if abs(float(z[j])) <= float((z * x).sum()):
            break

        x = np.zeros(dim, dtype=dtype)
        x[j] = 1.0
        y = solve(x, False)
        new_est = float(np.abs(y).sum())
        if new_est <= est:
            break
        est = new_est

    # Higham's alternating-sign test vector
    idx = np.arange(dim, dtype=np.float64)
    alt = np.where(idx % 2 == 0, 1.0, -1.0) * (1.0 + idx / (dim - 1))
    y_alt = solve(alt.astype(dtype), False)
    alt_est = 2.0 * float(np.abs(y_alt).sum()) / (3.0 * dim)

    return max(est, alt_est)


def reciprocal_condition(anorm: float, ainv_norm: float) -> float:
    """1 / (||A|| * ||A^{-1}||), with 0 for a zero or non-finite product."""
    if anorm == 0.0 or ainv_norm == 0.0:
        return 0.0
    product = anorm * ainv_norm
    if not np.isfinite(product):
        return 0.0
    return 1.0 / product
