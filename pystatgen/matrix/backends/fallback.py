"""
Pure-arithmetic fallback backend.

Used when no BLAS/LAPACK-backed path is configured. Every multiply and
every step of the inversion is written out as elementwise numpy arithmetic
(broadcast multiplies, sums, row swaps), so results do not depend on the
BLAS that numpy happens to link. Loop structure follows the reference
kernels: GEMM walks output columns, the symmetric product walks output
rows, inversion is right-looking LU with partial pivoting followed by
forward/back substitution against the identity.

The SVD and eigensolver delegate to numpy.linalg, whose bundled routines
are available in every numpy build.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pystatgen.core.exceptions import BackendSolveError
from pystatgen.matrix.backends.base import (
    gesvd_min_lwork,
    norm1,
    raise_if_ill_conditioned,
    raise_zero_pivot,
    syevr_min_lworks,
)
from pystatgen.matrix.backends._condest import (
    estimate_inverse_norm1,
    reciprocal_condition,
)


class FallbackBackend:
    """
    Backend with no external linear-algebra dependency.

    Pivots are stored as 0-based int64 row indices: pivot k records the
    row swapped with row k at elimination step k.
    """

    @property
    def name(self) -> str:
        return 'cpu_fallback'

    @property
    def index_dtype(self) -> np.dtype:
        return np.dtype(np.int64)

    @property
    def pivot_elem_alloc(self) -> int:
        return 8

    @property
    def pivot_checked_elem_alloc(self) -> int:
        return 8

    # === Products ===

    def dot(self, vec1: NDArray[Any], vec2: NDArray[Any]) -> float:
        return float((vec1 * vec2).sum())

    def gemm(self, a: NDArray[Any], b: NDArray[Any], beta: float, c: NDArray[Any]) -> None:
        for col_idx in range(c.shape[1]):
            col = (a * b[:, col_idx]).sum(axis=1)
            if beta == 0.0:
                c[:, col_idx] = col
            else:
                c[:, col_idx] = beta * c[:, col_idx] + col

    def syrk_lower(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        for row_idx in range(a.shape[0]):
            c[row_idx, :row_idx + 1] = (a[:row_idx + 1] * a[row_idx]).sum(axis=1)

    def gram_incr(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        for row_idx in range(c.shape[0]):
            c[row_idx] += (a[:, row_idx, None] * a).sum(axis=0)

    # === Inversion ===

    def lu_decompose(self, a: NDArray[Any], piv: NDArray[Any], check_rcond: bool) -> None:
        """
        Right-looking LU with partial pivoting, in place.

        On return ``a`` holds L (unit diagonal, strictly below) and U (on
        and above the diagonal) of P @ A = L @ U.

        Raises:
            SingularMatrixError: On an exactly zero pivot, or when
                check_rcond is set and the 1-norm rcond estimate is below
                MATRIX_SINGULAR_RCOND.
        """
        dim = a.shape[0]
        anorm = norm1(a) if check_rcond else 0.0

        for k in range(dim):
            p = k + int(np.argmax(np.abs(a[k:, k])))
            piv[k] = p
            if a[p, k] == 0.0:
                raise_zero_pivot(k + 1, dim)
            if p != k:
                a[[k, p]] = a[[p, k]]
            if k + 1 < dim:
                a[k + 1:, k] /= a[k, k]
                a[k + 1:, k + 1:] -= a[k + 1:, k, None] * a[k, k + 1:]

        if check_rcond:
            def solve(x: NDArray[Any], transpose: bool) -> NDArray[Any]:
                rhs = x.copy().reshape(dim, 1)
                _lu_solve_inplace(a, piv, rhs, transpose)
                return rhs[:, 0]

            ainv_norm = estimate_inverse_norm1(solve, dim, a.dtype)
            raise_if_ill_conditioned(reciprocal_condition(anorm, ainv_norm), dim)

    def lu_invert(self, a: NDArray[Any], piv: NDArray[Any], work: NDArray[Any]) -> None:
        work[...] = 0
        np.fill_diagonal(work, 1)
        _lu_solve_inplace(a, piv, work, False)
        a[...] = work

    # === Decompositions ===

    def svd_lwork(self, row_ct: int, col_ct: int) -> int:
        return gesvd_min_lwork(row_ct, col_ct)

    def svd(self, m):
        try:
            u, s, vt = np.linalg.svd(m, full_matrices=False)
        except np.linalg.LinAlgError as e:
            raise BackendSolveError(
                f"SVD did not converge: {e}", routine='numpy.linalg.svd'
            ) from e
        return u, s, vt

    def eigh_lworks(self, dim: int) -> tuple[int, int]:
        return syevr_min_lworks(dim)

    def eigh_top(self, a, pc_ct):
        try:
            w, v = np.linalg.eigh(a, UPLO='L')
        except np.linalg.LinAlgError as e:
            raise BackendSolveError(
                f"Symmetric eigensolver did not converge: {e}",
                routine='numpy.linalg.eigh',
            ) from e
        dim = a.shape[0]
        return w[dim - pc_ct:], v[:, dim - pc_ct:], None


def _lu_solve_inplace(
    lu: NDArray[Any],
    piv: NDArray[Any],
    rhs: NDArray[Any],
    transpose: bool,
) -> None:
    """
    Overwrite ``rhs`` (dim x k) with A^{-1} rhs, or A^{-T} rhs.

    P @ A = L @ U, so A = P^T L U and A^T = U^T L^T P.
    """
    dim = lu.shape[0]
    if not transpose:
        for k in range(dim):
            p = int(piv[k])
            if p != k:
                rhs[[k, p]] = rhs[[p, k]]
        for k in range(dim - 1):
            rhs[k + 1:] -= lu[k + 1:, k, None] * rhs[k]
        for k in range(dim - 1, -1, -1):
            rhs[k] /= lu[k, k]
            if k:
                rhs[:k] -= lu[:k, k, None] * rhs[k]
    else:
        for k in range(dim):
            if k:
                rhs[k] -= (lu[:k, k, None] * rhs[:k]).sum(axis=0)
            rhs[k] /= lu[k, k]
        for k in range(dim - 2, -1, -1):
            rhs[k] -= (lu[k + 1:, k, None] * rhs[k + 1:]).sum(axis=0)
        for k in range(dim - 1, -1, -1):
            p = int(piv[k])
            if p != k:
                rhs[[k, p]] = rhs[[p, k]]
