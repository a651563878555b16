"""
LAPACK/BLAS backend via scipy.linalg.

The default configuration. GEMM, SYRK and the dot product go to BLAS;
inversion is xGETRF + xGECON + xGETRI; the SVD is xGESVD and eigenpairs
come from xSYEVR restricted to the top of the spectrum. Precision follows
the operand dtype (d* routines for float64, s* for float32).

The f2py wrappers copy non-contiguous views into Fortran order before the
call, so results are always written back through the caller's view.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import get_blas_funcs, get_lapack_funcs

from pystatgen.core.exceptions import BackendSolveError
from pystatgen.matrix.backends.base import (
    gesvd_min_lwork,
    raise_if_ill_conditioned,
    raise_zero_pivot,
    syevr_min_lworks,
)


def _routine_name(func: Any, suffix: str) -> str:
    return f"{getattr(func, 'typecode', 'd')}{suffix}"


def _check_info(info: int, func: Any, suffix: str) -> None:
    if info != 0:
        name = _routine_name(func, suffix)
        if info < 0:
            message = f"{name}: argument {-info} had an illegal value"
        else:
            message = f"{name} failed to converge (info={info})"
        raise BackendSolveError(message, routine=name, info=int(info))


class LapackBackend:
    """
    scipy.linalg BLAS/LAPACK backend.

    Pivots are stored as 32-bit integers in the 0-based convention scipy's
    getrf/getri wrappers use. The checked inversion reserves a second
    ``dim`` integers per the xGECON iwork contract.
    """

    @property
    def name(self) -> str:
        return 'cpu_lapack'

    @property
    def index_dtype(self) -> np.dtype:
        return np.dtype(np.int32)

    @property
    def pivot_elem_alloc(self) -> int:
        return 4

    @property
    def pivot_checked_elem_alloc(self) -> int:
        return 8

    # === Products ===

    def dot(self, vec1: NDArray[Any], vec2: NDArray[Any]) -> float:
        dot = get_blas_funcs('dot', (vec1, vec2))
        return float(dot(vec1, vec2))

    def gemm(self, a: NDArray[Any], b: NDArray[Any], beta: float, c: NDArray[Any]) -> None:
        gemm = get_blas_funcs('gemm', (a, b))
        if beta == 0.0:
            out = gemm(1.0, a, b)
        else:
            out = gemm(1.0, a, b, beta=beta, c=c)
        c[...] = out

    def syrk_lower(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        syrk = get_blas_funcs('syrk', (a,))
        full = syrk(1.0, a, lower=1)
        rows, cols = np.tril_indices(a.shape[0])
        c[rows, cols] = full[rows, cols]

    def gram_incr(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        gemm = get_blas_funcs('gemm', (a, c))
        c[...] = gemm(1.0, a, a, beta=1.0, c=c, trans_a=1)

    # === Inversion ===

    def lu_decompose(self, a: NDArray[Any], piv: NDArray[Any], check_rcond: bool) -> None:
        getrf, gecon, lange = get_lapack_funcs(('getrf', 'gecon', 'lange'), (a,))
        dim = a.shape[0]
        anorm = float(lange('1', a)) if check_rcond else 0.0

        lu, lu_piv, info = getrf(a)
        if info > 0:
            raise_zero_pivot(int(info), dim)
        _check_info(info, getrf, 'getrf')
        a[...] = lu
        piv[:dim] = lu_piv

        if check_rcond:
            rcond, info = gecon(lu, anorm, norm='1')
            _check_info(info, gecon, 'gecon')
            raise_if_ill_conditioned(float(rcond), dim)

    def lu_invert(self, a: NDArray[Any], piv: NDArray[Any], work: NDArray[Any]) -> None:
        getri = get_lapack_funcs('getri', (a,))
        dim = a.shape[0]
        inv, info = getri(a, piv[:dim], lwork=max(work.size, dim, 1))
        if info > 0:
            raise_zero_pivot(int(info), dim)
        _check_info(info, getri, 'getri')
        a[...] = inv

    # === Decompositions ===

    def svd_lwork(self, row_ct: int, col_ct: int) -> int:
        if row_ct == 0 or col_ct == 0:
            return gesvd_min_lwork(row_ct, col_ct)
        gesvd_lwork = get_lapack_funcs('gesvd_lwork', dtype=np.float64)
        work, info = gesvd_lwork(row_ct, col_ct, compute_uv=1, full_matrices=0)
        _check_info(info, gesvd_lwork, 'gesvd')
        return max(int(np.ceil(float(np.real(work)))), gesvd_min_lwork(row_ct, col_ct))

    def svd(self, m):
        gesvd = get_lapack_funcs('gesvd', (m,))
        lwork = self.svd_lwork(*m.shape)
        u, s, vt, info = gesvd(m, compute_uv=1, full_matrices=0, lwork=lwork)
        _check_info(info, gesvd, 'gesvd')
        return u, s, vt

    def eigh_lworks(self, dim: int) -> tuple[int, int]:
        if dim == 0:
            return syevr_min_lworks(dim)
        syevr_lwork = get_lapack_funcs('syevr_lwork', dtype=np.float64)
        work, iwork, info = syevr_lwork(dim, lower=1)
        _check_info(info, syevr_lwork, 'syevr')
        min_lwork, min_liwork = syevr_min_lworks(dim)
        return (
            max(int(np.ceil(float(np.real(work)))), min_lwork),
            max(int(iwork), min_liwork),
        )

    def eigh_top(self, a, pc_ct):
        syevr = get_lapack_funcs('syevr', (a,))
        dim = a.shape[0]
        lwork, liwork = self.eigh_lworks(dim)
        w, z, found, isuppz, info = syevr(
            a,
            compute_v=1,
            range='I',
            lower=1,
            il=dim - pc_ct + 1,
            iu=dim,
            lwork=lwork,
            liwork=liwork,
        )
        _check_info(info, syevr, 'syevr')
        if found != pc_ct:
            name = _routine_name(syevr, 'syevr')
            raise BackendSolveError(
                f"{name} returned {found} of {pc_ct} requested eigenpairs",
                routine=name,
            )
        return w[:found], z[:, :found], isuppz
