"""
Matrix backend protocol.

A backend supplies the arithmetic behind the public kernels. The public
functions in pystatgen.matrix validate caller buffers and turn them into
2-D strided views; a backend only ever sees those views, the pivot array
viewed as its own index dtype, and plain Python scalars.

Backends are stateless apart from construction-time settings (device),
so one instance can serve any number of concurrent calls on disjoint
buffers.
"""

from typing import Protocol, Any, runtime_checkable
import numpy as np
from numpy.typing import NDArray

from pystatgen.core.exceptions import SingularMatrixError
from pystatgen.core.compute.tolerances import MATRIX_SINGULAR_RCOND


@runtime_checkable
class MatrixBackend(Protocol):
    """
    Structural interface implemented by every matrix backend.

    Conventions:
        - Matrix arguments are 2-D numpy views into caller buffers; outputs
          are written through them in place.
        - ``piv`` is the caller's pivot buffer viewed as ``index_dtype``.
        - Singularity raises SingularMatrixError, backend routine failure
          raises BackendSolveError.
    """

    @property
    def name(self) -> str:
        """Backend identifier, e.g. 'cpu_lapack'."""
        ...

    @property
    def index_dtype(self) -> np.dtype:
        """Integer type used for pivots (backend index width)."""
        ...

    @property
    def pivot_elem_alloc(self) -> int:
        """Pivot buffer bytes per dimension for unchecked inversion."""
        ...

    @property
    def pivot_checked_elem_alloc(self) -> int:
        """Pivot buffer bytes per dimension for checked inversion."""
        ...

    def dot(self, vec1: NDArray[Any], vec2: NDArray[Any]) -> float:
        """Dot product of two equal-length vectors."""
        ...

    def gemm(self, a: NDArray[Any], b: NDArray[Any], beta: float, c: NDArray[Any]) -> None:
        """c := beta * c + a @ b. With beta == 0, prior c is ignored."""
        ...

    def syrk_lower(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        """Lower triangle (incl. diagonal) of c := a @ a.T; upper untouched."""
        ...

    def gram_incr(self, a: NDArray[Any], c: NDArray[Any]) -> None:
        """c += a.T @ a (full symmetric update)."""
        ...

    def lu_decompose(self, a: NDArray[Any], piv: NDArray[Any], check_rcond: bool) -> None:
        """LU-factor ``a`` in place with partial pivoting and check conditioning."""
        ...

    def lu_invert(self, a: NDArray[Any], piv: NDArray[Any], work: NDArray[Any]) -> None:
        """Replace the LU factors in ``a`` with the inverse."""
        ...

    def svd_lwork(self, row_ct: int, col_ct: int) -> int:
        """Workspace elements needed by svd() for a row_ct x col_ct matrix."""
        ...

    def svd(
        self, m: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Thin SVD m = u @ diag(s) @ vt, s non-increasing."""
        ...

    def eigh_lworks(self, dim: int) -> tuple[int, int]:
        """(lwork, liwork) for the symmetric eigensolver."""
        ...

    def eigh_top(
        self, a: NDArray[np.float64], pc_ct: int
    ) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[Any] | None]:
        """
        Top ``pc_ct`` eigenpairs of a symmetric matrix, reading only its
        lower triangle. Returns (eigvals ascending, eigvecs as columns,
        optional backend support data).
        """
        ...


def norm1(a: NDArray[Any]) -> float:
    """Matrix 1-norm: maximum absolute column sum."""
    if a.size == 0:
        return 0.0
    return float(np.abs(a).sum(axis=0).max())


def raise_if_ill_conditioned(rcond: float, dim: int) -> None:
    """
    Raise SingularMatrixError when ``rcond`` is below MATRIX_SINGULAR_RCOND.

    NaN rcond (from non-finite input) is treated as singular.
    """
    if not rcond >= MATRIX_SINGULAR_RCOND:
        raise SingularMatrixError(
            f"Matrix is singular to working precision: reciprocal condition "
            f"estimate {rcond:.3e} is below {MATRIX_SINGULAR_RCOND:.0e}",
            rcond=float(rcond),
            dim=dim,
        )


def raise_zero_pivot(pivot_index: int, dim: int) -> None:
    """Raise SingularMatrixError for an exactly zero pivot (1-based index)."""
    raise SingularMatrixError(
        f"Matrix is exactly singular: U[{pivot_index}, {pivot_index}] is zero "
        f"after partial pivoting",
        rcond=0.0,
        dim=dim,
        pivot_index=pivot_index,
    )


def gesvd_min_lwork(row_ct: int, col_ct: int) -> int:
    """Documented minimum xGESVD workspace for a row_ct x col_ct matrix."""
    small = min(row_ct, col_ct)
    large = max(row_ct, col_ct)
    return max(1, 3 * small + large, 5 * small)


def syevr_min_lworks(dim: int) -> tuple[int, int]:
    """Documented minimum (lwork, liwork) for xSYEVR."""
    return max(1, 26 * dim), max(1, 10 * dim)
