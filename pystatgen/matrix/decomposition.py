"""
Rectangular SVD and partial symmetric eigendecomposition.

Both follow the workspace-query pattern: ask for the workspace size first,
allocate a byte buffer of that size, then make the call. Sizes depend on
the configured backend.
"""

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from pystatgen.core.exceptions import BackendSolveError, ValidationError
from pystatgen.core.validation import (
    check_buffer,
    check_nonnegative,
    check_writable,
)
from pystatgen.matrix import backends as _backends
from pystatgen.matrix.layout import strided_view

_F64_BYTES = np.dtype(np.float64).itemsize


def get_svd_rect_lwork(major_ct: int, minor_ct: int) -> int:
    """LAPACK-style workspace element count for svd_rect()."""
    check_nonnegative(major_ct, 'major_ct')
    check_nonnegative(minor_ct, 'minor_ct')
    return _backends.get_backend().svd_lwork(major_ct, minor_ct)


def svd_rect_wkspace_size(major_ct: int, minor_ct: int, lwork: int) -> int:
    """
    Bytes of workspace svd_rect() needs.

    Covers the right singular vectors (min(major_ct, minor_ct) rows of
    minor_ct doubles) followed by ``lwork`` doubles of routine workspace.
    """
    check_nonnegative(major_ct, 'major_ct')
    check_nonnegative(minor_ct, 'minor_ct')
    check_nonnegative(lwork, 'lwork')
    return (min(major_ct, minor_ct) * minor_ct + lwork) * _F64_BYTES


def svd_rect(
    major_ct: int,
    minor_ct: int,
    lwork: int,
    matrix: NDArray[np.float64],
    ss: NDArray[np.float64],
    wkspace: NDArray[np.uint8],
) -> None:
    """
    Thin SVD of a row-major major_ct x minor_ct matrix.

    With k = min(major_ct, minor_ct) and M = V @ diag(ss) @ U^T:

    - ``ss[:k]`` receives the singular values, non-increasing
    - the first k elements of each row of ``matrix`` are overwritten with
      the matching row of V; the remaining minor_ct - k are left as-is
    - U^T (k rows of minor_ct, each singular vector contiguous) is written
      to the head of ``wkspace`` viewed as float64

    Args:
        major_ct: Rows of M
        minor_ct: Columns of M
        lwork: Value returned by get_svd_rect_lwork()
        matrix: major_ct * minor_ct float64 elements
        ss: float64, at least k elements
        wkspace: uint8, at least svd_rect_wkspace_size() bytes

    Raises:
        BackendSolveError: The SVD did not converge
    """
    check_nonnegative(major_ct, 'major_ct')
    check_nonnegative(minor_ct, 'minor_ct')
    check_nonnegative(lwork, 'lwork')
    k = min(major_ct, minor_ct)
    check_buffer(matrix, np.float64, major_ct * minor_ct, 'matrix')
    check_writable(matrix, 'matrix')
    check_buffer(ss, np.float64, k, 'ss')
    check_writable(ss, 'ss')
    check_buffer(
        wkspace, np.uint8, svd_rect_wkspace_size(major_ct, minor_ct, lwork), 'wkspace'
    )
    check_writable(wkspace, 'wkspace')
    if k == 0:
        return

    m = strided_view(matrix, major_ct, minor_ct, minor_ct)
    u, s, vt = _backends.get_backend().svd(m)
    ss[:k] = s
    m[:, :k] = u
    right = wkspace[:k * minor_ct * _F64_BYTES].view(np.float64)
    strided_view(right, k, minor_ct, minor_ct)[...] = vt


@dataclass(frozen=True)
class EigvecsWorkspace:
    """Workspace sizes for extract_eigvecs()."""
    lwork: int
    liwork: int
    wkspace_byte_ct: int


def _eigvecs_byte_ct(lwork: int, liwork: int, pc_ct: int, index_size: int) -> int:
    # work doubles, then support pairs and iwork in backend index width
    return lwork * _F64_BYTES + (2 * pc_ct + liwork) * index_size


def get_extract_eigvecs_lworks(dim: int, pc_ct: int) -> EigvecsWorkspace:
    """
    Workspace query for extract_eigvecs().

    Raises:
        ValidationError: If pc_ct > dim
    """
    check_nonnegative(dim, 'dim')
    check_nonnegative(pc_ct, 'pc_ct')
    if pc_ct > dim:
        raise ValidationError(f"pc_ct ({pc_ct}) cannot exceed dim ({dim})")
    backend = _backends.get_backend()
    lwork, liwork = backend.eigh_lworks(dim)
    return EigvecsWorkspace(
        lwork=lwork,
        liwork=liwork,
        wkspace_byte_ct=_eigvecs_byte_ct(
            lwork, liwork, pc_ct, backend.index_dtype.itemsize
        ),
    )


def extract_eigvecs(
    dim: int,
    pc_ct: int,
    lwork: int,
    liwork: int,
    matrix: NDArray[np.float64],
    eigvals: NDArray[np.float64],
    reverse_eigvecs: NDArray[np.float64],
    wkspace: NDArray[np.uint8],
) -> None:
    """
    Top ``pc_ct`` eigenpairs of a symmetric dim x dim matrix.

    Only the lower triangle of the row-major ``matrix`` is read, which is
    exactly what multiply_self_transpose() produces. Callers must treat
    ``matrix`` as scratch after the call.

    Output order is INCREASING eigenvalue: ``eigvals[pc_ct - 1]`` is the
    largest. ``reverse_eigvecs`` is eigenvector-major (pc_ct rows of dim),
    row i pairing with ``eigvals[i]``. Iterate backwards for principal
    components in the usual order.

    Raises:
        BackendSolveError: The eigensolver failed, returned fewer than
            pc_ct eigenpairs, or the lower triangle or the result holds
            NaN/inf. ``eigvals`` and ``reverse_eigvecs`` are left untouched.
    """
    check_nonnegative(dim, 'dim')
    check_nonnegative(pc_ct, 'pc_ct')
    check_nonnegative(lwork, 'lwork')
    check_nonnegative(liwork, 'liwork')
    if pc_ct > dim:
        raise ValidationError(f"pc_ct ({pc_ct}) cannot exceed dim ({dim})")
    check_buffer(matrix, np.float64, dim * dim, 'matrix')
    check_writable(matrix, 'matrix')
    check_buffer(eigvals, np.float64, pc_ct, 'eigvals')
    check_writable(eigvals, 'eigvals')
    check_buffer(reverse_eigvecs, np.float64, pc_ct * dim, 'reverse_eigvecs')
    check_writable(reverse_eigvecs, 'reverse_eigvecs')

    backend = _backends.get_backend()
    index_dtype = backend.index_dtype
    check_buffer(
        wkspace, np.uint8,
        _eigvecs_byte_ct(lwork, liwork, pc_ct, index_dtype.itemsize), 'wkspace',
    )
    check_writable(wkspace, 'wkspace')
    if pc_ct == 0:
        return

    a = strided_view(matrix, dim, dim, dim)
    if not np.all(np.isfinite(np.tril(a))):
        raise BackendSolveError(
            f"{backend.name} eigensolver: input matrix has non-finite entries",
            routine=f"{backend.name}.eigh",
        )
    w, v, support = backend.eigh_top(a, pc_ct)
    if not (np.all(np.isfinite(w)) and np.all(np.isfinite(v))):
        raise BackendSolveError(
            f"{backend.name} eigensolver returned non-finite eigenpairs",
            routine=f"{backend.name}.eigh",
        )
    eigvals[:pc_ct] = w
    strided_view(reverse_eigvecs, pc_ct, dim, dim)[...] = v.T

    if support is not None:
        start = lwork * _F64_BYTES
        support_ct = min(support.size, 2 * pc_ct)
        stop = start + support_ct * index_dtype.itemsize
        wkspace[start:stop].view(index_dtype)[:] = support[:support_ct]
