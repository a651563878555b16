"""
In-place matrix inversion by LU factorization with partial pivoting.

Double precision:
    invert_matrix(): dim x dim contiguous float64, checked by default
    invert_matrix_checked(): same operation under the larger buffer contract

Single precision, split in two so callers can inspect the determinant
(e.g. to skip a model whose covariance is degenerate) before paying for
the inversion:
    invert_fmatrix_first_half(): LU + condition check, returns |det(A)|
    invert_fmatrix_second_half(): completes the inversion

Inversion does not care about major order, since inv(A^T) = inv(A)^T.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any

from pystatgen.core.validation import (
    check_buffer,
    check_nonnegative,
    check_stride,
    check_writable,
)
from pystatgen.matrix import backends as _backends
from pystatgen.matrix.buffers import matrix_invert_scratch_size, pivot_view
from pystatgen.matrix.layout import min_buffer_size, strided_view


def _prepare(
    dim: int,
    stride: int,
    matrix: NDArray[Any],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[Any],
    dtype: type,
    checked: bool,
    scratch_checked: bool,
):
    check_nonnegative(dim, 'dim')
    check_stride(stride, dim, 'stride')
    check_buffer(matrix, dtype, min_buffer_size(dim, dim, stride), 'matrix')
    check_writable(matrix, 'matrix')
    check_buffer(
        scratch_buf, dtype,
        matrix_invert_scratch_size(dim, checked=scratch_checked), 'scratch_buf',
    )
    check_writable(scratch_buf, 'scratch_buf')

    backend = _backends.get_backend()
    elem_alloc = backend.pivot_checked_elem_alloc if checked else backend.pivot_elem_alloc
    piv = pivot_view(pivot_buf, dim, elem_alloc)
    a = strided_view(matrix, dim, dim, stride)
    work = strided_view(scratch_buf, dim, dim, dim)
    return backend, a, piv, work


def invert_matrix(
    dim: int,
    matrix: NDArray[np.float64],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[np.float64],
    *,
    check_rcond: bool = True,
) -> None:
    """
    Invert a dense dim x dim float64 matrix in place.

    Args:
        dim: Matrix dimension
        matrix: dim * dim elements; replaced by the inverse on success
        pivot_buf: uint8, at least matrix_invert_buf1_size(dim) bytes
        scratch_buf: float64, at least matrix_invert_scratch_size(dim)
            elements
        check_rcond: Estimate the 1-norm reciprocal condition number and
            reject matrices below MATRIX_SINGULAR_RCOND. Pass False only when
            the caller has already established the matrix is well
            conditioned.

    Raises:
        SingularMatrixError: Zero pivot, or ill-conditioned matrix
        BackendSolveError: The backend routine reported a failure
        ValidationError / DimensionError: Bad buffers or dimensions

    After a raise the contents of ``matrix`` are unspecified.
    """
    backend, a, piv, work = _prepare(
        dim, dim, matrix, pivot_buf, scratch_buf, np.float64,
        checked=False, scratch_checked=False,
    )
    if dim == 0:
        return
    backend.lu_decompose(a, piv, check_rcond)
    backend.lu_invert(a, piv, work)


def invert_matrix_checked(
    dim: int,
    matrix: NDArray[np.float64],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[np.float64],
) -> None:
    """
    Checked inversion under the larger buffer contract.

    ``pivot_buf`` must hold matrix_invert_buf1_size(dim, checked=True)
    bytes and ``scratch_buf`` 2 * dim * dim elements. The condition check
    always runs.
    """
    backend, a, piv, work = _prepare(
        dim, dim, matrix, pivot_buf, scratch_buf, np.float64,
        checked=True, scratch_checked=True,
    )
    if dim == 0:
        return
    backend.lu_decompose(a, piv, True)
    backend.lu_invert(a, piv, work)


def invert_fmatrix_first_half(
    dim: int,
    stride: int,
    matrix: NDArray[np.float32],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[np.float32],
) -> float:
    """
    LU-decompose a strided float32 matrix in place and check conditioning.

    Args:
        dim: Matrix dimension
        stride: Row stride of ``matrix`` (>= dim)
        matrix: Overwritten with the LU factors
        pivot_buf: uint8, at least matrix_finvert_buf1_size(dim) bytes;
            receives the pivots consumed by invert_fmatrix_second_half()
        scratch_buf: float32, at least dim * dim elements

    Returns:
        |det(A)|, the product of the absolute LU diagonal accumulated in
        float64. 1.0 for dim == 0.

    Raises:
        SingularMatrixError: Zero pivot, or ill-conditioned matrix
    """
    backend, a, piv, _ = _prepare(
        dim, stride, matrix, pivot_buf, scratch_buf, np.float32,
        checked=True, scratch_checked=False,
    )
    if dim == 0:
        return 1.0
    backend.lu_decompose(a, piv, True)
    return float(np.prod(np.abs(np.diagonal(a).astype(np.float64))))


def invert_fmatrix_second_half(
    dim: int,
    stride: int,
    matrix: NDArray[np.float32],
    pivot_buf: NDArray[np.uint8],
    scratch_buf: NDArray[np.float32],
) -> None:
    """
    Finish a split inversion started by invert_fmatrix_first_half().

    Must be called on the same ``matrix`` and ``pivot_buf`` the first half
    wrote; anything else gives meaningless results.
    """
    backend, a, piv, work = _prepare(
        dim, stride, matrix, pivot_buf, scratch_buf, np.float32,
        checked=True, scratch_checked=False,
    )
    if dim == 0:
        return
    backend.lu_invert(a, piv, work)
