"""
Strided generalized multiply family.

Everything here reduces to one kernel,
col_major_matrix_multiply_strided_addassign(), which computes

    C := beta * C + A @ B

over independently strided column-major operands, the same contract as
GEMM without the alpha scale. The row-major variants are the same call
with the operands swapped, since (A @ B)^T = B^T @ A^T and a row-major
matrix is the column-major storage of its transpose.

The symmetric products serve Gram/covariance construction:
multiply_self_transpose() writes only the lower triangle of A @ A^T, and
transpose_multiply_self_incr() accumulates A^T @ A over row chunks.

All routines write through caller buffers and return nothing.
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
from pystatgen.matrix.layout import min_buffer_size, strided_view


def _dotprod(vec1: NDArray[Any], vec2: NDArray[Any], ct: int, dtype: type) -> float:
    check_nonnegative(ct, 'ct')
    check_buffer(vec1, dtype, ct, 'vec1')
    check_buffer(vec2, dtype, ct, 'vec2')
    if ct == 0:
        return 0.0
    return _backends.get_backend().dot(vec1[:ct], vec2[:ct])


def dotprod_d(vec1: NDArray[np.float64], vec2: NDArray[np.float64], ct: int) -> float:
    """Dot product of the first ``ct`` elements of two float64 vectors."""
    return _dotprod(vec1, vec2, ct, np.float64)


def dotprod_f(vec1: NDArray[np.float32], vec2: NDArray[np.float32], ct: int) -> float:
    """Dot product of the first ``ct`` elements of two float32 vectors."""
    return _dotprod(vec1, vec2, ct, np.float32)


def _col_major_strided(
    inmatrix1: NDArray[Any],
    inmatrix2: NDArray[Any],
    row1_ct: int,
    stride1: int,
    col2_ct: int,
    stride2: int,
    common_ct: int,
    stride3: int,
    beta: float,
    outmatrix: NDArray[Any],
    dtype: type,
) -> None:
    for value, name in (
        (row1_ct, 'row1_ct'), (col2_ct, 'col2_ct'), (common_ct, 'common_ct'),
    ):
        check_nonnegative(value, name)
    check_stride(stride1, row1_ct, 'stride1')
    check_stride(stride2, common_ct, 'stride2')
    check_stride(stride3, row1_ct, 'stride3')
    check_buffer(inmatrix1, dtype, min_buffer_size(common_ct, row1_ct, stride1), 'inmatrix1')
    check_buffer(inmatrix2, dtype, min_buffer_size(col2_ct, common_ct, stride2), 'inmatrix2')
    check_buffer(outmatrix, dtype, min_buffer_size(col2_ct, row1_ct, stride3), 'outmatrix')
    check_writable(outmatrix, 'outmatrix')

    if row1_ct == 0 or col2_ct == 0:
        return

    # Column j of a column-major operand is row j of its row-major view.
    c = strided_view(outmatrix, col2_ct, row1_ct, stride3).T
    if common_ct == 0:
        if beta == 0.0:
            c[...] = 0
        else:
            c *= beta
        return

    a = strided_view(inmatrix1, common_ct, row1_ct, stride1).T
    b = strided_view(inmatrix2, col2_ct, common_ct, stride2).T
    _backends.get_backend().gemm(a, b, float(beta), c)


def col_major_matrix_multiply_strided_addassign(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    stride1: int,
    col2_ct: int,
    stride2: int,
    common_ct: int,
    stride3: int,
    beta: float,
    outmatrix: NDArray[np.float64],
) -> None:
    """
    C := beta * C + A @ B for column-major float64 operands.

    Args:
        inmatrix1: A, row1_ct x common_ct, column stride stride1 (>= row1_ct)
        inmatrix2: B, common_ct x col2_ct, column stride stride2 (>= common_ct)
        row1_ct: Rows of A and C
        stride1: Elements between successive columns of A
        col2_ct: Columns of B and C
        stride2: Elements between successive columns of B
        common_ct: Inner dimension
        stride3: Elements between successive columns of C (>= row1_ct)
        beta: 0 overwrites C (prior contents, even NaN, are ignored);
            1 accumulates into C
        outmatrix: C, written in place. Elements between the logical end
            of a column and the next stride are never touched.

    Raises:
        ValidationError / DimensionError: On dtype, dimension, stride or
            buffer-length violations
    """
    _col_major_strided(
        inmatrix1, inmatrix2, row1_ct, stride1, col2_ct, stride2,
        common_ct, stride3, beta, outmatrix, np.float64,
    )


# Spelled the way higher-level code reads it.
multiply_strided_accumulate = col_major_matrix_multiply_strided_addassign


def col_major_matrix_multiply(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    col2_ct: int,
    common_ct: int,
    outmatrix: NDArray[np.float64],
) -> None:
    """C = A @ B for dense column-major operands."""
    col_major_matrix_multiply_strided_addassign(
        inmatrix1, inmatrix2, row1_ct, row1_ct, col2_ct, common_ct,
        common_ct, row1_ct, 0.0, outmatrix,
    )


def row_major_matrix_multiply(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    col2_ct: int,
    common_ct: int,
    outmatrix: NDArray[np.float64],
) -> None:
    """
    C = A @ B for dense row-major operands.

    A is row1_ct x common_ct, B is common_ct x col2_ct, C is row1_ct x col2_ct.
    """
    col_major_matrix_multiply(
        inmatrix2, inmatrix1, col2_ct, row1_ct, common_ct, outmatrix,
    )


def row_major_matrix_multiply_incr(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    col2_ct: int,
    common_ct: int,
    outmatrix: NDArray[np.float64],
) -> None:
    """C += A @ B for dense row-major operands."""
    col_major_matrix_multiply_strided_addassign(
        inmatrix2, inmatrix1, col2_ct, col2_ct, row1_ct, common_ct,
        common_ct, col2_ct, 1.0, outmatrix,
    )


def row_major_matrix_multiply_strided(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    stride1: int,
    col2_ct: int,
    stride2: int,
    common_ct: int,
    stride3: int,
    outmatrix: NDArray[np.float64],
) -> None:
    """
    C = A @ B for strided row-major operands.

    stride1 (>= common_ct), stride2 (>= col2_ct) and stride3 (>= col2_ct)
    are the row strides of A, B and C.
    """
    col_major_matrix_multiply_strided_addassign(
        inmatrix2, inmatrix1, col2_ct, stride2, row1_ct, stride1,
        common_ct, stride3, 0.0, outmatrix,
    )


def row_major_matrix_multiply_strided_incr(
    inmatrix1: NDArray[np.float64],
    inmatrix2: NDArray[np.float64],
    row1_ct: int,
    stride1: int,
    col2_ct: int,
    stride2: int,
    common_ct: int,
    stride3: int,
    outmatrix: NDArray[np.float64],
) -> None:
    """C += A @ B for strided row-major operands."""
    col_major_matrix_multiply_strided_addassign(
        inmatrix2, inmatrix1, col2_ct, stride2, row1_ct, stride1,
        common_ct, stride3, 1.0, outmatrix,
    )


def col_major_fmatrix_multiply_strided(
    inmatrix1: NDArray[np.float32],
    inmatrix2: NDArray[np.float32],
    row1_ct: int,
    stride1: int,
    col2_ct: int,
    stride2: int,
    common_ct: int,
    stride3: int,
    outmatrix: NDArray[np.float32],
) -> None:
    """C = A @ B for strided column-major float32 operands."""
    _col_major_strided(
        inmatrix1, inmatrix2, row1_ct, stride1, col2_ct, stride2,
        common_ct, stride3, 0.0, outmatrix, np.float32,
    )


def multiply_self_transpose(
    input_matrix: NDArray[np.float64],
    dim: int,
    col_ct: int,
    result: NDArray[np.float64],
) -> None:
    """
    A @ A^T for row-major A (dim x col_ct); result is row-major dim x dim.

    ONLY the lower triangle of ``result``, diagonal included, is written.
    The strict upper triangle keeps whatever it held before the call; use
    reflect_lower_triangle() when the full symmetric matrix is needed.
    """
    check_nonnegative(dim, 'dim')
    check_nonnegative(col_ct, 'col_ct')
    check_buffer(input_matrix, np.float64, dim * col_ct, 'input_matrix')
    check_buffer(result, np.float64, dim * dim, 'result')
    check_writable(result, 'result')
    if dim == 0:
        return

    c = strided_view(result, dim, dim, dim)
    if col_ct == 0:
        rows, cols = np.tril_indices(dim)
        c[rows, cols] = 0.0
        return

    a = strided_view(input_matrix, dim, col_ct, col_ct)
    _backends.get_backend().syrk_lower(a, c)


def transpose_multiply_self_incr(
    input_part: NDArray[np.float64],
    dim: int,
    partial_row_ct: int,
    result: NDArray[np.float64],
) -> None:
    """
    result += A_part^T @ A_part, for row-major A_part (partial_row_ct x dim).

    Calling this once per row block of a tall matrix accumulates A^T @ A
    without materializing A. The full symmetric dim x dim result is updated.
    """
    check_nonnegative(dim, 'dim')
    check_nonnegative(partial_row_ct, 'partial_row_ct')
    check_buffer(input_part, np.float64, partial_row_ct * dim, 'input_part')
    check_buffer(result, np.float64, dim * dim, 'result')
    check_writable(result, 'result')
    if dim == 0 or partial_row_ct == 0:
        return

    a = strided_view(input_part, partial_row_ct, dim, dim)
    c = strided_view(result, dim, dim, dim)
    _backends.get_backend().gram_incr(a, c)
