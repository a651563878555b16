"""
Layout utilities for flat, strided matrix buffers.

Every kernel in this package reads caller memory through strided_view():
a 2-D numpy view onto a 1-D buffer where successive rows start ``stride``
elements apart. Column-major operands are handled by viewing them as their
row-major transpose and taking ``.T``, so no kernel ever copies a caller
buffer just to reinterpret it.

The transpose copies convert between major orders for callers whose data
arrives in the other layout.
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


def min_buffer_size(row_ct: int, col_ct: int, stride: int) -> int:
    """
    Minimum number of elements backing ``row_ct`` rows of ``col_ct``.

    The last row only needs ``col_ct`` elements, not a full stride.
    """
    if row_ct == 0 or col_ct == 0:
        return 0
    return (row_ct - 1) * stride + col_ct


def strided_view(
    buf: NDArray[Any],
    row_ct: int,
    col_ct: int,
    stride: int,
) -> NDArray[Any]:
    """
    Writable 2-D view of a flat buffer.

    Args:
        buf: 1-D contiguous buffer
        row_ct: Number of logical rows
        col_ct: Number of logical columns
        stride: Elements between the starts of successive rows (>= col_ct)

    Returns:
        ndarray of shape (row_ct, col_ct) sharing memory with ``buf``

    Callers are expected to have validated the buffer length with
    min_buffer_size(); this function does not copy.
    """
    if row_ct == 0 or col_ct == 0:
        return buf[:0].reshape(row_ct, col_ct)
    itemsize = buf.itemsize
    return np.lib.stride_tricks.as_strided(
        buf,
        shape=(row_ct, col_ct),
        strides=(stride * itemsize, itemsize),
    )


def transpose_copy(
    old_matrix: NDArray[np.float64],
    old_maj: int,
    new_maj: int,
    new_matrix: NDArray[np.float64],
) -> None:
    """
    Transpose a dense float64 matrix into another buffer.

    ``old_matrix`` holds ``old_maj`` rows of ``new_maj`` contiguous
    elements; ``new_matrix`` receives ``new_maj`` rows of ``old_maj``.

    Raises:
        ValidationError / DimensionError: on bad buffers or dimensions
    """
    check_nonnegative(old_maj, 'old_maj')
    check_nonnegative(new_maj, 'new_maj')
    size = old_maj * new_maj
    check_buffer(old_matrix, np.float64, size, 'old_matrix')
    check_buffer(new_matrix, np.float64, size, 'new_matrix')
    check_writable(new_matrix, 'new_matrix')
    if size == 0:
        return
    src = strided_view(old_matrix, old_maj, new_maj, new_maj)
    dst = strided_view(new_matrix, new_maj, old_maj, old_maj)
    dst[...] = src.T


def transpose_copy_float(
    old_matrix: NDArray[np.float32],
    old_maj: int,
    new_maj: int,
    new_maj_max: int,
    new_matrix: NDArray[np.float32],
) -> None:
    """
    Transpose a float32 matrix into a destination with a wider row stride.

    ``old_matrix`` holds ``old_maj`` rows of ``new_maj`` contiguous
    elements. Row ``j`` of the result starts at ``new_matrix[j * new_maj_max]``
    and receives ``old_maj`` elements; the ``new_maj_max - old_maj`` trailing
    elements of each destination row are left untouched, so the transposed
    block can be written into a larger buffer that already holds data.

    Raises:
        ValidationError / DimensionError: on bad buffers, dimensions, or
            new_maj_max < old_maj
    """
    check_nonnegative(old_maj, 'old_maj')
    check_nonnegative(new_maj, 'new_maj')
    check_stride(new_maj_max, old_maj, 'new_maj_max')
    check_buffer(old_matrix, np.float32, old_maj * new_maj, 'old_matrix')
    check_buffer(
        new_matrix, np.float32,
        min_buffer_size(new_maj, old_maj, new_maj_max), 'new_matrix',
    )
    check_writable(new_matrix, 'new_matrix')
    if old_maj == 0 or new_maj == 0:
        return
    src = strided_view(old_matrix, old_maj, new_maj, new_maj)
    dst = strided_view(new_matrix, new_maj, old_maj, new_maj_max)
    dst[...] = src.T


def reflect_lower_triangle(dim: int, matrix: NDArray[np.float64]) -> None:
    """
    Copy the lower triangle of a row-major dim x dim matrix to the upper.

    Completes the output of multiply_self_transpose(), which only fills
    the lower triangle, when a full symmetric matrix is needed.
    """
    check_nonnegative(dim, 'dim')
    check_buffer(matrix, np.float64, dim * dim, 'matrix')
    check_writable(matrix, 'matrix')
    if dim < 2:
        return
    view = strided_view(matrix, dim, dim, dim)
    upper_rows, upper_cols = np.triu_indices(dim, k=1)
    view[upper_rows, upper_cols] = view[upper_cols, upper_rows]
