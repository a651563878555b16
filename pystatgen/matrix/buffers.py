"""
Buffer sizing contract.

Every routine that needs scratch space documents its size here as a
function of dimension and the configured backend. Callers query these
before a call and allocate accordingly; the kernels validate sizes on
entry and raise DimensionError for undersized buffers.

Pivot buffers are opaque bytes (uint8). Their per-dimension allocation
depends on the backend index width and on whether the checked inversion
contract is used.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any

from pystatgen.core.validation import check_buffer, check_nonnegative, check_writable
from pystatgen.matrix import backends as _backends


def matrix_invert_buf1_size(dim: int, *, checked: bool = False) -> int:
    """Pivot buffer bytes for invert_matrix() / invert_matrix_checked()."""
    check_nonnegative(dim, 'dim')
    backend = _backends.get_backend()
    elem = backend.pivot_checked_elem_alloc if checked else backend.pivot_elem_alloc
    return dim * elem


def matrix_finvert_buf1_size(dim: int) -> int:
    """Pivot buffer bytes for the single-precision split inversion."""
    check_nonnegative(dim, 'dim')
    return dim * _backends.get_backend().pivot_checked_elem_alloc


def matrix_invert_scratch_size(dim: int, *, checked: bool = False) -> int:
    """Scratch buffer elements: dim*dim, or 2*dim*dim for the checked variant."""
    check_nonnegative(dim, 'dim')
    return (2 if checked else 1) * dim * dim


def alloc_pivot_buf(dim: int, *, checked: bool = False) -> NDArray[np.uint8]:
    """Allocate a pivot buffer sized for the configured backend."""
    return np.zeros(matrix_invert_buf1_size(dim, checked=checked), dtype=np.uint8)


def alloc_scratch(
    dim: int,
    *,
    checked: bool = False,
    dtype: np.dtype | type = np.float64,
) -> NDArray[Any]:
    """Allocate an inversion scratch buffer."""
    return np.zeros(matrix_invert_scratch_size(dim, checked=checked), dtype=dtype)


def pivot_view(pivot_buf: NDArray[np.uint8], dim: int, elem_alloc: int) -> NDArray[Any]:
    """
    Validate an opaque pivot buffer and view its head as backend indices.

    Raises:
        ValidationError / DimensionError: If the buffer is not uint8 or is
            smaller than dim * elem_alloc bytes
    """
    backend = _backends.get_backend()
    check_buffer(pivot_buf, np.uint8, dim * elem_alloc, 'pivot_buf')
    check_writable(pivot_buf, 'pivot_buf')
    index_dtype = backend.index_dtype
    return pivot_buf[:dim * index_dtype.itemsize].view(index_dtype)
