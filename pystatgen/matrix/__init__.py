"""
Dense linear-algebra primitives on caller-owned flat buffers.

Every routine takes 1-D numpy buffers plus explicit dimensions and
strides, writes its output in place, and raises a typed exception on
failure. The arithmetic runs on the backend selected by
PYSTATGEN_MATRIX_BACKEND (see pystatgen.matrix.config).

Submodules:
    layout: Strided views, transpose copies, triangle reflection
    multiply: GEMM family, symmetric products, dot products
    inversion: LU inversion (float64, and split float32)
    decomposition: Rectangular SVD, top-k symmetric eigenpairs
    regression: OLS coefficients from the normal equations
    buffers: Pivot and scratch sizing
"""

from pystatgen.matrix.layout import (
    min_buffer_size,
    reflect_lower_triangle,
    strided_view,
    transpose_copy,
    transpose_copy_float,
)
from pystatgen.matrix.multiply import (
    col_major_fmatrix_multiply_strided,
    col_major_matrix_multiply,
    col_major_matrix_multiply_strided_addassign,
    dotprod_d,
    dotprod_f,
    multiply_self_transpose,
    multiply_strided_accumulate,
    row_major_matrix_multiply,
    row_major_matrix_multiply_incr,
    row_major_matrix_multiply_strided,
    row_major_matrix_multiply_strided_incr,
    transpose_multiply_self_incr,
)
from pystatgen.matrix.inversion import (
    invert_fmatrix_first_half,
    invert_fmatrix_second_half,
    invert_matrix,
    invert_matrix_checked,
)
from pystatgen.matrix.decomposition import (
    EigvecsWorkspace,
    extract_eigvecs,
    get_extract_eigvecs_lworks,
    get_svd_rect_lwork,
    svd_rect,
    svd_rect_wkspace_size,
)
from pystatgen.matrix.regression import linear_regression_inv
from pystatgen.matrix.buffers import (
    alloc_pivot_buf,
    alloc_scratch,
    matrix_finvert_buf1_size,
    matrix_invert_buf1_size,
    matrix_invert_scratch_size,
)

__all__ = [
    # Layout
    "min_buffer_size",
    "strided_view",
    "transpose_copy",
    "transpose_copy_float",
    "reflect_lower_triangle",
    # Multiply
    "col_major_matrix_multiply_strided_addassign",
    "multiply_strided_accumulate",
    "col_major_matrix_multiply",
    "row_major_matrix_multiply",
    "row_major_matrix_multiply_incr",
    "row_major_matrix_multiply_strided",
    "row_major_matrix_multiply_strided_incr",
    "col_major_fmatrix_multiply_strided",
    "multiply_self_transpose",
    "transpose_multiply_self_incr",
    "dotprod_d",
    "dotprod_f",
    # Inversion
    "invert_matrix",
    "invert_matrix_checked",
    "invert_fmatrix_first_half",
    "invert_fmatrix_second_half",
    # Decomposition
    "get_svd_rect_lwork",
    "svd_rect_wkspace_size",
    "svd_rect",
    "EigvecsWorkspace",
    "get_extract_eigvecs_lworks",
    "extract_eigvecs",
    # Regression
    "linear_regression_inv",
    # Buffers
    "matrix_invert_buf1_size",
    "matrix_finvert_buf1_size",
    "matrix_invert_scratch_size",
    "alloc_pivot_buf",
    "alloc_scratch",
]
