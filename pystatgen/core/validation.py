"""
Input validation utilities for PyStatGen.

These validators follow the "fail fast, fail loud" principle. The matrix
kernels operate on caller-owned flat buffers, so the checks here are about
buffer shape, dtype and extent rather than statistical content. They raise
immediately with clear messages instead of letting a kernel read past the
end of a buffer.

Design principles:
    - No silent type coercion of caller buffers (they are written in place)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pystatgen.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Used by the high-level regression surface, not by the buffer kernels.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_nonnegative(value: int, name: str) -> None:
    """
    Verify a dimension or count is a non-negative integer.

    Raises:
        DimensionError: If value is negative or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise DimensionError(f"{name}: expected int, got {type(value).__name__}")
    if value < 0:
        raise DimensionError(f"{name}: must be non-negative, got {value}")


def check_stride(stride: int, extent: int, name: str) -> None:
    """
    Verify a stride covers the logical extent it steps over.

    Args:
        stride: Elements between successive rows/columns
        extent: Logical row/column length
        name: Parameter name for error messages

    Raises:
        DimensionError: If stride < extent
    """
    check_nonnegative(stride, name)
    if stride < extent:
        raise DimensionError(
            f"{name}: stride {stride} is smaller than logical extent {extent}"
        )


def check_buffer(
    buf: NDArray[Any],
    dtype: np.dtype | type,
    min_size: int,
    name: str,
) -> None:
    """
    Verify a caller-owned flat buffer can back the requested computation.

    The buffer must be a 1-D, C-contiguous, writable-or-readable numpy array
    of exactly ``dtype`` (no coercion: kernels write into it in place) with
    at least ``min_size`` elements.

    Raises:
        ValidationError: If buf is not an ndarray or has the wrong dtype
        DimensionError: If buf is not 1-D/contiguous or is too short
    """
    if not isinstance(buf, np.ndarray):
        raise ValidationError(
            f"{name}: expected numpy.ndarray, got {type(buf).__name__}"
        )
    if buf.dtype != np.dtype(dtype):
        raise ValidationError(
            f"{name}: expected dtype {np.dtype(dtype)}, got {buf.dtype}"
        )
    check_ndim(buf, 1, name)
    if not buf.flags.c_contiguous:
        raise DimensionError(f"{name}: buffer must be contiguous")
    if buf.size < min_size:
        raise DimensionError(
            f"{name}: buffer holds {buf.size} elements, need at least {min_size}"
        )


def check_writable(buf: NDArray[Any], name: str) -> None:
    """
    Verify an output buffer can be written in place.

    Raises:
        ValidationError: If the buffer is read-only
    """
    if not buf.flags.writeable:
        raise ValidationError(f"{name}: output buffer is read-only")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")
