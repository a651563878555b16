"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim: dimensionality checks
    - check_nonnegative / check_stride: dimension and stride preconditions
    - check_buffer / check_writable: caller-owned flat buffers
    - check_consistent_length / check_min_samples
"""

import numpy as np
import pytest

from pystatgen.core.exceptions import DimensionError, ValidationError
from pystatgen.core.validation import (
    check_array,
    check_buffer,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_ndim,
    check_nonnegative,
    check_stride,
    check_writable,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert isinstance(result, np.ndarray)
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        result = check_array(np.array([1, 2, 3], dtype=np.int32), "X")
        assert np.issubdtype(result.dtype, np.floating)

    def test_object_dtype_rejected(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array(np.array([1, "a", None], dtype=object), "X")

    def test_string_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(np.array(["a", "b"]), "X")


# ═══════════════════════════════════════════════════════════════════════
# check_finite / check_ndim
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "X")

    def test_nan_and_inf_counted(self):
        with pytest.raises(ValidationError, match=r"1 NaN, 1 Inf"):
            check_finite(np.array([1.0, np.nan, np.inf]), "X")


class TestCheckNdim:

    def test_correct_ndim(self):
        check_ndim(np.zeros((2, 3)), 2, "X")

    def test_wrong_ndim(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_ndim(np.zeros((2, 3)), 1, "y")


# ═══════════════════════════════════════════════════════════════════════
# Dimensions and strides
# ═══════════════════════════════════════════════════════════════════════


class TestDimensions:

    def test_zero_is_valid(self):
        check_nonnegative(0, "dim")

    def test_numpy_integer_accepted(self):
        check_nonnegative(np.int64(5), "dim")

    def test_negative_rejected(self):
        with pytest.raises(DimensionError, match="non-negative"):
            check_nonnegative(-1, "dim")

    def test_float_rejected(self):
        with pytest.raises(DimensionError, match="expected int"):
            check_nonnegative(3.0, "dim")

    def test_bool_rejected(self):
        with pytest.raises(DimensionError):
            check_nonnegative(True, "dim")

    def test_stride_equal_to_extent(self):
        check_stride(4, 4, "stride")

    def test_stride_below_extent(self):
        with pytest.raises(DimensionError, match="smaller than logical extent"):
            check_stride(3, 4, "stride")


# ═══════════════════════════════════════════════════════════════════════
# Buffers
# ═══════════════════════════════════════════════════════════════════════


class TestCheckBuffer:

    def test_valid_buffer(self):
        check_buffer(np.zeros(10), np.float64, 10, "buf")

    def test_list_rejected(self):
        with pytest.raises(ValidationError, match="numpy.ndarray"):
            check_buffer([0.0] * 10, np.float64, 10, "buf")

    def test_dtype_is_exact(self):
        with pytest.raises(ValidationError, match="expected dtype float64"):
            check_buffer(np.zeros(10, dtype=np.float32), np.float64, 10, "buf")

    def test_two_dimensional_rejected(self):
        with pytest.raises(DimensionError):
            check_buffer(np.zeros((2, 5)), np.float64, 10, "buf")

    def test_non_contiguous_rejected(self):
        with pytest.raises(DimensionError, match="contiguous"):
            check_buffer(np.zeros(20)[::2], np.float64, 10, "buf")

    def test_too_short(self):
        with pytest.raises(DimensionError, match="need at least 11"):
            check_buffer(np.zeros(10), np.float64, 11, "buf")

    def test_read_only_rejected_for_output(self):
        buf = np.zeros(4)
        buf.flags.writeable = False
        with pytest.raises(ValidationError, match="read-only"):
            check_writable(buf, "out")


class TestLengths:

    def test_consistent(self):
        check_consistent_length(np.zeros((5, 2)), np.zeros(5), names=('X', 'y'))

    def test_inconsistent(self):
        with pytest.raises(DimensionError, match="X=5, y=4"):
            check_consistent_length(np.zeros((5, 2)), np.zeros(4), names=('X', 'y'))

    def test_names_must_match(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), names=('a', 'b'))

    def test_min_samples(self):
        with pytest.raises(ValidationError, match="at least 3 samples"):
            check_min_samples(np.zeros((2, 3)), 3, "X")
