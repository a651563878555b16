"""
Numerical thresholds and tolerance tiers.

MATRIX_SINGULAR_RCOND is the single cutoff every inversion path uses to
decide that a matrix is singular. It is a read-only module constant, so
concurrent callers share it safely.

The tolerance tiers describe how closely results from each precision path
are expected to agree with a float64 reference.
"""

from dataclasses import dataclass

import numpy as np


# Reciprocal condition number below which a matrix is reported singular
# instead of being inverted with large numerical error.
MATRIX_SINGULAR_RCOND: float = 1e-14


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance tier for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='Double precision kernels, well-conditioned operands',
)

FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='fp64_ill_conditioned',
    description='Double precision, ill-conditioned (cond > 1e4)',
)

FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32',
    description='Single precision kernels (split inversion, float GEMM)',
)

FP32_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-2,
    atol=1e-3,
    name='fp32_ill_conditioned',
    description='Single precision, ill-conditioned',
)


def select_tolerance(
    dtype: np.dtype | type,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select the tolerance tier for results computed in ``dtype``."""
    if np.dtype(dtype) == np.float32:
        return FP32_ILL_CONDITIONED if is_ill_conditioned else FP32
    return FP64_ILL_CONDITIONED if is_ill_conditioned else FP64


def identity_tolerance(dim: int, rcond: float, dtype: np.dtype | type) -> float:
    """
    Absolute tolerance for ``inv(A) @ A`` against the identity.

    The forward error of an inverse scales with the condition number, so
    the bound is dim * eps / rcond with a small safety factor.
    """
    eps = float(np.finfo(dtype).eps)
    return 10.0 * max(dim, 1) * eps / max(rcond, MATRIX_SINGULAR_RCOND)
