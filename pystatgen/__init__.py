"""
PyStatGen: dense linear-algebra primitives for statistical genetics.

Matrix inversion, strided multiplication, symmetric products and
SVD/eigen building blocks on caller-owned flat buffers, for the OLS and
PCA pipelines of a genetics toolkit. Runs on scipy's LAPACK by default,
on plain numpy arithmetic, or on torch.

Submodules:
    matrix: Buffer-level kernels
    regression: Linear regression built on the kernels
"""

__version__ = "0.1.0"

from pystatgen import matrix
from pystatgen import regression

__all__ = [
    "__version__",
    "matrix",
    "regression",
]
