"""
Regression backends.

Available backends:
    NormalEquationsBackend: OLS via the pystatgen.matrix buffer kernels
"""

from pystatgen.regression.backends.normal_equations import NormalEquationsBackend

__all__ = [
    "NormalEquationsBackend",
]
