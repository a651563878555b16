"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

import pystatgen.matrix.backends as matrix_backends
from pystatgen.matrix.backends import FallbackBackend, LapackBackend


def _make_backend(name):
    if name == 'cpu_fallback':
        return FallbackBackend()
    if name == 'cpu_lapack':
        return LapackBackend()
    pytest.importorskip('torch')
    from pystatgen.matrix.backends.gpu import TorchBackend
    return TorchBackend(device='cpu')


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture(params=['cpu_fallback', 'cpu_lapack', 'torch'])
def backend(request, monkeypatch):
    """
    Run the test once per matrix backend.

    The public kernels resolve the backend through
    pystatgen.matrix.backends.get_backend(), which is patched here.
    """
    instance = _make_backend(request.param)
    monkeypatch.setattr(matrix_backends, 'get_backend', lambda: instance)
    return instance


@pytest.fixture
def simple_regression_data(rng):
    """Regression dataset with intercept: y = 1 - 2 x1 + 0.5 x2 + noise."""
    n = 100
    X = np.column_stack([np.ones(n), rng.standard_normal((n, 2))])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([np.ones(n), x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y
