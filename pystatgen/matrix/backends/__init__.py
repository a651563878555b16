"""
Matrix backends.

Available backends:
    FallbackBackend: elementwise numpy arithmetic, no BLAS/LAPACK calls
    LapackBackend: scipy.linalg BLAS/LAPACK (default)
    TorchBackend: torch / torch.linalg on a configured device

get_backend() returns the configured instance; it is built once per
process from pystatgen.matrix.config.
"""

from functools import lru_cache

from pystatgen.matrix.config import (
    BACKEND_CPU_FALLBACK,
    BACKEND_CPU_LAPACK,
    BACKEND_TORCH,
    BackendConfig,
    load_backend_config,
)
from pystatgen.matrix.backends.base import MatrixBackend
from pystatgen.matrix.backends.fallback import FallbackBackend
from pystatgen.matrix.backends.lapack import LapackBackend


def create_backend(config: BackendConfig) -> MatrixBackend:
    """
    Instantiate the backend a configuration names.

    Raises:
        BackendUnavailableError: If the torch backend is requested but
            cannot be loaded
    """
    if config.backend == BACKEND_CPU_FALLBACK:
        return FallbackBackend()
    if config.backend == BACKEND_CPU_LAPACK:
        return LapackBackend()
    if config.backend == BACKEND_TORCH:
        from pystatgen.matrix.backends.gpu import TorchBackend
        return TorchBackend(device=config.torch_device)
    raise ValueError(f"Unknown matrix backend: {config.backend!r}")


@lru_cache(maxsize=None)
def get_backend() -> MatrixBackend:
    """The process-wide configured backend."""
    return create_backend(load_backend_config())


__all__ = [
    "MatrixBackend",
    "FallbackBackend",
    "LapackBackend",
    "create_backend",
    "get_backend",
]
