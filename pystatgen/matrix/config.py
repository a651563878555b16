"""
Matrix backend configuration.

The backend is a deployment decision, not a per-call option. It is read
from the environment the first time the matrix layer needs it and cached
for the life of the process:

    PYSTATGEN_MATRIX_BACKEND   cpu_lapack (default) | cpu_fallback | torch
    PYSTATGEN_TORCH_DEVICE     cpu (default) | cuda | cuda:N | mps | auto

Public kernels never accept a backend argument; they always run on the
configured one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from pystatgen.core.exceptions import ValidationError


BACKEND_ENV_VAR = 'PYSTATGEN_MATRIX_BACKEND'
TORCH_DEVICE_ENV_VAR = 'PYSTATGEN_TORCH_DEVICE'

BACKEND_CPU_FALLBACK = 'cpu_fallback'
BACKEND_CPU_LAPACK = 'cpu_lapack'
BACKEND_TORCH = 'torch'

KNOWN_BACKENDS = frozenset({
    BACKEND_CPU_FALLBACK,
    BACKEND_CPU_LAPACK,
    BACKEND_TORCH,
})

DEFAULT_BACKEND = BACKEND_CPU_LAPACK
DEFAULT_TORCH_DEVICE = 'cpu'


@dataclass(frozen=True)
class BackendConfig:
    """
    Resolved matrix backend configuration.

    Attributes:
        backend: One of KNOWN_BACKENDS
        torch_device: Device name for the torch backend (ignored otherwise)
    """
    backend: str = DEFAULT_BACKEND
    torch_device: str = DEFAULT_TORCH_DEVICE

    def __post_init__(self) -> None:
        if self.backend not in KNOWN_BACKENDS:
            raise ValidationError(
                f"Unknown matrix backend {self.backend!r}. "
                f"Expected one of: {', '.join(sorted(KNOWN_BACKENDS))}"
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> BackendConfig:
        """Build a config from environment variables (or a given mapping)."""
        env = os.environ if environ is None else environ
        backend = env.get(BACKEND_ENV_VAR, '').strip().lower() or DEFAULT_BACKEND
        device = env.get(TORCH_DEVICE_ENV_VAR, '').strip().lower() or DEFAULT_TORCH_DEVICE
        return cls(backend=backend, torch_device=device)


@lru_cache(maxsize=None)
def load_backend_config() -> BackendConfig:
    """The process-wide configuration, read once from the environment."""
    return BackendConfig.from_env()
