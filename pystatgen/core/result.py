"""
Generic result container for PyStatGen computations.

The buffer kernels in pystatgen.matrix write straight into caller memory
and return nothing. Higher-level surfaces (regression) wrap what they
computed in this envelope so timing, backend identity and non-fatal
warnings travel with the numbers.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (coefficients, inverse, etc.)
        info: Structured metadata (method, matrix backend, dimensions)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=LinearParams(coefficients=beta, ...),
        ...     info={'method': 'normal_equations', 'matrix_backend': 'cpu_lapack'},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_normal_equations'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
