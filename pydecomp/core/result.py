"""
Generic result container for pydecomp computations.

The Result class provides a standardized envelope for higher-level
computations built on the decomposition kernels (PCA, SVD reduction).
It carries timing, diagnostics and provenance while letting each caller
define its own parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (converged, iterations, diagnostics)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Version metadata recorded with every result."""
    import numpy as np
    from pydecomp import __version__

    return {
        'pydecomp_version': __version__,
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Type Parameters:
        P: The parameter payload type

    Attributes:
        params: Computation-specific payload (scores, components, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        method: Identifier of the method that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions used to produce the result

    Examples:
        >>> Result(
        ...     params=ReductionParams(...),
        ...     info={'method': 'pca', 'converged': True, 'iterations': 23},
        ...     timing={'total_seconds': 0.01},
        ...     method='pca'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    method: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
