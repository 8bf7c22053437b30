"""Exception hierarchy for geoforge operations."""

from typing import Optional


class GeoforgeError(Exception):
    """Base exception for all geoforge errors."""
    pass


class UnsupportedGeometryTypeError(GeoforgeError, ValueError):
    """Raised when an operation receives a geometry variant it cannot handle.

    Attributes:
        geom_type: Shapely ``geom_type`` of the rejected geometry
    """

    def __init__(self, geom_type: str, message: Optional[str] = None):
        self.geom_type = geom_type
        super().__init__(message or f"Unsupported geometry type: {geom_type}")


class ConvergenceError(GeoforgeError):
    """Raised when an iterative solver is asked to fail on non-convergence.

    Attributes:
        tolerance: Displacement tolerance the solver was asked to reach
        max_iterations: Iteration cap that was exhausted
    """

    def __init__(self, tolerance: float, max_iterations: int):
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        super().__init__(
            f"Median failed to converge within {tolerance:.1E} "
            f"after {max_iterations} iterations."
        )


class ConfigurationError(GeoforgeError, ValueError):
    """Raised when an operation is called with invalid parameters."""
    pass


__all__ = [
    'GeoforgeError',
    'UnsupportedGeometryTypeError',
    'ConvergenceError',
    'ConfigurationError',
]
