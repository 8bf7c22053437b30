"""Geometric median of a point set.

The median is found with Weiszfeld's algorithm, starting from the centroid.
When the estimate lands exactly on input points the update follows the
Vardi-Zhang modification, so coincident points neither divide by zero nor
trap the iteration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from shapely.geometry import MultiPoint, Point

from .core.errors import ConfigurationError, ConvergenceError, UnsupportedGeometryTypeError
from .core.geometry_utils import coords_array
from .core.iterative_utils import iterate_to_convergence

logger = logging.getLogger(__name__)

# Distances at or below this count as the estimate sitting on an input point.
_COINCIDENCE_EPSILON = np.finfo(float).eps


@dataclass
class MedianConfig:
    """Solver settings for :func:`solve_median`.

    Attributes:
        tolerance: Stop once successive estimates move less than this
        max_iterations: Upper bound on Weiszfeld steps
        fail_on_non_convergence: Raise ConvergenceError instead of returning
            the last estimate when max_iterations is exhausted
    """
    tolerance: float = 1e-6
    max_iterations: int = 1000
    fail_on_non_convergence: bool = False


@dataclass
class MedianEstimate:
    """Median point together with solver metadata."""
    point: Point
    iterations: int
    converged: bool
    delta: float


def geometric_median(
    points: MultiPoint,
    tolerance: float = 1e-6,
    max_iterations: int = 1000,
    fail_on_non_convergence: bool = False,
) -> Point:
    """Compute the geometric median of a MultiPoint.

    The geometric median minimizes the sum of Euclidean distances to the
    input points. Z is taken into account when the input has it.

    Args:
        points: MultiPoint to summarize
        tolerance: Displacement between successive estimates at which the
            iteration stops (default: 1e-6)
        max_iterations: Maximum number of iterations (default: 1000)
        fail_on_non_convergence: Raise if the tolerance is not met within
            max_iterations (default: False)

    Returns:
        Median Point (empty Point for an empty MultiPoint)

    Raises:
        UnsupportedGeometryTypeError: If points is not a MultiPoint
        ConvergenceError: If fail_on_non_convergence is set and the solver
            did not converge
        ConfigurationError: If tolerance is negative or max_iterations < 1

    Examples:
        >>> geometric_median(MultiPoint([(1480, 0), (620, 0)])).wkt
        'POINT (1050 0)'
    """
    config = MedianConfig(
        tolerance=tolerance,
        max_iterations=max_iterations,
        fail_on_non_convergence=fail_on_non_convergence,
    )
    return solve_median(points, config).point


def solve_median(points: MultiPoint, config: Optional[MedianConfig] = None) -> MedianEstimate:
    """Run the Weiszfeld solver and return the estimate with its metadata."""
    if config is None:
        config = MedianConfig()
    _check_config(config)

    if points.geom_type != 'MultiPoint':
        raise UnsupportedGeometryTypeError(points.geom_type)

    coords = coords_array(points)
    if len(coords) == 0:
        return MedianEstimate(point=Point(), iterations=0, converged=True, delta=0.0)

    result = iterate_to_convergence(
        coords.mean(axis=0),
        lambda current: _weiszfeld_step(coords, current),
        tolerance=config.tolerance,
        max_iterations=config.max_iterations,
    )

    if not result.converged:
        if config.fail_on_non_convergence:
            raise ConvergenceError(config.tolerance, config.max_iterations)
        logger.debug(
            "Median did not converge within %s after %d iterations (last step %s)",
            config.tolerance, result.iterations, result.delta,
        )
    else:
        logger.debug("Median converged after %d iterations", result.iterations)

    return MedianEstimate(
        point=Point(result.value),
        iterations=result.iterations,
        converged=result.converged,
        delta=result.delta,
    )


def _weiszfeld_step(coords: np.ndarray, current: np.ndarray) -> Tuple[np.ndarray, float]:
    """One Weiszfeld update, returning the next estimate and its displacement."""
    offsets = coords - current
    distances = np.linalg.norm(offsets, axis=1)
    hits = distances <= _COINCIDENCE_EPSILON
    away = ~hits

    if not away.any():
        return current, 0.0

    weights = 1.0 / distances[away]
    candidate = (coords[away] * weights[:, None]).sum(axis=0) / weights.sum()

    hit_count = int(hits.sum())
    if hit_count:
        # Vardi-Zhang: blend toward the current point by the weight of the
        # points it sits on, relative to the pull of the others.
        pull = float(np.linalg.norm((offsets[away] * weights[:, None]).sum(axis=0)))
        gamma = 1.0 if pull == 0.0 else min(1.0, hit_count / pull)
        candidate = (1.0 - gamma) * candidate + gamma * current

    delta = float(np.linalg.norm(candidate - current))
    return candidate, delta


def _check_config(config: MedianConfig) -> None:
    if config.tolerance < 0:
        raise ConfigurationError(f"tolerance must be non-negative, got {config.tolerance}")
    if config.max_iterations < 1:
        raise ConfigurationError(f"max_iterations must be at least 1, got {config.max_iterations}")


__all__ = [
    'MedianConfig',
    'MedianEstimate',
    'geometric_median',
    'solve_median',
]
