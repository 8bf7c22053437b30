"""Common iterative solver utilities.

This module provides the fixed-point iteration loop used by the numerical
solvers, with the bookkeeping needed to report convergence.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Tuple, TypeVar

T = TypeVar('T')


@dataclass
class IterationResult(Generic[T]):
    """Outcome of a fixed-point iteration.

    Attributes:
        value: Last computed estimate
        iterations: Number of steps performed
        converged: Whether the last displacement met the tolerance
        delta: Displacement of the last step (inf if no step was taken)
    """
    value: T
    iterations: int
    converged: bool
    delta: float


def iterate_to_convergence(
    initial: T,
    step_func: Callable[[T], Tuple[T, float]],
    tolerance: float,
    max_iterations: int
) -> IterationResult[T]:
    """Apply a step function until its displacement drops to the tolerance.

    Args:
        initial: Starting estimate
        step_func: Function taking the current estimate and returning
                   (next estimate, displacement between the two)
        tolerance: Displacement at or below which iteration stops
        max_iterations: Maximum number of steps

    Returns:
        IterationResult holding the last estimate and convergence metadata

    Examples:
        >>> def halve(x):
        ...     return x / 2, x / 2
        >>> result = iterate_to_convergence(1.0, halve, tolerance=0.1, max_iterations=10)
        >>> result.value, result.iterations, result.converged
        (0.0625, 4, True)
    """
    value = initial
    delta = float('inf')
    iterations = 0

    while iterations < max_iterations and delta > tolerance:
        value, delta = step_func(value)
        iterations += 1

    return IterationResult(
        value=value,
        iterations=iterations,
        converged=delta <= tolerance,
        delta=delta,
    )


__all__ = [
    'IterationResult',
    'iterate_to_convergence',
]
