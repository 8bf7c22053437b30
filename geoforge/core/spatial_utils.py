"""Common spatial operation utilities.

This module provides the segment-level measurements used when locating
blade points along a line.
"""

from typing import Optional

import numpy as np


def dominant_axis_parameter(
    point: np.ndarray,
    segment_start: np.ndarray,
    segment_end: np.ndarray
) -> float:
    """Position of a point along a segment, measured on its dominant axis.

    The axis along which the segment moves the most (x when |dx| >= |dy|,
    otherwise y) is used, so vertical segments are parametrized by y.

    Returns:
        Fraction in [0, 1] of the way from segment_start to segment_end

    Examples:
        >>> dominant_axis_parameter(np.array([1.5, 0.5]), np.array([1.5, 0.0]), np.array([1.5, 1.5]))
        0.3333333333333333
    """
    delta = segment_end[:2] - segment_start[:2]
    axis = 0 if abs(delta[0]) >= abs(delta[1]) else 1
    if delta[axis] == 0.0:
        return 0.0
    t = float((point[axis] - segment_start[axis]) / delta[axis])
    return max(0.0, min(1.0, t))


def locate_on_segment(
    point: np.ndarray,
    segment_start: np.ndarray,
    segment_end: np.ndarray,
    tolerance: float
) -> Optional[float]:
    """Locate a point on a segment.

    Only the first two coordinates are compared; a zero-length segment is
    treated as its start point.

    Returns:
        Dominant-axis parameter of the point, or None when the point is
        farther than ``tolerance`` from the segment
    """
    xy = point[:2]
    start = segment_start[:2]
    delta = segment_end[:2] - start

    closest = start
    length_sq = np.dot(delta, delta)
    if length_sq > 0.0:
        t = max(0.0, min(1.0, float(np.dot(xy - start, delta) / length_sq)))
        closest = start + t * delta

    if np.linalg.norm(xy - closest) > tolerance:
        return None
    return dominant_axis_parameter(point, segment_start, segment_end)


def cumulative_lengths(coords: np.ndarray) -> np.ndarray:
    """Planar arc length from the first vertex to each vertex of a path."""
    steps = np.linalg.norm(np.diff(coords[:, :2], axis=0), axis=1)
    return np.concatenate(([0.0], np.cumsum(steps)))


__all__ = [
    'dominant_axis_parameter',
    'locate_on_segment',
    'cumulative_lengths',
]
