"""Measurement helpers for geoforge geometries."""

from __future__ import annotations

from shapely.geometry.base import BaseGeometry

from .core.errors import UnsupportedGeometryTypeError


def num_points(geometry: BaseGeometry) -> int:
    """Return the number of coordinates of a LineString.

    Raises:
        UnsupportedGeometryTypeError: If geometry is not a LineString
    """
    if geometry.geom_type != 'LineString':
        raise UnsupportedGeometryTypeError(
            geometry.geom_type,
            f"Unsupported geometry type: {geometry.geom_type}, "
            "only LineString geometry is supported.",
        )
    return len(geometry.coords)


__all__ = [
    "num_points",
]
