"""Common geometry manipulation utilities.

This module provides the decomposition, construction and normalization
helpers shared by the split, cover and median operations.
"""

from typing import Iterable, Iterator, Tuple

import numpy as np
import shapely
from shapely.geometry import (
    GeometryCollection,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
)
from shapely.geometry.base import BaseGeometry

from .types import GeometryFamily


def iter_components(geometry: BaseGeometry) -> Iterator[BaseGeometry]:
    """Yield the non-empty single-part components of a geometry.

    Multi-geometries and GeometryCollections are flattened recursively, so a
    collection holding a MultiPolygon yields each of its polygons.

    Args:
        geometry: Any shapely geometry

    Yields:
        Point, LineString, LinearRing or Polygon components in input order

    Examples:
        >>> gc = GeometryCollection([MultiPoint([(0, 0), (1, 1)]), LineString([(0, 0), (1, 0)])])
        >>> [g.geom_type for g in iter_components(gc)]
        ['Point', 'Point', 'LineString']
    """
    if geometry.is_empty:
        return
    if hasattr(geometry, 'geoms'):
        for part in geometry.geoms:
            yield from iter_components(part)
    else:
        yield geometry


def to_multi(family: GeometryFamily, parts: Iterable[BaseGeometry]) -> BaseGeometry:
    """Build the Multi-geometry of a family from single-part geometries.

    Args:
        family: PUNTAL, LINEAL or POLYGONAL
        parts: Components of that family

    Returns:
        MultiPoint, MultiLineString or MultiPolygon

    Raises:
        ValueError: If family is MIXED
    """
    parts = list(parts)
    if family is GeometryFamily.PUNTAL:
        return MultiPoint(parts)
    if family is GeometryFamily.LINEAL:
        return MultiLineString(parts)
    if family is GeometryFamily.POLYGONAL:
        return MultiPolygon(parts)
    raise ValueError(f"No Multi-geometry exists for family {family}")


def _sort_key(geometry: BaseGeometry) -> Tuple[Tuple[float, ...], ...]:
    coords = shapely.get_coordinates(geometry, include_z=geometry.has_z)
    return tuple(tuple(float(v) for v in row) for row in coords)


def normalize_geometry(geometry: BaseGeometry) -> BaseGeometry:
    """Return a canonical form of a geometry for comparison and display.

    Every component is normalized with :func:`shapely.normalize` (ring
    orientation and start vertex) and the components of a Multi-geometry or
    collection are ordered lexicographically by their coordinates, lowest
    first.

    Args:
        geometry: Any shapely geometry

    Returns:
        Normalized geometry of the same type

    Examples:
        >>> mls = MultiLineString([[(1, 1), (2, 2)], [(0.5, 0.5), (0, 0)]])
        >>> normalize_geometry(mls).wkt
        'MULTILINESTRING ((0 0, 0.5 0.5), (1 1, 2 2))'
    """
    if geometry.is_empty or not hasattr(geometry, 'geoms'):
        return shapely.normalize(geometry)

    parts = sorted(
        (normalize_geometry(part) for part in geometry.geoms),
        key=_sort_key,
    )
    if geometry.geom_type == 'GeometryCollection':
        return GeometryCollection(parts)
    return type(geometry)(parts)


def coords_array(geometry: BaseGeometry) -> np.ndarray:
    """Return the coordinates of a geometry as an Nx2 or Nx3 array.

    Z values are kept when the geometry has them.

    Examples:
        >>> coords_array(LineString([(0, 0, 1), (1, 1, 2)])).shape
        (2, 3)
    """
    return shapely.get_coordinates(geometry, include_z=geometry.has_z)


__all__ = [
    'iter_components',
    'to_multi',
    'normalize_geometry',
    'coords_array',
]
