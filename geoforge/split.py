"""Geometry splitting by a blade geometry.

Lines are cut at the points where the blade touches them; polygons are cut
along the blade's linework by noding it against the polygon rings and
reassembling the faces. Each input component is split independently and the
pieces are returned as a single Multi-geometry of the target's family.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import polygonize, unary_union
from shapely.prepared import prep

from .core.errors import ConfigurationError
from .core.geometry_utils import coords_array, iter_components, to_multi
from .core.spatial_utils import cumulative_lengths, locate_on_segment
from .core.types import GeometryFamily, geometry_family

logger = logging.getLogger(__name__)

DEFAULT_SPLIT_TOLERANCE = 1e-9

# (arc-length parameter, cut coordinate)
Cut = Tuple[float, np.ndarray]


def split(
    target: BaseGeometry,
    blade: BaseGeometry,
    tolerance: float = DEFAULT_SPLIT_TOLERANCE,
) -> Optional[BaseGeometry]:
    """Split a geometry into pieces using a blade geometry.

    Supported combinations:
    - lineal target (LineString, MultiLineString or a collection of lines)
      cut by points, lines or polygon boundaries -> MultiLineString
    - areal target (Polygon, MultiPolygon or a collection of polygons)
      cut by lines or polygon boundaries -> MultiPolygon

    Any other combination, including a target collection that mixes lines
    and polygons, is not applicable and returns None rather than raising.

    Args:
        target: Geometry to split
        blade: Geometry to split with
        tolerance: Distance within which a blade point counts as lying on a
            line, and below which two cuts are merged (default: 1e-9)

    Returns:
        MultiLineString or MultiPolygon of pieces, or None when the
        combination is unsupported. A blade that misses the target yields the
        target as a single-component Multi-geometry.

    Raises:
        ConfigurationError: If tolerance is negative

    Examples:
        >>> line = LineString([(0, 0), (1.5, 1.5), (2, 2)])
        >>> split(line, MultiPoint([(0.5, 0.5), (1, 1)])).wkt
        'MULTILINESTRING ((0 0, 0.5 0.5), (0.5 0.5, 1 1), (1 1, 1.5 1.5, 2 2))'

        >>> square = Polygon([(1, 1), (5, 1), (5, 5), (1, 5)])
        >>> len(split(square, LineString([(3, 0), (3, 6)])).geoms)
        2
    """
    if tolerance < 0:
        raise ConfigurationError(f"tolerance must be non-negative, got {tolerance}")

    target_family = geometry_family(target)
    if target_family is GeometryFamily.LINEAL:
        return split_lines(target, blade, tolerance)
    elif target_family is GeometryFamily.POLYGONAL:
        return split_polygons(target, blade)
    elif target_family is GeometryFamily.PUNTAL:
        logger.debug("Cannot split puntal geometry %s", target.geom_type)
        return None
    else:
        logger.debug("Cannot split heterogeneous %s", target.geom_type)
        return None


def split_lines(
    lines: BaseGeometry,
    blade: BaseGeometry,
    tolerance: float = DEFAULT_SPLIT_TOLERANCE,
) -> MultiLineString:
    """Split every line of a lineal geometry at the points touched by the blade.

    Point blades cut where their points lie on a line. Lineal and areal
    blades cut where their linework intersects a line; a collinear overlap
    cuts at both ends of the shared stretch.
    """
    blade_points, linework = _decompose_blade(blade)

    pieces: List[LineString] = []
    for line in iter_components(lines):
        cut_points = list(blade_points)
        if linework is not None:
            cut_points.extend(_intersection_points(line, linework))
        pieces.extend(_split_line_at_points(line, cut_points, tolerance))

    return to_multi(GeometryFamily.LINEAL, pieces)


def split_polygons(polygons: BaseGeometry, blade: BaseGeometry) -> Optional[MultiPolygon]:
    """Split every polygon of an areal geometry along the blade's linework.

    Polygons are split independently, so overlapping inputs give overlapping
    pieces. Returns None for point or mixed blades.
    """
    blade_family = geometry_family(blade)
    if blade_family not in (GeometryFamily.LINEAL, GeometryFamily.POLYGONAL):
        logger.debug("Cannot split polygons with %s blade", blade.geom_type)
        return None

    _, linework = _decompose_blade(blade)

    pieces: List[Polygon] = []
    for polygon in iter_components(polygons):
        if linework is None:
            pieces.append(polygon)
        else:
            pieces.extend(_split_polygon(polygon, linework))

    return to_multi(GeometryFamily.POLYGONAL, pieces)


def _decompose_blade(blade: BaseGeometry) -> Tuple[List[Point], Optional[BaseGeometry]]:
    """Separate a blade into its points and its (noded) linework."""
    points: List[Point] = []
    lines: List[BaseGeometry] = []
    for part in iter_components(blade):
        family = geometry_family(part)
        if family is GeometryFamily.PUNTAL:
            points.append(part)
        elif family is GeometryFamily.LINEAL:
            lines.append(part)
        else:
            lines.append(part.boundary)

    linework = unary_union(lines) if lines else None
    return points, linework


def _intersection_points(line: BaseGeometry, linework: BaseGeometry) -> List[Point]:
    crossing = line.intersection(linework)
    points: List[Point] = []
    for part in iter_components(crossing):
        if part.geom_type == 'Point':
            points.append(part)
        else:
            # Collinear overlap
            points.append(Point(part.coords[0]))
            points.append(Point(part.coords[-1]))
    return points


def _split_line_at_points(
    line: BaseGeometry,
    points: List[Point],
    tolerance: float,
) -> List[LineString]:
    """Cut one line at the given points, keeping maximal consecutive pieces."""
    coords = coords_array(line)
    if not points or len(coords) < 2:
        return [LineString(coords)]

    lengths = cumulative_lengths(coords)
    cuts = _locate_cuts(coords, lengths, points, tolerance)
    if not cuts:
        return [LineString(coords)]

    pieces = []
    current = [coords[0]]
    j = 0
    for i in range(1, len(coords)):
        segment_end = lengths[i]
        while j < len(cuts) and cuts[j][0] < segment_end - tolerance:
            cut_coord = cuts[j][1]
            current.append(cut_coord)
            pieces.append(current)
            current = [cut_coord]
            j += 1

        current.append(coords[i])

        # Cut falls on vertex i
        if j < len(cuts) and abs(cuts[j][0] - segment_end) <= tolerance:
            pieces.append(current)
            current = [coords[i]]
            j += 1

    pieces.append(current)

    result = []
    for piece in pieces:
        if len(piece) < 2:
            continue
        piece_line = LineString(piece)
        if piece_line.length > 0:
            result.append(piece_line)
    return result


def _locate_cuts(
    coords: np.ndarray,
    lengths: np.ndarray,
    points: List[Point],
    tolerance: float,
) -> List[Cut]:
    """Arc-length positions of the points lying on a path, sorted and deduplicated.

    Points off the path and points at either end of it are dropped.
    """
    located: List[Cut] = []
    for point in points:
        xy = np.array([point.x, point.y])
        for i in range(len(coords) - 1):
            t = locate_on_segment(xy, coords[i], coords[i + 1], tolerance)
            if t is None:
                continue
            s = lengths[i] + t * (lengths[i + 1] - lengths[i])
            located.append((float(s), _cut_coordinate(xy, coords[i], coords[i + 1], t)))
            break

    located.sort(key=lambda cut: cut[0])

    total = lengths[-1]
    cuts: List[Cut] = []
    for s, coord in located:
        if s <= tolerance or s >= total - tolerance:
            continue
        if cuts and s - cuts[-1][0] <= tolerance:
            continue
        cuts.append((s, coord))
    return cuts


def _cut_coordinate(xy: np.ndarray, start: np.ndarray, end: np.ndarray, t: float) -> np.ndarray:
    """Coordinate of a cut, with Z interpolated on 3D lines."""
    if len(start) > 2:
        z = start[2] + t * (end[2] - start[2])
        return np.array([xy[0], xy[1], z])
    return xy


def _split_polygon(polygon: Polygon, linework: BaseGeometry) -> List[Polygon]:
    """Node a polygon's rings with the linework and keep the faces inside it."""
    noded = unary_union([polygon.boundary, linework])
    inside = prep(polygon)

    faces = []
    for face in polygonize(noded):
        if inside.contains(face.representative_point()):
            faces.append(face)
    return faces


__all__ = [
    'DEFAULT_SPLIT_TOLERANCE',
    'split',
    'split_lines',
    'split_polygons',
]
