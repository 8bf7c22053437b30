"""Fixed-level S2 cell coverings.

Coordinates are read as longitude (x) and latitude (y) in degrees. Every
returned cell sits at exactly the requested level: coarse cells that contain
the geometry are still subdivided down to that level.

Cells are compared with geometries in the lon/lat plane. A cell's shape there
follows its great-circle edges, is split at the antimeridian and, for cells
touching a pole, runs along the pole's latitude.
"""

from __future__ import annotations

import logging
import numbers
from typing import Iterator, List, Set

import numpy as np
import s2sphere
from shapely.affinity import translate
from shapely.geometry import Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.prepared import prep

from .core.errors import ConfigurationError
from .core.geometry_utils import coords_array, iter_components

logger = logging.getLogger(__name__)

MAX_CELL_LEVEL = 30
_FACE_COUNT = 6

# Largest spacing of edge samples, in arc and in longitude
_EDGE_STEP_DEGREES = 0.25
_POLE_EPSILON = 1e-12
_BOUND_MARGIN_DEGREES = 1e-9
_WORLD = box(-180.0, -90.0, 180.0, 90.0)


def cover(geometry: BaseGeometry, level: int) -> List[int]:
    """Cover a geometry with S2 cells of one fixed level.

    Multi-geometries and collections are covered component by component and
    the coverings are merged, so covering a geometry equals the union of the
    coverings of its parts. The cell of every vertex is always part of the
    covering.

    Args:
        geometry: Geometry in lon/lat degrees
        level: S2 level of every returned cell, 0 (faces) to 30 (leaves)

    Returns:
        Sorted list of distinct S2 cell ids

    Raises:
        ConfigurationError: If level is outside [0, 30]

    Examples:
        >>> cells = cover(Point(1, 2), 30)
        >>> len(cells), cell_level(cells[0])
        (1, 30)
    """
    valid_type = isinstance(level, numbers.Integral) and not isinstance(level, bool)
    if not valid_type or not 0 <= level <= MAX_CELL_LEVEL:
        raise ConfigurationError(
            f"level must be an integer between 0 and {MAX_CELL_LEVEL}, got {level!r}"
        )
    level = int(level)

    cells: Set[int] = set()
    for component in iter_components(geometry):
        cells.update(cell.id() for cell in _vertex_cells(component, level))
        if component.geom_type != 'Point':
            cells.update(cell.id() for cell in _cover_component(component, level))

    logger.debug("Covered %s with %d cells at level %d", geometry.geom_type, len(cells), level)
    return sorted(cells)


def cell_level(cell: int) -> int:
    """Return the S2 level of a cell id."""
    return s2sphere.CellId(cell).level()


def cell_to_polygon(cell: int) -> BaseGeometry:
    """Return the lon/lat shape of a cell.

    A Polygon, or a MultiPolygon for cells split at the antimeridian.
    """
    return _cell_polygon(s2sphere.CellId(cell))


def _vertex_cells(component: BaseGeometry, level: int) -> Iterator[s2sphere.CellId]:
    for lng, lat in coords_array(component)[:, :2]:
        lat_lng = s2sphere.LatLng.from_degrees(float(lat), float(lng))
        yield s2sphere.CellId.from_lat_lng(lat_lng).parent(level)


def _cover_component(component: BaseGeometry, level: int) -> Iterator[s2sphere.CellId]:
    """Depth-first subdivision from the face cells down to ``level``.

    Cells above the target level are pruned by their lat/lng bounding
    rectangle, which encloses the whole cell; cells at the target level are
    kept when their lon/lat shape intersects the component.
    """
    target = prep(component)
    stack = [
        s2sphere.CellId.from_face_pos_level(face, 0, 0)
        for face in reversed(range(_FACE_COUNT))
    ]

    while stack:
        cell_id = stack.pop()
        if cell_id.level() == level:
            if target.intersects(_cell_polygon(cell_id)):
                yield cell_id
            continue

        if not any(target.intersects(bound) for bound in _cell_bounds(cell_id)):
            continue

        children = []
        child = cell_id.child_begin()
        end = cell_id.child_end()
        while child != end:
            children.append(child)
            child = child.next()
        stack.extend(reversed(children))


def _cell_polygon(cell_id: s2sphere.CellId) -> BaseGeometry:
    """Lon/lat shape of a cell, traced along its densified boundary."""
    ring = _cell_ring(s2sphere.Cell(cell_id))
    radius = np.hypot(ring[:, 0], ring[:, 1])
    lats = np.degrees(np.arctan2(ring[:, 2], radius))
    lngs = np.degrees(np.arctan2(ring[:, 1], ring[:, 0]))
    at_pole = radius < _POLE_EPSILON

    # Start from a sample with a defined longitude
    order = np.roll(np.arange(len(ring)), -int(np.argmin(at_pole)))
    center_lng = cell_id.to_lat_lng().lng().degrees

    vertices = []
    lng = None
    previous = None
    pole_lat = None
    for i in order:
        if at_pole[i]:
            pole_lat = 90.0 if lats[i] > 0 else -90.0
            continue
        if lng is None:
            lng = center_lng + _wrap_degrees(lngs[i] - center_lng)
        else:
            lng += _wrap_degrees(lngs[i] - previous)
        previous = lngs[i]
        if pole_lat is not None:
            vertices.append((vertices[-1][0], pole_lat))
            vertices.append((lng, pole_lat))
            pole_lat = None
        vertices.append((lng, lats[i]))

    first_lng, first_lat = vertices[0]
    winding = lng + _wrap_degrees(lngs[order[0]] - previous) - first_lng
    if pole_lat is not None:
        vertices.append((lng, pole_lat))
        vertices.append((first_lng, pole_lat))
    elif abs(winding) > 180.0:
        # Boundary circles a pole
        end_lng = first_lng + 360.0 * round(winding / 360.0)
        pole_lat = 90.0 if first_lat > 0 else -90.0
        vertices.extend([(end_lng, first_lat), (end_lng, pole_lat), (first_lng, pole_lat)])

    return _wrap_to_world(Polygon(vertices))


def _cell_ring(cell: s2sphere.Cell) -> np.ndarray:
    """Unit vectors along a cell's boundary, each edge sampled on its great circle."""
    corners = []
    for k in range(4):
        vertex = cell.get_vertex(k)
        corners.append(np.array([vertex[0], vertex[1], vertex[2]]))

    samples = []
    for k in range(4):
        start = corners[k]
        end = corners[(k + 1) % 4]
        steps = _edge_steps(start, end)
        t = (np.arange(steps) / steps)[:, np.newaxis]
        chord = (1.0 - t) * start + t * end
        samples.append(chord / np.linalg.norm(chord, axis=1)[:, np.newaxis])
    return np.vstack(samples)


def _edge_steps(start: np.ndarray, end: np.ndarray) -> int:
    arc = np.degrees(np.arccos(np.clip(np.dot(start, end), -1.0, 1.0)))
    sweep = 0.0
    if np.hypot(start[0], start[1]) > _POLE_EPSILON and np.hypot(end[0], end[1]) > _POLE_EPSILON:
        start_lng = np.degrees(np.arctan2(start[1], start[0]))
        end_lng = np.degrees(np.arctan2(end[1], end[0]))
        sweep = abs(_wrap_degrees(end_lng - start_lng))
    return max(1, int(np.ceil(max(arc, sweep) / _EDGE_STEP_DEGREES)))


def _wrap_degrees(angle: float) -> float:
    """Wrap an angle difference into [-180, 180)."""
    return (angle + 180.0) % 360.0 - 180.0


def _wrap_to_world(polygon: Polygon) -> BaseGeometry:
    """Fold a polygon with unwrapped longitudes back into [-180, 180]."""
    min_x, _, max_x, _ = polygon.bounds
    if min_x >= -180.0 and max_x <= 180.0:
        return polygon

    parts = []
    for offset in (-360.0, 0.0, 360.0):
        piece = translate(polygon, xoff=offset).intersection(_WORLD)
        parts.extend(part for part in iter_components(piece) if part.geom_type == 'Polygon')
    return unary_union(parts)


def _cell_bounds(cell_id: s2sphere.CellId) -> List[Polygon]:
    """Lon/lat boxes enclosing a cell, split in two across the antimeridian."""
    rect = s2sphere.Cell(cell_id).get_rect_bound()
    margin = _BOUND_MARGIN_DEGREES
    lat_lo = rect.lat_lo().degrees - margin
    lat_hi = rect.lat_hi().degrees + margin
    lng = rect.lng()

    if lng.is_full():
        return [box(-180.0, lat_lo, 180.0, lat_hi)]

    lng_lo = rect.lng_lo().degrees - margin
    lng_hi = rect.lng_hi().degrees + margin
    if lng.is_inverted():
        return [box(lng_lo, lat_lo, 180.0, lat_hi), box(-180.0, lat_lo, lng_hi, lat_hi)]
    return [box(lng_lo, lat_lo, lng_hi, lat_hi)]


__all__ = [
    'MAX_CELL_LEVEL',
    'cover',
    'cell_level',
    'cell_to_polygon',
]
