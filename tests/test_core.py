"""Tests for core types and shared utilities."""

import numpy as np
import pytest
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

from geoforge.core import (
    GeometryFamily,
    geometry_family,
    iter_components,
    normalize_geometry,
    to_multi,
    coords_array,
)
from geoforge.core.iterative_utils import iterate_to_convergence
from geoforge.core.spatial_utils import (
    cumulative_lengths,
    dominant_axis_parameter,
    locate_on_segment,
)

SQUARE = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])


class TestGeometryFamily:
    """Tests for geometry_family classification."""

    @pytest.mark.parametrize("geometry, family", [
        (Point(0, 0), GeometryFamily.PUNTAL),
        (MultiPoint([(0, 0), (1, 1)]), GeometryFamily.PUNTAL),
        (LineString([(0, 0), (1, 1)]), GeometryFamily.LINEAL),
        (LinearRing([(0, 0), (1, 0), (1, 1)]), GeometryFamily.LINEAL),
        (MultiLineString([[(0, 0), (1, 1)]]), GeometryFamily.LINEAL),
        (SQUARE, GeometryFamily.POLYGONAL),
        (MultiPolygon([SQUARE]), GeometryFamily.POLYGONAL),
    ])
    def test_simple_variants(self, geometry, family):
        assert geometry_family(geometry) is family

    def test_homogeneous_collection(self):
        collection = GeometryCollection([
            LineString([(0, 0), (1, 1)]),
            MultiLineString([[(2, 2), (3, 3)]]),
        ])
        assert geometry_family(collection) is GeometryFamily.LINEAL

    def test_nested_collection(self):
        collection = GeometryCollection([GeometryCollection([SQUARE]), SQUARE])
        assert geometry_family(collection) is GeometryFamily.POLYGONAL

    def test_heterogeneous_collection(self):
        collection = GeometryCollection([LineString([(0, 0), (1, 1)]), SQUARE])
        assert geometry_family(collection) is GeometryFamily.MIXED

    def test_empty_collection(self):
        assert geometry_family(GeometryCollection()) is GeometryFamily.MIXED


class TestGeometryUtils:
    """Tests for decomposition, construction and normalization helpers."""

    def test_iter_components_flattens(self):
        collection = GeometryCollection([
            MultiPoint([(0, 0), (1, 1)]),
            LineString([(0, 0), (1, 0)]),
        ])

        types = [part.geom_type for part in iter_components(collection)]

        assert types == ['Point', 'Point', 'LineString']

    def test_iter_components_single(self):
        assert list(iter_components(SQUARE)) == [SQUARE]

    def test_to_multi(self):
        lines = [LineString([(0, 0), (1, 1)]), LineString([(2, 2), (3, 3)])]

        result = to_multi(GeometryFamily.LINEAL, lines)

        assert result.geom_type == 'MultiLineString'
        assert len(result.geoms) == 2

    def test_to_multi_mixed_raises(self):
        with pytest.raises(ValueError):
            to_multi(GeometryFamily.MIXED, [])

    def test_normalize_orders_components(self):
        lines = MultiLineString([[(1, 1), (2, 2)], [(0.5, 0.5), (0, 0)]])

        result = normalize_geometry(lines)

        assert [list(part.coords) for part in result.geoms] == [
            [(0.0, 0.0), (0.5, 0.5)],
            [(1.0, 1.0), (2.0, 2.0)],
        ]

    def test_normalize_ignores_ring_start_and_orientation(self):
        a = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        b = Polygon([(1, 1), (1, 0), (0, 0), (0, 1)])

        assert normalize_geometry(a).equals_exact(normalize_geometry(b), 0)

    def test_coords_array_keeps_z(self):
        assert coords_array(LineString([(0, 0, 1), (1, 1, 2)])).shape == (2, 3)
        assert coords_array(LineString([(0, 0), (1, 1)])).shape == (2, 2)


class TestSpatialUtils:
    """Tests for segment location helpers."""

    def test_locate_projects_onto_segment(self):
        t = locate_on_segment(
            np.array([0.25, 1e-12]), np.array([0.0, 0.0]), np.array([1.0, 0.0]), 1e-9
        )
        assert t == pytest.approx(0.25)

    def test_locate_beyond_segment_end(self):
        t = locate_on_segment(
            np.array([1.5, 0.0]), np.array([0.0, 0.0]), np.array([1.0, 0.0]), 1e-9
        )
        assert t is None

    def test_locate_on_degenerate_segment(self):
        start = np.array([2.0, 2.0])

        assert locate_on_segment(np.array([2.0, 2.0]), start, start.copy(), 1e-9) == 0.0
        assert locate_on_segment(np.array([2.0, 2.1]), start, start.copy(), 1e-9) is None

    def test_dominant_axis_vertical(self):
        t = dominant_axis_parameter(
            np.array([1.5, 0.5]), np.array([1.5, 0.0]), np.array([1.5, 1.5])
        )
        assert t == pytest.approx(1 / 3)

    def test_dominant_axis_reversed_segment(self):
        t = dominant_axis_parameter(
            np.array([0.5, 0.5]), np.array([2.0, 2.0]), np.array([0.0, 0.0])
        )
        assert t == pytest.approx(0.75)

    def test_locate_off_segment(self):
        t = locate_on_segment(
            np.array([0.5, 0.1]), np.array([0.0, 0.0]), np.array([1.0, 0.0]), 1e-9
        )
        assert t is None

    def test_cumulative_lengths(self):
        coords = np.array([[0.0, 0.0], [3.0, 4.0], [3.0, 5.0]])
        assert cumulative_lengths(coords).tolist() == [0.0, 5.0, 6.0]


class TestIterateToConvergence:
    """Tests for the fixed-point iteration loop."""

    def test_converges(self):
        result = iterate_to_convergence(1.0, lambda x: (x / 2, x / 2), tolerance=0.1, max_iterations=10)

        assert result.value == 0.0625
        assert result.iterations == 4
        assert result.converged

    def test_stops_at_max_iterations(self):
        result = iterate_to_convergence(0, lambda x: (x + 1, 1.0), tolerance=0.5, max_iterations=3)

        assert result.value == 3
        assert result.iterations == 3
        assert not result.converged
