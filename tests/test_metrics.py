"""Tests for the metrics module."""

import pytest
from shapely.geometry import LineString, Point, Polygon

from geoforge import num_points
from geoforge.core.errors import UnsupportedGeometryTypeError


class TestNumPoints:
    """Tests for num_points function."""

    def test_linestring(self):
        line = LineString([(0, 1), (1, 0), (2, 0)])

        assert num_points(line) == 3

    def test_polygon_unsupported(self):
        polygon = Polygon([(0, 0), (0, 90), (90, 0), (0, 0)])

        with pytest.raises(UnsupportedGeometryTypeError) as exc_info:
            num_points(polygon)

        assert str(exc_info.value) == (
            "Unsupported geometry type: Polygon, only LineString geometry is supported."
        )

    def test_unsupported_is_value_error(self):
        with pytest.raises(ValueError):
            num_points(Point(0, 0))
