"""Tests for the median module."""

import re

import numpy as np
import pytest
from shapely.geometry import LineString, MultiPoint, Point, Polygon

from geoforge import geometric_median, solve_median, MedianConfig
from geoforge.core.errors import (
    ConfigurationError,
    ConvergenceError,
    UnsupportedGeometryTypeError,
)
from geoforge.median import _weiszfeld_step


class TestMedianConfig:
    """Test MedianConfig dataclass."""

    def test_default_values(self):
        cfg = MedianConfig()
        assert cfg.tolerance == 1e-6
        assert cfg.max_iterations == 1000
        assert cfg.fail_on_non_convergence is False


class TestGeometricMedian:
    """Tests for geometric_median function."""

    def test_two_points_give_midpoint(self):
        result = geometric_median(MultiPoint([(1480, 0), (620, 0)]))

        assert result.x == pytest.approx(1050, abs=1e-12)
        assert result.y == pytest.approx(0, abs=1e-12)

    def test_converges_onto_input_point(self):
        """The median of this set is one of the input points."""
        points = MultiPoint([(0, 0), (10, 1), (5, 1), (20, 20)])

        result = geometric_median(points, tolerance=1e-15)

        assert result.x == pytest.approx(5, abs=1e-12)
        assert result.y == pytest.approx(1, abs=1e-12)

    def test_coincident_points_pull_median(self):
        points = MultiPoint([(0, 0), (0, 0), (0, 0), (10, 0)])

        result = geometric_median(points)

        assert result.x == pytest.approx(0, abs=1e-5)
        assert result.y == pytest.approx(0, abs=1e-12)

    def test_all_points_identical(self):
        result = solve_median(MultiPoint([(3, 4), (3, 4)]))

        assert result.point.equals(Point(3, 4))
        assert result.converged
        assert result.iterations == 1

    def test_three_dimensional_points(self):
        result = geometric_median(MultiPoint([(1480, 0, 2), (620, 0, 4)]))

        assert result.has_z
        assert (result.x, result.y, result.z) == pytest.approx((1050, 0, 3))

    def test_empty_multipoint_gives_empty_point(self):
        result = geometric_median(MultiPoint())

        assert result.geom_type == 'Point'
        assert result.is_empty

    @pytest.mark.parametrize("geometry, name", [
        (LineString([(1480, 0), (620, 0)]), "LineString"),
        (Point(0, 0), "Point"),
        (Polygon([(0, 0), (1, 0), (1, 1)]), "Polygon"),
    ])
    def test_unsupported_geometry_type(self, geometry, name):
        with pytest.raises(UnsupportedGeometryTypeError) as exc_info:
            geometric_median(geometry)

        assert str(exc_info.value) == f"Unsupported geometry type: {name}"
        assert exc_info.value.geom_type == name

    def test_fail_on_non_convergence(self):
        points = MultiPoint([(12, 5), (62, 7), (100, -1), (100, -5), (10, 20), (105, -5)])

        with pytest.raises(
            ConvergenceError,
            match=re.escape("Median failed to converge within 1.0E-06 after 5 iterations."),
        ) as exc_info:
            geometric_median(points, 1e-6, 5, True)

        assert exc_info.value.tolerance == 1e-6
        assert exc_info.value.max_iterations == 5

    def test_non_convergence_returns_last_estimate(self):
        points = MultiPoint([(12, 5), (62, 7), (100, -1), (100, -5), (10, 20), (105, -5)])

        estimate = solve_median(points, MedianConfig(tolerance=1e-6, max_iterations=5))

        assert not estimate.converged
        assert estimate.iterations == 5
        assert not estimate.point.is_empty

    @pytest.mark.parametrize("kwargs", [
        {"tolerance": -1.0},
        {"max_iterations": 0},
    ])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ConfigurationError):
            geometric_median(MultiPoint([(0, 0), (1, 1)]), **kwargs)


class TestWeiszfeldStep:
    """Tests for the stabilized Weiszfeld update."""

    def test_stays_on_dominant_point(self):
        coords = np.array([[0.0, 0.0], [0.0, 0.0], [0.0, 0.0], [10.0, 0.0]])

        candidate, delta = _weiszfeld_step(coords, np.array([0.0, 0.0]))

        assert delta == 0.0
        assert candidate.tolist() == [0.0, 0.0]

    def test_leaves_non_optimal_point(self):
        coords = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 0.0]])

        candidate, delta = _weiszfeld_step(coords, np.array([0.0, 0.0]))

        assert candidate == pytest.approx([5.0, 0.0])
        assert delta == pytest.approx(5.0)

    def test_plain_step_is_inverse_distance_average(self):
        coords = np.array([[0.0, 0.0], [4.0, 0.0]])

        candidate, delta = _weiszfeld_step(coords, np.array([1.0, 0.0]))

        # weights 1 and 1/3
        assert candidate == pytest.approx([1.0, 0.0])
        assert delta == pytest.approx(0.0)
