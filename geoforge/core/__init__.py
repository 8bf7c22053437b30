"""Core types and utilities for geoforge.

This module provides type definitions, enums, exceptions, and core utilities
used throughout the library.
"""

from .types import (
    GeometryFamily,
    geometry_family,
)

from .errors import (
    GeoforgeError,
    UnsupportedGeometryTypeError,
    ConvergenceError,
    ConfigurationError,
)

from .geometry_utils import (
    iter_components,
    to_multi,
    normalize_geometry,
    coords_array,
)

__all__ = [
    # Dimensionality families
    'GeometryFamily',
    'geometry_family',

    # Exceptions
    'GeoforgeError',
    'UnsupportedGeometryTypeError',
    'ConvergenceError',
    'ConfigurationError',

    # Geometry helpers
    'iter_components',
    'to_multi',
    'normalize_geometry',
    'coords_array',
]
