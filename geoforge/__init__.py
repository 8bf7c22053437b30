"""Geoforge - Computational geometry functions.

This library splits geometries by a blade, covers geometries with fixed-level
S2 cells and computes geometric medians of point sets, using Shapely as the
geometry kernel.
"""


# Split functions
from .split import split

# Cell covering functions
from .cover import cover, cell_level, cell_to_polygon

# Geometric median
from .median import geometric_median, solve_median, MedianConfig, MedianEstimate

# Measurement functions
from .metrics import num_points

# Core types and helpers
from .core import (
    GeometryFamily,
    geometry_family,
    normalize_geometry,
)

# Core exceptions
from .core import (
    GeoforgeError,
    UnsupportedGeometryTypeError,
    ConvergenceError,
    ConfigurationError,
)

__all__ = [

    # Split
    'split',

    # Cell covering
    'cover',
    'cell_level',
    'cell_to_polygon',

    # Geometric median
    'geometric_median',
    'solve_median',
    'MedianConfig',
    'MedianEstimate',

    # Measurement
    'num_points',

    # Core types and helpers
    'GeometryFamily',
    'geometry_family',
    'normalize_geometry',

    # Core exceptions
    'GeoforgeError',
    'UnsupportedGeometryTypeError',
    'ConvergenceError',
    'ConfigurationError',
]
