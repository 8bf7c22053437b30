"""Type definitions for geoforge operations.

This module defines the dimensionality families that the split, cover and
median operations dispatch on, and the classification of every shapely
geometry variant into one of them.
"""

from enum import Enum

from shapely.geometry.base import BaseGeometry

from .errors import UnsupportedGeometryTypeError


class GeometryFamily(Enum):
    """Dimensionality family of a geometry.

    Attributes:
        PUNTAL: Point or MultiPoint (dimension 0)
        LINEAL: LineString, LinearRing or MultiLineString (dimension 1)
        POLYGONAL: Polygon or MultiPolygon (dimension 2)
        MIXED: GeometryCollection whose components disagree, or an empty one

    Examples:
        >>> from shapely.geometry import LineString
        >>> from geoforge import geometry_family, GeometryFamily
        >>> geometry_family(LineString([(0, 0), (1, 1)])) is GeometryFamily.LINEAL
        True
    """
    PUNTAL = 'puntal'
    LINEAL = 'lineal'
    POLYGONAL = 'polygonal'
    MIXED = 'mixed'


# Every shapely variant except GeometryCollection, which is classified
# from its components.
_FAMILY_BY_TYPE = {
    'Point': GeometryFamily.PUNTAL,
    'MultiPoint': GeometryFamily.PUNTAL,
    'LineString': GeometryFamily.LINEAL,
    'LinearRing': GeometryFamily.LINEAL,
    'MultiLineString': GeometryFamily.LINEAL,
    'Polygon': GeometryFamily.POLYGONAL,
    'MultiPolygon': GeometryFamily.POLYGONAL,
}


def geometry_family(geometry: BaseGeometry) -> GeometryFamily:
    """Classify a geometry into its dimensionality family.

    A GeometryCollection takes the family shared by all of its components
    (nested collections included). Collections mixing families, and empty
    collections, are MIXED.

    Args:
        geometry: Any shapely geometry

    Returns:
        The geometry's GeometryFamily

    Raises:
        UnsupportedGeometryTypeError: If the variant is not a known shapely type
    """
    geom_type = geometry.geom_type
    if geom_type == 'GeometryCollection':
        families = {geometry_family(part) for part in geometry.geoms}
        if len(families) == 1:
            return families.pop()
        return GeometryFamily.MIXED

    try:
        return _FAMILY_BY_TYPE[geom_type]
    except KeyError:
        raise UnsupportedGeometryTypeError(geom_type) from None


__all__ = [
    'GeometryFamily',
    'geometry_family',
]
