"""
Shapefile Pipeline Module
Structural validation and geometry reconstruction for shapefile records
"""
from .geometry import (
    Bounds,
    Geometry,
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryConversionError,
    CoordinateParityError,
    RingTooShortError,
    RingSliceError,
    calculate_bounds,
    is_clockwise,
    convert_point,
    convert_multi_point,
    convert_polyline,
    convert_multi_line_string,
    convert_polygon,
    geometry_from_geojson,
)
from .validation import IssueType, IssueScope, ValidationIssue, ShapefileValidationError
from .shape_types import ShapeType
from .pipeline import ShapefileGeometryPipeline, ShapefileHeader, ShapeDispatchError

__all__ = [
    "Bounds", "Geometry", "Point", "MultiPoint", "LineString", "MultiLineString", "Polygon", "MultiPolygon",
    "GeometryConversionError", "CoordinateParityError", "RingTooShortError", "RingSliceError",
    "calculate_bounds", "is_clockwise", "convert_point", "convert_multi_point", "convert_polyline",
    "convert_multi_line_string", "convert_polygon", "geometry_from_geojson",
    "IssueType", "IssueScope", "ValidationIssue", "ShapefileValidationError",
    "ShapeType", "ShapefileGeometryPipeline", "ShapefileHeader", "ShapeDispatchError",
]
