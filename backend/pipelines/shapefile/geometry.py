"""
Shapefile Geometry Builder
Converts flat x/y coordinate arrays into GeoJSON-shaped geometry values.

Input arrays alternate x, y (``[x0, y0, x1, y1, ...]``) exactly as they sit in
a shapefile record. Ring orientation follows the shapefile convention:
clockwise rings are polygon exteriors, counter-clockwise rings are holes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Sequence, Tuple, Type

import numpy as np

logger = logging.getLogger(__name__)

Position = Tuple[float, float]
Ring = Tuple[Position, ...]


class GeometryConversionError(ValueError):
    """Base error for coordinate arrays that cannot become geometry"""
    pass


class CoordinateParityError(GeometryConversionError):
    """Coordinate array has an odd number of scalars"""
    pass


class RingTooShortError(GeometryConversionError):
    """Ring (or orientation input) has fewer than 3 points"""
    pass


class RingSliceError(GeometryConversionError):
    """Ring/part sizes address more points than were supplied"""
    pass


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box"""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def to_list(self) -> List[float]:
        """GeoJSON ``bbox`` member order"""
        return [self.min_x, self.min_y, self.max_x, self.max_y]


# ---------------------------------------------------------------------------
# Geometry values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Geometry:
    """
    Base of the geometry variant.

    Coordinates are nested tuples so values stay immutable; ``to_geojson``
    emits the interchange form with lists nested to the type's arity.
    """

    type: ClassVar[str] = "Geometry"
    coordinates: Any

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": self.type, "coordinates": _as_lists(self.coordinates)}

    def to_shapely(self):
        """Build the equivalent shapely geometry (rings are closed by shapely)."""
        from shapely.geometry import shape

        return shape(self.to_geojson())


@dataclass(frozen=True)
class Point(Geometry):
    type: ClassVar[str] = "Point"
    coordinates: Position


@dataclass(frozen=True)
class MultiPoint(Geometry):
    type: ClassVar[str] = "MultiPoint"
    coordinates: Tuple[Position, ...]


@dataclass(frozen=True)
class LineString(Geometry):
    type: ClassVar[str] = "LineString"
    coordinates: Tuple[Position, ...]


@dataclass(frozen=True)
class MultiLineString(Geometry):
    type: ClassVar[str] = "MultiLineString"
    coordinates: Tuple[Tuple[Position, ...], ...]


@dataclass(frozen=True)
class Polygon(Geometry):
    type: ClassVar[str] = "Polygon"
    coordinates: Tuple[Ring, ...]


@dataclass(frozen=True)
class MultiPolygon(Geometry):
    type: ClassVar[str] = "MultiPolygon"
    coordinates: Tuple[Tuple[Ring, ...], ...]


GEOMETRY_TYPES: Dict[str, Type[Geometry]] = {
    cls.type: cls for cls in (Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon)
}


def _as_lists(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return [_as_lists(item) for item in value]
    return value


def _as_tuples(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return tuple(_as_tuples(item) for item in value)
    return float(value)


def geometry_from_geojson(mapping: Dict[str, Any]) -> Geometry:
    """Rebuild a geometry value from its GeoJSON mapping."""
    geometry_type = mapping.get("type")
    cls = GEOMETRY_TYPES.get(geometry_type)
    if cls is None:
        raise GeometryConversionError(f"Unsupported geometry type: {geometry_type}")
    if "coordinates" not in mapping:
        raise GeometryConversionError(f"{geometry_type} is missing 'coordinates'")
    return cls(_as_tuples(mapping["coordinates"]))


# ---------------------------------------------------------------------------
# Coordinate array helpers
# ---------------------------------------------------------------------------

def coordinate_pairs(coordinates: Sequence[float]) -> np.ndarray:
    """Reshape a flat x/y array to (n, 2); odd lengths are rejected, never truncated."""
    values = np.asarray(coordinates, dtype=float)
    if values.ndim != 1:
        raise GeometryConversionError(f"Coordinates must be a flat array (got shape {values.shape})")
    if values.size % 2 != 0:
        raise CoordinateParityError(f"Coordinates array must have even length (got {values.size})")
    return values.reshape(-1, 2)


def _to_positions(pairs: np.ndarray) -> Tuple[Position, ...]:
    return tuple((x, y) for x, y in pairs.tolist())


def _slice_parts(pairs: np.ndarray, sizes: Sequence[int], label: str, min_points: int) -> List[np.ndarray]:
    """
    Cut (n, 2) pairs into consecutive parts of the given point counts.

    Parts below ``min_points`` raise RingTooShortError when min_points > 0.
    """
    parts = []
    offset = 0
    total = len(pairs)
    for index, size in enumerate(sizes):
        size = int(size)
        if min_points and size < min_points:
            raise RingTooShortError(f"{label} {index} must have at least {min_points} points (got {size})")
        end = offset + size
        if size < 0 or end > total:
            raise RingSliceError(
                f"{label} {index} spans points {offset}..{end} but only {total} points were supplied"
            )
        parts.append(pairs[offset:end])
        offset = end

    if offset < total:
        logger.warning(f"{total - offset} trailing points not covered by {label.lower()} sizes were ignored")
    return parts


# ---------------------------------------------------------------------------
# Builder operations
# ---------------------------------------------------------------------------

def calculate_bounds(coordinates: Sequence[float]) -> Bounds:
    """
    Bounding box of a flat coordinate array.

    An empty array yields the all-zero box rather than an error.
    """
    pairs = coordinate_pairs(coordinates)
    if len(pairs) == 0:
        return Bounds(0.0, 0.0, 0.0, 0.0)

    min_x, min_y = pairs.min(axis=0).tolist()
    max_x, max_y = pairs.max(axis=0).tolist()
    return Bounds(min_x, min_y, max_x, max_y)


def is_clockwise(coordinates: Sequence[float]) -> bool:
    """
    Ring orientation by the sign of the shoelace sum.

    Sums (x2 - x1) * (y2 + y1) over every edge, including the closing edge
    from the last vertex back to the first; a positive sum is clockwise.
    Explicitly closed rings get a zero-length closing edge.

    Raises:
        RingTooShortError: fewer than 6 scalars (3 points)
        CoordinateParityError: odd number of scalars
    """
    values = np.asarray(coordinates, dtype=float)
    if values.size < 6:
        raise RingTooShortError(f"Ring must have at least 3 points (got {values.size} coordinates)")

    pairs = coordinate_pairs(values)
    x, y = pairs[:, 0], pairs[:, 1]
    total = np.sum((np.roll(x, -1) - x) * (np.roll(y, -1) + y))
    return bool(total > 0.0)


def convert_point(x: float, y: float) -> Point:
    return Point((float(x), float(y)))


def convert_multi_point(coordinates: Sequence[float]) -> MultiPoint:
    return MultiPoint(_to_positions(coordinate_pairs(coordinates)))


def convert_polyline(coordinates: Sequence[float]) -> LineString:
    return LineString(_to_positions(coordinate_pairs(coordinates)))


def convert_multi_line_string(coordinates: Sequence[float], part_sizes: Sequence[int]) -> Geometry:
    """
    Convert a multi-part polyline.

    Parts with fewer than 2 points are skipped. One surviving part yields a
    LineString, several yield a MultiLineString.
    """
    pairs = coordinate_pairs(coordinates)
    parts = _slice_parts(pairs, part_sizes, "Part", min_points=0)

    lines = []
    for index, part in enumerate(parts):
        if len(part) < 2:
            logger.warning(f"Skipping polyline part {index} with insufficient points ({len(part)})")
            continue
        lines.append(_to_positions(part))

    if not lines:
        raise GeometryConversionError("Invalid polyline: no valid parts found (all parts have less than 2 points)")
    if len(lines) == 1:
        return LineString(lines[0])
    return MultiLineString(tuple(lines))


def convert_polygon(coordinates: Sequence[float], ring_sizes: Sequence[int]) -> Geometry:
    """
    Group rings into a Polygon or MultiPolygon by orientation.

    Every clockwise ring opens a new polygon as its exterior; the
    counter-clockwise rings that follow it are its holes. A leading
    counter-clockwise ring is accepted as the first polygon's exterior.

    Args:
        coordinates: flat x/y array holding every ring back to back
        ring_sizes: point count of each ring, in order

    Returns:
        Polygon when grouping yields one polygon, MultiPolygon otherwise
    """
    pairs = coordinate_pairs(coordinates)
    if len(ring_sizes) == 0:
        raise GeometryConversionError("Polygon requires at least one ring")
    rings = _slice_parts(pairs, ring_sizes, "Ring", min_points=3)

    polygons: List[List[Ring]] = []
    for index, ring in enumerate(rings):
        clockwise = is_clockwise(ring.ravel())
        logger.debug(f"Ring {index}: {len(ring)} points, clockwise={clockwise}")
        if clockwise or not polygons:
            polygons.append([_to_positions(ring)])
        else:
            polygons[-1].append(_to_positions(ring))

    logger.debug(f"Grouped {len(rings)} rings into {len(polygons)} polygon(s)")
    if len(polygons) == 1:
        return Polygon(tuple(polygons[0]))
    return MultiPolygon(tuple(tuple(polygon) for polygon in polygons))
