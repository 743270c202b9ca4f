from __future__ import annotations

import dataclasses
import logging

import pytest
from shapely.geometry import LinearRing
from shapely.geometry import MultiPoint as ShapelyMultiPoint

from .geometry import (
    Bounds,
    CoordinateParityError,
    GeometryConversionError,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    RingSliceError,
    RingTooShortError,
    calculate_bounds,
    convert_multi_line_string,
    convert_multi_point,
    convert_point,
    convert_polygon,
    convert_polyline,
    geometry_from_geojson,
    is_clockwise,
)

# Clockwise exterior and counter-clockwise hole (shapefile ring convention)
SQUARE_CW = [0, 0, 0, 10, 10, 10, 10, 0, 0, 0]
HOLE_CCW = [2, 2, 4, 2, 4, 4, 2, 4, 2, 2]
SECOND_SQUARE_CW = [20, 0, 20, 10, 30, 10, 30, 0, 20, 0]


def _reverse_ring(coords: list[float]) -> list[float]:
    pairs = [coords[i:i + 2] for i in range(0, len(coords), 2)]
    return [v for pair in reversed(pairs) for v in pair]


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

def test_calculate_bounds_basic() -> None:
    assert calculate_bounds([0.0, 0.0, 1.0, 1.0, 2.0, 2.0]) == Bounds(0.0, 0.0, 2.0, 2.0)


def test_calculate_bounds_mixed_signs() -> None:
    coords = [3.5, -1.0, -2.0, 4.0, 0.0, 0.5]
    bounds = calculate_bounds(coords)

    assert bounds == Bounds(-2.0, -1.0, 3.5, 4.0)
    assert bounds.min_x <= bounds.max_x and bounds.min_y <= bounds.max_y
    xs, ys = coords[0::2], coords[1::2]
    assert bounds.min_x in xs and bounds.max_x in xs
    assert bounds.min_y in ys and bounds.max_y in ys


@pytest.mark.parametrize("x, y", [(0.0, 0.0), (-120.5, 45.25), (1e9, -1e-9)])
def test_calculate_bounds_single_point(x: float, y: float) -> None:
    assert calculate_bounds([x, y]).to_list() == [x, y, x, y]


def test_calculate_bounds_empty_is_zero_box() -> None:
    assert calculate_bounds([]) == Bounds(0.0, 0.0, 0.0, 0.0)


def test_calculate_bounds_matches_shapely() -> None:
    coords = [10.0, 5.0, -3.0, 8.0, 7.5, -6.0, 0.0, 0.0]
    expected = ShapelyMultiPoint([(10.0, 5.0), (-3.0, 8.0), (7.5, -6.0), (0.0, 0.0)]).bounds
    assert tuple(calculate_bounds(coords).to_list()) == expected


# ---------------------------------------------------------------------------
# Orientation
# ---------------------------------------------------------------------------

def test_is_clockwise_counter_clockwise_triangle() -> None:
    assert is_clockwise([0, 0, 1, 0, 0, 1, 0, 0]) is False


def test_is_clockwise_clockwise_square() -> None:
    assert is_clockwise([0, 0, 0, 1, 1, 1, 1, 0, 0, 0]) is True


def test_is_clockwise_reversal_flips_result() -> None:
    for ring in (SQUARE_CW, HOLE_CCW, [0, 0, 1, 0, 0, 1, 0, 0]):
        assert is_clockwise(_reverse_ring(ring)) is not is_clockwise(ring)


def test_is_clockwise_invariant_under_start_rotation() -> None:
    # Closed ring: drop the repeated vertex, rotate, close again
    open_ring = SQUARE_CW[:-2]
    for shift in range(0, len(open_ring), 2):
        rotated = open_ring[shift:] + open_ring[:shift]
        assert is_clockwise(rotated + rotated[:2]) is True
        # Implicitly closed ring
        assert is_clockwise(rotated) is True


@pytest.mark.parametrize("ring", [SQUARE_CW, HOLE_CCW, [0, 0, 5, 1, 3, 4, -1, 2]])
def test_is_clockwise_agrees_with_shapely(ring: list[float]) -> None:
    shapely_ring = LinearRing([ring[i:i + 2] for i in range(0, len(ring), 2)])
    assert is_clockwise(ring) is not shapely_ring.is_ccw


@pytest.mark.parametrize("coords", [[], [0, 0], [0, 0, 1, 1], [0, 0, 1, 1, 2]])
def test_is_clockwise_requires_three_points(coords: list[float]) -> None:
    with pytest.raises(RingTooShortError):
        is_clockwise(coords)


def test_is_clockwise_odd_length_rejected() -> None:
    with pytest.raises(CoordinateParityError):
        is_clockwise([0, 0, 1, 0, 0, 1, 0])


# ---------------------------------------------------------------------------
# Point / MultiPoint / LineString
# ---------------------------------------------------------------------------

def test_convert_point_geojson() -> None:
    point = convert_point(1, 2.5)
    assert point == Point((1.0, 2.5))
    assert point.to_geojson() == {"type": "Point", "coordinates": [1.0, 2.5]}


def test_convert_multi_point_geojson() -> None:
    geometry = convert_multi_point([1, 2, 3, 4])
    assert isinstance(geometry, MultiPoint)
    assert geometry.to_geojson() == {"type": "MultiPoint", "coordinates": [[1.0, 2.0], [3.0, 4.0]]}


def test_convert_polyline_geojson() -> None:
    geometry = convert_polyline([0, 0, 1, 1, 2, 0])
    assert isinstance(geometry, LineString)
    assert geometry.to_geojson() == {
        "type": "LineString",
        "coordinates": [[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]],
    }


@pytest.mark.parametrize(
    "convert",
    [
        calculate_bounds,
        convert_multi_point,
        convert_polyline,
        lambda coords: convert_polygon(coords, [3]),
        lambda coords: convert_multi_line_string(coords, [3]),
    ],
)
def test_odd_length_coordinates_rejected(convert) -> None:
    with pytest.raises(CoordinateParityError):
        convert([0, 0, 1, 0, 1, 1, 0])


def test_geometry_values_are_frozen() -> None:
    point = convert_point(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.coordinates = (3.0, 4.0)


# ---------------------------------------------------------------------------
# Multi-part polylines
# ---------------------------------------------------------------------------

def test_multi_line_string_single_part_is_line_string() -> None:
    geometry = convert_multi_line_string([0, 0, 1, 1], [2])
    assert geometry == LineString(((0.0, 0.0), (1.0, 1.0)))


def test_multi_line_string_two_parts() -> None:
    geometry = convert_multi_line_string([0, 0, 1, 1, 5, 5, 6, 6, 7, 7], [2, 3])
    assert isinstance(geometry, MultiLineString)
    assert geometry.to_geojson()["coordinates"] == [
        [[0.0, 0.0], [1.0, 1.0]],
        [[5.0, 5.0], [6.0, 6.0], [7.0, 7.0]],
    ]


def test_multi_line_string_skips_single_point_parts(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        geometry = convert_multi_line_string([9, 9, 0, 0, 1, 1], [1, 2])
    assert geometry == LineString(((0.0, 0.0), (1.0, 1.0)))
    assert "Skipping polyline part 0" in caplog.text


def test_multi_line_string_without_valid_parts_fails() -> None:
    with pytest.raises(GeometryConversionError):
        convert_multi_line_string([0, 0, 1, 1], [1, 1])


# ---------------------------------------------------------------------------
# Polygon grouping
# ---------------------------------------------------------------------------

def test_polygon_with_hole_is_single_polygon() -> None:
    geometry = convert_polygon(SQUARE_CW + HOLE_CCW, [5, 5])

    assert isinstance(geometry, Polygon)
    rings = geometry.to_geojson()["coordinates"]
    assert len(rings) == 2
    assert rings[0][1] == [0.0, 10.0]
    assert rings[1][1] == [4.0, 2.0]


def test_two_clockwise_rings_make_multi_polygon() -> None:
    geometry = convert_polygon(SQUARE_CW + SECOND_SQUARE_CW, [5, 5])

    assert isinstance(geometry, MultiPolygon)
    polygons = geometry.to_geojson()["coordinates"]
    assert len(polygons) == 2
    assert all(len(polygon) == 1 for polygon in polygons)


def test_hole_attaches_to_preceding_exterior() -> None:
    geometry = convert_polygon(SQUARE_CW + SECOND_SQUARE_CW + HOLE_CCW, [5, 5, 5])

    assert isinstance(geometry, MultiPolygon)
    assert [len(polygon) for polygon in geometry.coordinates] == [1, 2]


def test_leading_counter_clockwise_ring_becomes_exterior() -> None:
    geometry = convert_polygon(HOLE_CCW, [5])
    assert isinstance(geometry, Polygon)
    assert len(geometry.coordinates) == 1

    geometry = convert_polygon(HOLE_CCW + SQUARE_CW, [5, 5])
    assert isinstance(geometry, MultiPolygon)
    assert geometry.coordinates[0][0][1] == (4.0, 2.0)


def test_polygon_ring_is_not_closed_or_reordered() -> None:
    geometry = convert_polygon([0, 0, 0, 1, 1, 0], [3])
    assert geometry.to_geojson() == {
        "type": "Polygon",
        "coordinates": [[[0.0, 0.0], [0.0, 1.0], [1.0, 0.0]]],
    }


def test_polygon_ring_too_short() -> None:
    with pytest.raises(RingTooShortError, match="Ring 1"):
        convert_polygon(SQUARE_CW + [0, 0, 1, 1], [5, 2])


def test_polygon_ring_sizes_exceed_coordinates() -> None:
    with pytest.raises(RingSliceError):
        convert_polygon(SQUARE_CW, [5, 4])


def test_polygon_requires_rings() -> None:
    with pytest.raises(GeometryConversionError):
        convert_polygon(SQUARE_CW, [])


def test_polygon_trailing_points_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        geometry = convert_polygon(SQUARE_CW + [50, 50], [5])
    assert isinstance(geometry, Polygon)
    assert "1 trailing points" in caplog.text


def test_polygon_to_shapely() -> None:
    shapely_polygon = convert_polygon(SQUARE_CW + HOLE_CCW, [5, 5]).to_shapely()

    assert shapely_polygon.geom_type == "Polygon"
    assert len(shapely_polygon.interiors) == 1
    assert shapely_polygon.area == pytest.approx(96.0)


def test_geometry_from_geojson_restores_value() -> None:
    geometry = convert_polygon(SQUARE_CW + SECOND_SQUARE_CW, [5, 5])
    assert geometry_from_geojson(geometry.to_geojson()) == geometry


def test_geometry_from_geojson_unknown_type() -> None:
    with pytest.raises(GeometryConversionError):
        geometry_from_geojson({"type": "GeometryCollection", "geometries": []})
