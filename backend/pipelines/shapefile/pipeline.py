"""
Shapefile Geometry Pipeline
Routes validated shapefile records to the geometry builder and wraps the
result as GeoJSON features
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .geometry import (
    Bounds,
    Geometry,
    GeometryConversionError,
    calculate_bounds,
    convert_multi_line_string,
    convert_multi_point,
    convert_point,
    convert_polygon,
    convert_polyline,
    coordinate_pairs,
)
from .shape_types import (
    MULTIPOINT_TYPES,
    PARTED_TYPES,
    POINT_TYPES,
    POLYGON_TYPES,
    POLYLINE_TYPES,
    ShapeType,
    shape_type_name,
)
from .validation import (
    IssueScope,
    ShapefileValidationError,
    ValidationIssue,
    validate_bounding_box,
    validate_file_code,
    validate_file_length,
    validate_header_buffer,
    validate_part_index,
    validate_part_range,
    validate_parts_and_points,
    validate_point_coordinates,
    validate_shape_type,
    validate_version,
)

logger = logging.getLogger(__name__)


class ShapeDispatchError(GeometryConversionError):
    """Shape type is recognized but cannot be converted with the given input"""
    pass


@dataclass(frozen=True)
class ShapefileHeader:
    """
    Main-file header fields as extracted by the byte reader.

    ``file_length`` is expected in bytes (the header stores 16-bit words).
    """

    file_code: int
    file_length: int
    version: int
    shape_type: int
    x_min: float
    y_min: float
    x_max: float
    y_max: float


class ShapefileGeometryPipeline:
    """
    Pipeline for turning shapefile record values into GeoJSON geometry
    """

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def _header_checks(self, header: ShapefileHeader, buffer_length: int):
        # File order: size, code, length, version, shape type, bbox
        return [
            lambda: validate_header_buffer(buffer_length),
            lambda: validate_file_code(header.file_code),
            lambda: validate_file_length(header.file_length, buffer_length),
            lambda: validate_version(header.version),
            lambda: validate_shape_type(header.shape_type),
            lambda: validate_bounding_box(header.x_min, header.y_min, header.x_max, header.y_max),
        ]

    def validate_header(self, header: ShapefileHeader, buffer_length: int) -> None:
        """Run every header check, stopping at the first violation."""
        for check in self._header_checks(header, buffer_length):
            try:
                check()
            except ShapefileValidationError as e:
                # An unreadable header shape type invalidates the whole file
                raise ShapefileValidationError(e.issue.model_copy(update={"scope": IssueScope.FILE})) from e

    def collect_header_issues(self, header: ShapefileHeader, buffer_length: int) -> List[ValidationIssue]:
        """Run every header check and report all issues found."""
        issues = []
        for check in self._header_checks(header, buffer_length):
            try:
                check()
            except ShapefileValidationError as e:
                issues.append(e.issue.model_copy(update={"scope": IssueScope.FILE}))
        return issues

    # ------------------------------------------------------------------
    # Geometry dispatch
    # ------------------------------------------------------------------

    def process_geometry(
        self,
        shape_type: int,
        coordinates: Sequence[float],
        part_sizes: Optional[Sequence[int]] = None,
    ) -> Geometry:
        """
        Convert one record's coordinates according to its shape type.

        Args:
            shape_type: numeric shape type code
            coordinates: flat x/y array
            part_sizes: point count of each part; required for polygons,
                optional for polylines (absent means a single line)

        Returns:
            Geometry: converted geometry value
        """
        if not validate_shape_type(shape_type):
            raise ShapeDispatchError("Invalid or null shape type: null shapes carry no geometry")

        shape = ShapeType(shape_type)
        if shape in POINT_TYPES:
            if len(coordinates) != 2:
                raise ShapeDispatchError(f"Point must have exactly 2 coordinates (got {len(coordinates)})")
            return convert_point(coordinates[0], coordinates[1])

        if shape in POLYLINE_TYPES:
            if part_sizes is None:
                return convert_polyline(coordinates)
            return convert_multi_line_string(coordinates, part_sizes)

        if shape in POLYGON_TYPES:
            if part_sizes is None:
                raise ShapeDispatchError(
                    f"{shape.name} requires ring sizes from the record's parts array"
                )
            return convert_polygon(coordinates, part_sizes)

        if shape in MULTIPOINT_TYPES:
            return convert_multi_point(coordinates)

        raise ShapeDispatchError(f"Unsupported shape type: {shape.name}")

    def decode_record(
        self,
        shape_type: int,
        coordinates: Sequence[float],
        parts: Optional[Sequence[int]] = None,
    ) -> Optional[Geometry]:
        """
        Validate a record's framing and convert it.

        ``parts`` are the part start offsets (point indices) exactly as the
        record stores them. Each part reads its points at their absolute
        positions, so points before the first offset belong to no part.
        Counts, offsets, ranges and coordinate finiteness are checked before
        any part is sliced.

        Returns:
            Geometry, or None for a null-shape record
        """
        geometry, _ = self._decode(shape_type, coordinates, parts)
        return geometry

    def _decode(
        self,
        shape_type: int,
        coordinates: Sequence[float],
        parts: Optional[Sequence[int]],
    ) -> Tuple[Optional[Geometry], np.ndarray]:
        """Decode a record; also returns the (n, 2) points its parts cover."""
        if not validate_shape_type(shape_type):
            return None, np.empty((0, 2))

        pairs = coordinate_pairs(coordinates)
        shape = ShapeType(shape_type)
        label = shape.name.lower()
        num_points = len(pairs)

        part_sizes = None
        starts = [0]
        if shape in PARTED_TYPES:
            if parts is None:
                raise ShapeDispatchError(f"{shape.name} records require a parts array")
            validate_parts_and_points(len(parts), num_points, label)
            for part_index in parts:
                validate_part_index(part_index, num_points)
            starts = [int(p) for p in parts]
            ends = starts[1:] + [num_points]
            for index, (start, end) in enumerate(zip(starts, ends)):
                validate_part_range(start, end, index)
            part_sizes = [end - start for start, end in zip(starts, ends)]
        elif shape in MULTIPOINT_TYPES:
            validate_parts_and_points(1, num_points, label)

        first = starts[0]
        if first > 0:
            logger.warning(f"{first} points before the first part offset of a {label} record were ignored")
        used = pairs[first:]

        self._validate_finite(used, [start - first for start in starts], first)
        geometry = self.process_geometry(shape_type, used.ravel().tolist(), part_sizes)
        return geometry, used

    def _validate_finite(self, pairs: np.ndarray, starts: List[int], offset: int = 0) -> None:
        finite = np.isfinite(pairs).all(axis=1)
        if finite.all():
            return
        point_index = int(np.argmin(finite))
        part_index = int(np.searchsorted(starts, point_index, side="right")) - 1
        x, y = pairs[point_index].tolist()
        validate_point_coordinates(x, y, part_index, point_index + offset)

    # ------------------------------------------------------------------
    # GeoJSON output
    # ------------------------------------------------------------------

    def record_to_feature(
        self,
        geometry: Optional[Geometry],
        record_number: int,
        shape_type: int,
        attributes: Optional[Dict[str, Any]] = None,
        bbox: Optional[Bounds] = None,
    ) -> Dict[str, Any]:
        """Wrap a converted record as a GeoJSON Feature."""
        properties = dict(attributes or {})
        properties["recordNumber"] = record_number
        properties["shapeType"] = shape_type_name(shape_type)

        feature: Dict[str, Any] = {
            "type": "Feature",
            "geometry": geometry.to_geojson() if geometry is not None else None,
            "properties": properties,
        }
        if bbox is not None:
            feature["bbox"] = bbox.to_list()
        return feature

    def process(
        self,
        shape_type: int,
        coordinates: Sequence[float],
        parts: Optional[Sequence[int]] = None,
        record_number: int = 1,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """
        Decode one record into a feature

        Returns:
            dict: {"success": True, "feature": ...} or {"success": False, "error": ..., "issue": ...}
        """
        try:
            geometry, used = self._decode(shape_type, coordinates, parts)
            bbox = calculate_bounds(used.ravel()) if geometry is not None else None
            feature = self.record_to_feature(geometry, record_number, shape_type, attributes, bbox)
            logger.info(
                f"Decoded record {record_number} ({shape_type_name(shape_type)}) "
                f"as {feature['geometry']['type'] if geometry is not None else 'null'}",
                extra={"record_number": record_number},
            )
            return {"success": True, "feature": feature}

        except ShapefileValidationError as e:
            logger.warning(f"Record {record_number} failed validation: {e}", extra={"record_number": record_number})
            return {"success": False, "error": str(e), "issue": e.issue.model_dump(mode="json")}
        except GeometryConversionError as e:
            logger.warning(f"Record {record_number} could not be converted: {e}", extra={"record_number": record_number})
            return {"success": False, "error": str(e), "issue": None}

    def get_available_shape_types(self) -> Dict[str, Any]:
        return {
            shape.name: {
                "code": shape.value,
                "has_geometry": shape != ShapeType.NULL and shape != ShapeType.MULTIPATCH,
                "requires_parts": shape in PARTED_TYPES,
            }
            for shape in ShapeType
        }
