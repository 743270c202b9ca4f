"""
Shapefile Structural Validation
Independent predicate checks for header fields, record framing and coordinates.

Each ``validate_*`` function takes values already extracted from the binary
stream, returns ``None`` on success and raises ``ShapefileValidationError``
carrying exactly one ``ValidationIssue`` for the first violated invariant.
The checks share no state and can be called in any order, so a streaming
reader can reject a record before allocating anything sized by it.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from config.settings import (
    FILE_CODE,
    HEADER_LENGTH,
    MAX_PARTS_OR_POINTS,
    MAX_RECORD_CONTENT_LENGTH,
    VERSION,
)
from .shape_types import ShapeType, is_recognized


class IssueType(str, Enum):
    """Category tag for a validation failure."""

    HEADER_TOO_SHORT = "header_too_short"
    INVALID_FILE_CODE = "invalid_file_code"
    INVALID_FILE_LENGTH = "invalid_file_length"
    UNSUPPORTED_VERSION = "unsupported_version"
    INVALID_BOUNDING_BOX = "invalid_bounding_box"
    INVALID_RECORD_LENGTH = "invalid_record_length"
    TRUNCATED_RECORD = "truncated_record"
    NON_FINITE_COORDINATE = "non_finite_coordinate"
    INVALID_PART_COUNT = "invalid_part_count"
    PART_INDEX_OUT_OF_BOUNDS = "part_index_out_of_bounds"
    INVALID_PART_RANGE = "invalid_part_range"
    INVALID_SHAPE_TYPE = "invalid_shape_type"


class IssueScope(str, Enum):
    """
    How much of the input a failure invalidates.

    FILE issues stop processing of the whole file; RECORD issues only the
    current record, so a tolerant reader may skip ahead to the next one.
    """

    FILE = "file"
    RECORD = "record"


class ValidationDetails(BaseModel):
    code: str
    info: str


class ValidationIssue(BaseModel):
    """Diagnostic for a single violated invariant"""
    issue_type: IssueType
    scope: IssueScope
    message: str
    details: Optional[ValidationDetails] = None


class ShapefileValidationError(ValueError):
    """Raised by every validate_* check; carries the issue that failed."""

    def __init__(self, issue: ValidationIssue):
        super().__init__(issue.message)
        self.issue = issue


def _fail(issue_type: IssueType, scope: IssueScope, message: str, code: str, info: str) -> None:
    raise ShapefileValidationError(
        ValidationIssue(
            issue_type=issue_type,
            scope=scope,
            message=message,
            details=ValidationDetails(code=code, info=info),
        )
    )


# ---------------------------------------------------------------------------
# Header checks
# ---------------------------------------------------------------------------

def validate_header_buffer(buffer_length: int) -> None:
    """Buffer must hold at least the fixed 100-byte header."""
    if buffer_length < HEADER_LENGTH:
        _fail(
            IssueType.HEADER_TOO_SHORT,
            IssueScope.FILE,
            f"Invalid shapefile: buffer too small for header (got {buffer_length}, need {HEADER_LENGTH})",
            "HEADER_VALIDATION_ERROR",
            f"buffer_length={buffer_length}",
        )


def validate_file_code(file_code: int) -> None:
    if file_code != FILE_CODE:
        _fail(
            IssueType.INVALID_FILE_CODE,
            IssueScope.FILE,
            f"Invalid shapefile: incorrect file code (got {file_code}, expected {FILE_CODE})",
            "FILE_CODE_ERROR",
            f"file_code={file_code}",
        )


def validate_file_length(file_length: int, buffer_length: int) -> None:
    """
    Declared file length must cover the header and fit in the buffer.

    Both values must be in the same unit; the header stores the length in
    16-bit words, so callers convert it to bytes before comparing against a
    byte buffer.
    """
    if file_length < HEADER_LENGTH or file_length > buffer_length:
        _fail(
            IssueType.INVALID_FILE_LENGTH,
            IssueScope.FILE,
            f"Invalid shapefile: incorrect file length (got {file_length}, buffer size {buffer_length})",
            "FILE_LENGTH_ERROR",
            f"file_length={file_length}, buffer_length={buffer_length}",
        )


def validate_version(version: int) -> None:
    if version != VERSION:
        _fail(
            IssueType.UNSUPPORTED_VERSION,
            IssueScope.FILE,
            f"Invalid shapefile: unsupported version (got {version}, expected {VERSION})",
            "VERSION_ERROR",
            f"version={version}",
        )


def validate_bounding_box(x_min: float, y_min: float, x_max: float, y_max: float) -> None:
    if not all(math.isfinite(v) for v in (x_min, y_min, x_max, y_max)):
        _fail(
            IssueType.INVALID_BOUNDING_BOX,
            IssueScope.FILE,
            f"Invalid shapefile: invalid bounding box coordinates ({x_min}, {y_min}, {x_max}, {y_max})",
            "BOUNDING_BOX_ERROR",
            f"bbox=({x_min}, {y_min}, {x_max}, {y_max})",
        )


# ---------------------------------------------------------------------------
# Record framing checks
# ---------------------------------------------------------------------------

def validate_record_content_length(content_length: int, record_number: int) -> None:
    """Reject corrupt length fields before they size an allocation."""
    if content_length < 0 or content_length > MAX_RECORD_CONTENT_LENGTH:
        _fail(
            IssueType.INVALID_RECORD_LENGTH,
            IssueScope.RECORD,
            f"Invalid shapefile: unreasonable record content length {content_length} for record {record_number}",
            "RECORD_LENGTH_ERROR",
            f"content_length={content_length}, record_number={record_number}",
        )


def validate_record_buffer_space(
    offset: int,
    record_size: int,
    buffer_length: int,
    record_number: Optional[int] = None,
) -> None:
    if offset < 0 or record_size < 0 or offset + record_size > buffer_length:
        available = max(buffer_length - offset, 0)
        record_label = f"record {record_number}" if record_number is not None else "record"
        _fail(
            IssueType.TRUNCATED_RECORD,
            IssueScope.RECORD,
            f"Invalid shapefile: truncated record content for {record_label} "
            f"(need {record_size} bytes at offset {offset}, have {available})",
            "RECORD_BUFFER_ERROR",
            f"offset={offset}, record_size={record_size}, buffer_length={buffer_length}",
        )


def validate_point_coordinates(x: float, y: float, part_index: int, point_index: int) -> None:
    if not (math.isfinite(x) and math.isfinite(y)):
        _fail(
            IssueType.NON_FINITE_COORDINATE,
            IssueScope.RECORD,
            f"Invalid shapefile: non-finite coordinates ({x}, {y}) at part {part_index}, point {point_index}",
            "COORDINATE_ERROR",
            f"part_index={part_index}, point_index={point_index}",
        )


def validate_parts_and_points(num_parts: int, num_points: int, shape_type: str) -> None:
    if (
        num_parts <= 0
        or num_parts > MAX_PARTS_OR_POINTS
        or num_points <= 0
        or num_points > MAX_PARTS_OR_POINTS
    ):
        _fail(
            IssueType.INVALID_PART_COUNT,
            IssueScope.RECORD,
            f"Invalid {shape_type}: unreasonable number of parts ({num_parts}) or points ({num_points})",
            "PARTS_POINTS_ERROR",
            f"num_parts={num_parts}, num_points={num_points}",
        )


def validate_part_index(part_index: int, num_points: int) -> None:
    """A part's start offset must address an existing point."""
    if part_index < 0 or part_index >= num_points:
        _fail(
            IssueType.PART_INDEX_OUT_OF_BOUNDS,
            IssueScope.RECORD,
            f"Invalid shapefile: part index {part_index} out of bounds (num points: {num_points})",
            "PART_INDEX_ERROR",
            f"part_index={part_index}, num_points={num_points}",
        )


def validate_part_range(start: int, end: int, part_index: int) -> None:
    if start >= end:
        _fail(
            IssueType.INVALID_PART_RANGE,
            IssueScope.RECORD,
            f"Invalid shapefile: part {part_index} has invalid range ({start} >= {end})",
            "PART_RANGE_ERROR",
            f"part_index={part_index}, start={start}, end={end}",
        )


def validate_shape_type(shape_type: int) -> bool:
    """
    Check a shape type code.

    Returns:
        bool: True for a geometry-bearing code, False for the null shape (0)

    Raises:
        ShapefileValidationError: the code is not one of the 14 recognized codes
    """
    if not is_recognized(shape_type):
        _fail(
            IssueType.INVALID_SHAPE_TYPE,
            IssueScope.RECORD,
            f"Invalid shape type: {shape_type}",
            "SHAPE_TYPE_ERROR",
            f"shape_type={shape_type}",
        )
    return shape_type != ShapeType.NULL
