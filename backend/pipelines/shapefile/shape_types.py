"""
Shapefile Shape Types
Numeric shape-type discriminators and the geometry family each one decodes to
"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, FrozenSet


class ShapeType(IntEnum):
    """
    Shape type codes recognized by the shapefile main-file format.

    Z and M variants carry extra dimensions in the binary record; only x/y
    are consumed when building geometry.
    """

    NULL = 0
    POINT = 1
    POLYLINE = 3
    POLYGON = 5
    MULTIPOINT = 8
    POINTZ = 11
    POLYLINEZ = 13
    POLYGONZ = 15
    MULTIPOINTZ = 18
    POINTM = 21
    POLYLINEM = 23
    POLYGONM = 25
    MULTIPOINTM = 28
    MULTIPATCH = 31


SHAPE_TYPE_NAMES: Dict[int, str] = {member.value: member.name for member in ShapeType}

POINT_TYPES: FrozenSet[ShapeType] = frozenset({ShapeType.POINT, ShapeType.POINTZ, ShapeType.POINTM})
POLYLINE_TYPES: FrozenSet[ShapeType] = frozenset({ShapeType.POLYLINE, ShapeType.POLYLINEZ, ShapeType.POLYLINEM})
POLYGON_TYPES: FrozenSet[ShapeType] = frozenset({ShapeType.POLYGON, ShapeType.POLYGONZ, ShapeType.POLYGONM})
MULTIPOINT_TYPES: FrozenSet[ShapeType] = frozenset({ShapeType.MULTIPOINT, ShapeType.MULTIPOINTZ, ShapeType.MULTIPOINTM})

# Shape types whose records carry a parts array in their framing
PARTED_TYPES: FrozenSet[ShapeType] = POLYLINE_TYPES | POLYGON_TYPES | frozenset({ShapeType.MULTIPATCH})


def shape_type_name(code: int) -> str:
    """Return the upper-case format name for a code, or UNKNOWN(<code>)."""
    return SHAPE_TYPE_NAMES.get(code, f"UNKNOWN({code})")


def is_recognized(code: int) -> bool:
    return code in SHAPE_TYPE_NAMES
