"""
Utility modules for the shapegeom backend.
"""

from utils.response_models import (
    BaseResponse,
    ShapeTypesResponse,
    HeaderValidationResponse,
    GeometryResponse,
    BoundsResponse,
)

__all__ = [
    'BaseResponse',
    'ShapeTypesResponse',
    'HeaderValidationResponse',
    'GeometryResponse',
    'BoundsResponse',
]
