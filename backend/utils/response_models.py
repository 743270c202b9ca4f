"""
Shared Response Models
Consistent response formats across the shapefile endpoints
"""
from pydantic import BaseModel
from typing import Dict, Any, Optional, List

from pipelines.shapefile.validation import ValidationIssue


class BaseResponse(BaseModel):
    """Base response format"""
    status: str  # "success" or "error"
    error: Optional[str] = None


class ShapeTypesResponse(BaseResponse):
    """Response for /shape-types"""
    shape_types: Optional[Dict[str, Dict[str, Any]]] = None


class HeaderValidationResponse(BaseResponse):
    """Response for header validation; issues is empty when the header is valid"""
    valid: bool
    issues: List[ValidationIssue] = []


class GeometryResponse(BaseResponse):
    """Response for geometry conversion endpoints"""
    feature: Optional[Dict[str, Any]] = None


class BoundsResponse(BaseResponse):
    bbox: Optional[List[float]] = None
