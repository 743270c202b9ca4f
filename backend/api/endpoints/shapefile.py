"""
Shapefile Geometry API Endpoints
Exposes header validation and record-to-GeoJSON conversion over JSON
"""
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from typing import Optional, Dict, Any, List
import logging

from pipelines.shapefile.geometry import GeometryConversionError, calculate_bounds
from pipelines.shapefile.pipeline import ShapefileGeometryPipeline, ShapefileHeader
from utils.response_models import (
    BoundsResponse,
    GeometryResponse,
    HeaderValidationResponse,
    ShapeTypesResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()

pipeline = ShapefileGeometryPipeline()


# Request models
class HeaderValidationRequest(BaseModel):
    buffer_length: int
    file_code: int
    file_length: int
    version: int
    shape_type: int
    x_min: float
    y_min: float
    x_max: float
    y_max: float


class GeometryRequest(BaseModel):
    shape_type: int
    coordinates: List[float]
    parts: Optional[List[int]] = None
    record_number: int = 1
    attributes: Optional[Dict[str, Any]] = None


class BoundsRequest(BaseModel):
    coordinates: List[float]


@router.get("/shape-types", response_model=ShapeTypesResponse)
async def get_shape_types():
    """
    List recognized shape type codes
    """
    return ShapeTypesResponse(status="success", shape_types=pipeline.get_available_shape_types())


@router.post("/validate/header", response_model=HeaderValidationResponse)
async def validate_header(request: HeaderValidationRequest):
    """
    Validate extracted main-file header fields and report every issue
    """
    try:
        header = ShapefileHeader(
            file_code=request.file_code,
            file_length=request.file_length,
            version=request.version,
            shape_type=request.shape_type,
            x_min=request.x_min,
            y_min=request.y_min,
            x_max=request.x_max,
            y_max=request.y_max,
        )
        issues = pipeline.collect_header_issues(header, request.buffer_length)
        if issues:
            logger.info(f"Header validation found {len(issues)} issue(s): {[i.issue_type.value for i in issues]}")

        return HeaderValidationResponse(status="success", valid=not issues, issues=issues)

    except Exception as e:
        logger.error(f"Header validation failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Header validation failed: {str(e)}"
        )


@router.post("/geometry", response_model=GeometryResponse)
async def convert_geometry(request: GeometryRequest):
    """
    Validate one record's framing and convert it to a GeoJSON Feature
    """
    try:
        result = pipeline.process(
            request.shape_type,
            request.coordinates,
            parts=request.parts,
            record_number=request.record_number,
            attributes=request.attributes,
        )
    except Exception as e:
        logger.error(f"Geometry conversion failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Geometry conversion failed: {str(e)}"
        )

    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": result["error"], "issue": result["issue"]}
        )

    return GeometryResponse(status="success", feature=result["feature"])


@router.post("/bounds", response_model=BoundsResponse)
async def get_bounds(request: BoundsRequest):
    """
    Bounding box of a flat coordinate array
    """
    try:
        bounds = calculate_bounds(request.coordinates)
    except GeometryConversionError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": str(e), "issue": None}
        )

    return BoundsResponse(status="success", bbox=bounds.to_list())
