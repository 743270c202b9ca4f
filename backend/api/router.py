"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter
from api.endpoints import shapefile
from api import logs

# Create the main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(shapefile.router, prefix="/api/shapefile", tags=["shapefile"])
api_router.include_router(logs.router, prefix="/api", tags=["logs"])
