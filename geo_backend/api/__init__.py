"""
Backend API package initialization.

This package contains FastAPI router modules for the GEO metrics service:
- geo_metrics: GEO score calculation and history
- igo_metrics: IGO indices (ICE, GAP, CPI, Stability) calculation and history
- hallucinations: Cross-provider hallucination risk detection
"""

from fastapi import APIRouter

# Import router modules
from geo_backend.api.geo_metrics import router as geo_metrics_router
from geo_backend.api.igo_metrics import router as igo_metrics_router
from geo_backend.api.hallucinations import router as hallucinations_router

# Create main API router
api_router = APIRouter()

# Routers declare full paths (/calculate-geo-metrics, /geo-metrics/...)
api_router.include_router(geo_metrics_router, tags=["geo-metrics"])
api_router.include_router(igo_metrics_router, tags=["igo-metrics"])
api_router.include_router(hallucinations_router, tags=["hallucinations"])

# Export all routers for selective imports
__all__ = [
    "api_router",
    "geo_metrics_router",
    "igo_metrics_router",
    "hallucinations_router",
]
