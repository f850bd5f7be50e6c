"""
FastAPI router module for GEO score calculation.

Implements POST /calculate-geo-metrics (recalculate a brand's GEO score from
its trailing mention window) and GET /geo-metrics/{brand_id}/history (stored
scores, newest first).

Calculation flow:
    1. Validate brandId (400 when missing, blank or rejected by the store)
    2. Verify the brand exists (404 otherwise)
    3. Fetch the trailing window of mention records
    4. Empty window: return a zero result with a message, store nothing
    5. Compute the GEO score and GEO CPI
    6. Store the score and upsert the monthly pillar snapshot
"""

import logging
from typing import Optional

from asyncpg.exceptions import DataError
from fastapi import APIRouter, HTTPException, Query

from geo_backend.core.dependencies import SettingsDep
from geo_backend.models import (
    BrandCalculationRequest,
    GeoMetricsResponse,
    GeoScoreHistoryResponse,
)
from geo_backend.services.geo_score import compute_geo_score
from geo_backend.services.mention_store import fetch_brand, fetch_mention_window
from geo_backend.services.score_persistence import fetch_geo_history, persist_geo_score


# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/calculate-geo-metrics", response_model=GeoMetricsResponse)
async def calculate_geo_metrics(
    request: BrandCalculationRequest,
    settings: SettingsDep,
) -> GeoMetricsResponse:
    """
    Recalculate the GEO score of a brand.

    Args:
        request: Body carrying the brandId.
        settings: Application settings (scoring window size).

    Returns:
        GeoMetricsResponse with score, cpi and the pillar breakdown.

    Raises:
        HTTPException(400): brandId missing, blank or malformed.
        HTTPException(404): Brand not found.
        HTTPException(500): Mention store or persistence failure.
    """
    brand_id = request.brandId
    if not brand_id:
        raise HTTPException(status_code=400, detail="brandId is required")

    try:
        brand = await fetch_brand(brand_id)
        if brand is None:
            raise HTTPException(status_code=404, detail="Brand not found")

        logger.info(f"[calculate-geo-metrics] Starting calculation for brand {brand_id}")

        mentions = await fetch_mention_window(brand_id, settings.scoring_window_days)
        if not mentions:
            logger.info(f"[calculate-geo-metrics] No mentions in window for brand {brand_id}")
            return GeoMetricsResponse(
                success=True,
                message="No mentions found for calculation",
            )

        result = compute_geo_score(mentions)
        await persist_geo_score(brand_id, result)

        logger.info(
            f"[calculate-geo-metrics] Brand {brand_id}: score={result.score} "
            f"cpi={result.cpi} mentions={result.breakdown.totalMentions}"
        )

        return GeoMetricsResponse(
            success=True,
            score=result.score,
            cpi=result.cpi,
            breakdown=result.breakdown,
        )

    except HTTPException:
        raise
    except DataError as e:
        logger.warning(f"Rejected malformed identifier: {e}")
        raise HTTPException(status_code=400, detail=f"Malformed identifier: {str(e)}")
    except Exception as e:
        logger.exception(f"[calculate-geo-metrics] Error calculating GEO score for brand {brand_id}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate GEO metrics: {str(e)}"
        )


@router.get("/geo-metrics/{brand_id}/history", response_model=GeoScoreHistoryResponse)
async def get_geo_history(
    brand_id: str,
    settings: SettingsDep,
    limit: Optional[int] = Query(default=None, ge=1, le=365, description="Maximum rows to return"),
) -> GeoScoreHistoryResponse:
    """
    Return the stored GEO scores of a brand, newest first.

    Raises:
        HTTPException(500): Database failure.
    """
    try:
        history = await fetch_geo_history(brand_id, limit or settings.history_default_limit)
        logger.info(f"Retrieved {len(history)} GEO scores for brand {brand_id}")
        return GeoScoreHistoryResponse(brandId=brand_id, history=history)

    except DataError as e:
        raise HTTPException(status_code=400, detail=f"Malformed identifier: {str(e)}")
    except Exception as e:
        logger.exception(f"Error retrieving GEO history for brand {brand_id}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to retrieve GEO history: {str(e)}"
        )
