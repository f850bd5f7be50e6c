"""
FastAPI router module for IGO metrics calculation.

Implements POST /calculate-igo-metrics (ICE, GAP, CPI and Stability for a
brand's trailing mention window, plus KAPI levels and the composite IGO
score) and GET /igo-metrics/{brand_id}/history.
"""

import logging
import time
from typing import Optional

from asyncpg.exceptions import DataError
from fastapi import APIRouter, HTTPException, Query

from geo_backend.core.dependencies import SettingsDep
from geo_backend.models import (
    BrandCalculationRequest,
    IGOMetricsHistoryResponse,
    IGOMetricsResponse,
)
from geo_backend.services.igo_metrics import classify_igo_metrics, compute_igo_metrics
from geo_backend.services.mention_store import fetch_brand, fetch_mention_window
from geo_backend.services.score_persistence import fetch_igo_history, insert_igo_metrics


# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/calculate-igo-metrics", response_model=IGOMetricsResponse)
async def calculate_igo_metrics(
    request: BrandCalculationRequest,
    settings: SettingsDep,
) -> IGOMetricsResponse:
    """
    Recalculate the IGO indices of a brand and append them to its history.

    Args:
        request: Body carrying the brandId.
        settings: Application settings (scoring window size).

    Returns:
        IGOMetricsResponse with the four indices, their KAPI classification,
        the composite IGO score, metadata and the run duration.

    Raises:
        HTTPException(400): brandId missing, blank or malformed.
        HTTPException(404): Brand not found.
        HTTPException(500): Mention store or persistence failure.
    """
    started = time.monotonic()

    brand_id = request.brandId
    if not brand_id:
        raise HTTPException(status_code=400, detail="brandId is required")

    try:
        brand = await fetch_brand(brand_id)
        if brand is None:
            raise HTTPException(status_code=404, detail="Brand not found")

        logger.info(f"[calculate-igo-metrics] Starting calculation for brand {brand['name']} ({brand_id})")

        mentions = await fetch_mention_window(brand_id, settings.scoring_window_days)
        if not mentions:
            logger.info(f"[calculate-igo-metrics] No mentions in window for brand {brand_id}")
            return IGOMetricsResponse(
                success=True,
                message="No mentions found for calculation",
                durationMs=int((time.monotonic() - started) * 1000),
            )

        result = compute_igo_metrics(mentions)
        await insert_igo_metrics(brand_id, result)

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"[calculate-igo-metrics] Brand {brand_id}: ICE={result.ice:.2f}% "
            f"GAP={result.gap:.2f}% CPI={result.cpi:.2f}% "
            f"Stability={result.stability:.2f}% ({duration_ms}ms)"
        )

        return IGOMetricsResponse(
            success=True,
            ice=result.ice,
            gap=result.gap,
            cpi=result.cpi,
            stability=result.stability,
            igoScore=result.igoScore,
            classification=classify_igo_metrics(result),
            metadata=result.metadata,
            durationMs=duration_ms,
        )

    except HTTPException:
        raise
    except DataError as e:
        logger.warning(f"Rejected malformed identifier: {e}")
        raise HTTPException(status_code=400, detail=f"Malformed identifier: {str(e)}")
    except Exception as e:
        logger.exception(f"[calculate-igo-metrics] Error calculating IGO metrics for brand {brand_id}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate IGO metrics: {str(e)}"
        )


@router.get("/igo-metrics/{brand_id}/history", response_model=IGOMetricsHistoryResponse)
async def get_igo_history(
    brand_id: str,
    settings: SettingsDep,
    limit: Optional[int] = Query(default=None, ge=1, le=365, description="Maximum rows to return"),
) -> IGOMetricsHistoryResponse:
    """Return the stored IGO metrics of a brand, newest first."""
    try:
        history = await fetch_igo_history(brand_id, limit or settings.history_default_limit)
        logger.info(f"Retrieved {len(history)} IGO metric rows for brand {brand_id}")
        return IGOMetricsHistoryResponse(brandId=brand_id, history=history)

    except DataError as e:
        raise HTTPException(status_code=400, detail=f"Malformed identifier: {str(e)}")
    except Exception as e:
        logger.exception(f"Error retrieving IGO history for brand {brand_id}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to retrieve IGO history: {str(e)}"
        )
