"""
FastAPI router module for hallucination detection.

Implements POST /detect-hallucinations. The request names either one
execution, in which case its whole query group is analysed, or a brand, in
which case its most recent executions are grouped by query and analysed.
Analyses above the persistence threshold are stored as detections.
"""

import logging

from asyncpg.exceptions import DataError
from fastapi import APIRouter, HTTPException

from geo_backend.core.dependencies import SettingsDep
from geo_backend.models import HallucinationRequest, HallucinationResponse
from geo_backend.services.hallucination import (
    RISK_LEVEL_DESCRIPTIONS,
    analyze_executions,
    summarize_analyses,
)
from geo_backend.services.mention_store import (
    fetch_execution_group,
    fetch_recent_executions,
)
from geo_backend.services.score_persistence import insert_hallucination_detections


# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/detect-hallucinations", response_model=HallucinationResponse)
async def detect_hallucinations(
    request: HallucinationRequest,
    settings: SettingsDep,
) -> HallucinationResponse:
    """
    Cross-check LLM responses for likely hallucinations.

    Args:
        request: Body carrying executionId and/or brandId. executionId wins
            when both are given; brandId is then only the fallback owner of
            stored detections.
        settings: Application settings (thresholds, recent execution count).

    Returns:
        HallucinationResponse with per-response analyses, counts per risk
        band and the band descriptions.

    Raises:
        HTTPException(400): Neither executionId nor brandId given, or an id is malformed.
        HTTPException(500): Store or persistence failure.
    """
    if not request.executionId and not request.brandId:
        raise HTTPException(status_code=400, detail="executionId or brandId is required")

    try:
        if request.executionId:
            executions = await fetch_execution_group(request.executionId)
        else:
            executions = await fetch_recent_executions(
                request.brandId,
                settings.hallucination_recent_executions,
            )

        if not executions:
            logger.info("[detect-hallucinations] No executions found for analysis")
            return HallucinationResponse(
                success=True,
                message="No executions found for analysis",
                riskLevels=RISK_LEVEL_DESCRIPTIONS,
            )

        analyses, detections = analyze_executions(
            executions,
            brand_id=request.brandId,
            persist_threshold=settings.hallucination_persist_threshold,
            detected_threshold=settings.hallucination_detected_threshold,
        )
        await insert_hallucination_detections(detections)

        summary = summarize_analyses(analyses)
        logger.info(
            f"[detect-hallucinations] Complete: {summary.totalAnalyses} analyses, "
            f"critical={summary.criticalCount} high={summary.highCount} "
            f"avg risk={summary.avgRiskScore:.2f}%"
        )

        return HallucinationResponse(
            success=True,
            analyses=analyses,
            summary=summary,
            riskLevels=RISK_LEVEL_DESCRIPTIONS,
        )

    except HTTPException:
        raise
    except DataError as e:
        logger.warning(f"Rejected malformed identifier: {e}")
        raise HTTPException(status_code=400, detail=f"Malformed identifier: {str(e)}")
    except Exception as e:
        logger.exception("[detect-hallucinations] Error analysing executions")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to detect hallucinations: {str(e)}"
        )
