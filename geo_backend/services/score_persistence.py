"""
Persistence of calculation results and score history reads.

Every calculation run appends a new row; nothing here updates a previous
result except the monthly pillar snapshot, which is upserted on
(brand_id, month) so re-running within a month is idempotent.

Tables:
    - geo_scores (brand_id, score, cpi, breakdown jsonb, calculated_at)
    - geo_pillars_monthly (brand_id, month, visibility, authority,
      sentiment, consistency), unique on (brand_id, month)
    - igo_metrics_history (brand_id, ice, gap, cpi, stability, recorded_at)
    - hallucination_detections (brand_id, execution_id, detected,
      confidence, details, detected_at)

Failures are not caught here: an asyncpg error aborts the calculation run
and surfaces to the caller.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from geo_backend.core.database import (
    execute_command,
    execute_many,
    execute_query,
    get_db_pool,
)
from geo_backend.models import (
    GeoScoreHistoryItem,
    GeoScoreResult,
    HallucinationDetection,
    IGOMetricsHistoryItem,
    IGOMetricsResult,
)

logger = logging.getLogger(__name__)


def month_start(moment: datetime) -> date:
    """First day of the month containing `moment`, the snapshot key."""
    return date(moment.year, moment.month, 1)


# =============================================================================
# GEO Score
# =============================================================================


async def persist_geo_score(
    brand_id: str,
    result: GeoScoreResult,
    now: Optional[datetime] = None
) -> None:
    """
    Store a GEO score and refresh the brand's monthly pillar snapshot.

    Both statements run in one transaction: either the score row and the
    snapshot are written together or neither is.

    Args:
        brand_id: Brand the score belongs to.
        result: Output of compute_geo_score.
        now: Calculation time; defaults to the current UTC time.
    """
    calculated_at = now or datetime.now(timezone.utc)
    breakdown = result.breakdown

    insert_score = """
        INSERT INTO geo_scores (brand_id, score, cpi, breakdown, calculated_at)
        VALUES ($1, $2, $3, $4::jsonb, $5)
    """

    upsert_pillars = """
        INSERT INTO geo_pillars_monthly (
            brand_id, month, visibility, authority, sentiment, consistency
        ) VALUES ($1, $2, $3, $4, $5, $6)
        ON CONFLICT (brand_id, month) DO UPDATE SET
            visibility = EXCLUDED.visibility,
            authority = EXCLUDED.authority,
            sentiment = EXCLUDED.sentiment,
            consistency = EXCLUDED.consistency
    """

    pool = await get_db_pool()

    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute(
                insert_score,
                brand_id,
                result.score,
                result.cpi,
                json.dumps(breakdown.model_dump()),
                calculated_at,
            )
            await conn.execute(
                upsert_pillars,
                brand_id,
                month_start(calculated_at),
                breakdown.visibility,
                breakdown.authority,
                breakdown.sentiment,
                breakdown.consistency,
            )

    logger.info(f"Stored GEO score {result.score} for brand {brand_id}")


async def fetch_geo_history(brand_id: str, limit: int = 30) -> List[GeoScoreHistoryItem]:
    """Stored GEO scores of a brand, newest first."""
    query = """
        SELECT score, cpi, calculated_at
        FROM geo_scores
        WHERE brand_id = $1
        ORDER BY calculated_at DESC
        LIMIT $2
    """
    rows = await execute_query(query, brand_id, limit)
    return [
        GeoScoreHistoryItem(
            score=float(row['score']),
            cpi=float(row['cpi']) if row['cpi'] is not None else None,
            calculatedAt=row['calculated_at'],
        )
        for row in rows
    ]


# =============================================================================
# IGO Metrics
# =============================================================================


async def insert_igo_metrics(
    brand_id: str,
    result: IGOMetricsResult,
    now: Optional[datetime] = None
) -> str:
    """
    Append an IGO metrics row to the brand's history.

    Returns:
        The command status string, e.g. 'INSERT 0 1'.
    """
    query = """
        INSERT INTO igo_metrics_history (brand_id, ice, gap, cpi, stability, recorded_at)
        VALUES ($1, $2, $3, $4, $5, $6)
    """
    return await execute_command(
        query,
        brand_id,
        result.ice,
        result.gap,
        result.cpi,
        result.stability,
        now or datetime.now(timezone.utc),
    )


async def fetch_igo_history(brand_id: str, limit: int = 30) -> List[IGOMetricsHistoryItem]:
    """Stored IGO metrics of a brand, newest first."""
    query = """
        SELECT ice, gap, cpi, stability, recorded_at
        FROM igo_metrics_history
        WHERE brand_id = $1
        ORDER BY recorded_at DESC
        LIMIT $2
    """
    rows = await execute_query(query, brand_id, limit)

    def _value(row, column):
        return float(row[column]) if row[column] is not None else None

    return [
        IGOMetricsHistoryItem(
            ice=_value(row, 'ice'),
            gap=_value(row, 'gap'),
            cpi=_value(row, 'cpi'),
            stability=_value(row, 'stability'),
            recordedAt=row['recorded_at'],
        )
        for row in rows
    ]


# =============================================================================
# Hallucination Detections
# =============================================================================


async def insert_hallucination_detections(
    detections: Sequence[HallucinationDetection],
    now: Optional[datetime] = None
) -> int:
    """
    Store qualifying hallucination detections in one batch.

    Returns:
        Number of rows written; 0 when there is nothing to store.
    """
    if not detections:
        return 0

    detected_at = now or datetime.now(timezone.utc)
    query = """
        INSERT INTO hallucination_detections (
            brand_id, execution_id, detected, confidence, details, detected_at
        ) VALUES ($1, $2, $3, $4, $5, $6)
    """
    await execute_many(query, [
        (
            d.brandId,
            d.executionId,
            d.detected,
            d.confidence,
            d.details,
            detected_at,
        )
        for d in detections
    ])

    logger.info(f"Stored {len(detections)} hallucination detections")
    return len(detections)
