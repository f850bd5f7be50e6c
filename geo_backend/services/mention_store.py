"""
Read access to brands, mention records and raw LLM executions.

The LLM dispatch layer writes these tables; this service only reads them and
maps rows onto the immutable input models the aggregators consume.

Tables:
    - brands (id, name, user_id)
    - mentions_llm (brand_id, provider, query, collected_at, mentioned,
      confidence, position, ...)
    - nucleus_executions (id, query_id, provider, response, confidence,
      executed_at, ...) joined with nucleus_queries (id, brand_id, query)

Rows whose provider is not a known LLMProvider are skipped with a warning
rather than failing the whole calculation.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from geo_backend.core.database import execute_query, execute_query_one
from geo_backend.models import LLMProvider, MentionExecution, MentionRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Row Mapping
# =============================================================================


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _parse_provider(value: Any) -> Optional[LLMProvider]:
    try:
        return LLMProvider(str(value).lower())
    except ValueError:
        logger.warning(f"Skipping row with unknown provider: {value!r}")
        return None


def row_to_mention(row: Any) -> Optional[MentionRecord]:
    """
    Map a mentions_llm row to a MentionRecord.

    Returns:
        MentionRecord, or None when the provider is not recognised.
    """
    provider = _parse_provider(row['provider'])
    if provider is None:
        return None

    return MentionRecord(
        brandId=str(row['brand_id']),
        provider=provider,
        query=row['query'] or "",
        collectedAt=row['collected_at'],
        mentioned=bool(row['mentioned']),
        confidence=_optional_float(row['confidence']),
        position=int(row['position']) if row['position'] is not None else None,
    )


def row_to_execution(row: Any) -> Optional[MentionExecution]:
    """Map a nucleus_executions row (joined with its query) to a MentionExecution."""
    provider = _parse_provider(row['provider'])
    if provider is None:
        return None

    return MentionExecution(
        id=str(row['id']),
        queryId=str(row['query_id']),
        brandId=str(row['brand_id']) if row['brand_id'] is not None else None,
        provider=provider,
        query=row['query'],
        response=row['response'],
        confidence=_optional_float(row['confidence']),
        executedAt=row['executed_at'],
    )


# =============================================================================
# Brands
# =============================================================================


async def fetch_brand(brand_id: str) -> Optional[dict]:
    """
    Look up a brand by id.

    Returns:
        Dict with id, name and user_id, or None if the brand does not exist.
    """
    row = await execute_query_one(
        "SELECT id, name, user_id FROM brands WHERE id = $1",
        brand_id,
    )
    return dict(row) if row is not None else None


# =============================================================================
# Mention Window
# =============================================================================


async def fetch_mention_window(
    brand_id: str,
    window_days: int = 30,
    now: Optional[datetime] = None
) -> List[MentionRecord]:
    """
    Fetch the trailing window of mention records for a brand.

    Args:
        brand_id: Brand identifier.
        window_days: Size of the window in days.
        now: End of the window; defaults to the current UTC time.

    Returns:
        Mention records collected within the window, oldest first.
    """
    end = now or datetime.now(timezone.utc)
    since = end - timedelta(days=window_days)

    query = """
        SELECT brand_id, provider, query, collected_at,
               mentioned, confidence, position
        FROM mentions_llm
        WHERE brand_id = $1
          AND collected_at >= $2
        ORDER BY collected_at ASC
    """
    rows = await execute_query(query, brand_id, since)

    mentions = [m for m in (row_to_mention(row) for row in rows) if m is not None]
    logger.debug(f"Fetched {len(mentions)} mentions for brand {brand_id} since {since.isoformat()}")
    return mentions


# =============================================================================
# LLM Executions
# =============================================================================

_EXECUTION_COLUMNS = """
    e.id, e.query_id, e.provider, e.response, e.confidence, e.executed_at,
    q.brand_id, q.query
"""


async def fetch_execution_group(execution_id: str) -> List[MentionExecution]:
    """
    Fetch an execution together with every sibling execution of its query.

    Returns:
        Executions of the same query ordered by executed_at, or an empty
        list when the execution does not exist.
    """
    query = f"""
        SELECT {_EXECUTION_COLUMNS}
        FROM nucleus_executions e
        JOIN nucleus_queries q ON q.id = e.query_id
        WHERE e.query_id = (
            SELECT query_id FROM nucleus_executions WHERE id = $1
        )
        ORDER BY e.executed_at ASC
    """
    rows = await execute_query(query, execution_id)
    return [e for e in (row_to_execution(row) for row in rows) if e is not None]


async def fetch_recent_executions(brand_id: str, limit: int = 20) -> List[MentionExecution]:
    """
    Fetch the brand's most recent executions across all of its queries.

    Returns:
        Up to `limit` executions, newest first.
    """
    query = f"""
        SELECT {_EXECUTION_COLUMNS}
        FROM nucleus_executions e
        JOIN nucleus_queries q ON q.id = e.query_id
        WHERE q.brand_id = $1
        ORDER BY e.executed_at DESC
        LIMIT $2
    """
    rows = await execute_query(query, brand_id, limit)
    return [e for e in (row_to_execution(row) for row in rows) if e is not None]
