"""
Backend Services Module

Business logic of the GEO metrics backend. The three aggregators are pure,
synchronous functions over in-memory records; only the store and
persistence services touch the database.

Services:
- statistics: mean, population std-dev, safe_ratio, clamp, round2
- lexical: word, number and proper-noun extraction
- geo_score: five-pillar GEO score and GEO CPI
- igo_metrics: ICE, GAP, IGO CPI, Stability and KAPI classification
- hallucination: cross-provider hallucination risk detection
- mention_store: brand, mention window and execution reads
- score_persistence: result writes and history reads

All services are consumed by the API layer (geo_backend/api/).
"""

# =============================================================================
# Aggregator Exports
# =============================================================================

from geo_backend.services.geo_score import (
    DEFAULT_GEO_CONFIG,
    GeoScoreConfig,
    compute_geo_score,
)
from geo_backend.services.igo_metrics import (
    DEFAULT_IGO_CONFIG,
    IGOConfig,
    calculate_igo_score,
    classify_igo_metrics,
    classify_kapi_metric,
    compute_igo_metrics,
    weekly_mention_rates,
)
from geo_backend.services.hallucination import (
    DEFAULT_HALLUCINATION_CONFIG,
    HallucinationConfig,
    RISK_LEVEL_DESCRIPTIONS,
    analyze_executions,
    classify_risk,
    detect_hallucinations,
    group_executions_by_query,
    summarize_analyses,
)

# =============================================================================
# Data Access Exports
# =============================================================================

from geo_backend.services.mention_store import (
    fetch_brand,
    fetch_execution_group,
    fetch_mention_window,
    fetch_recent_executions,
)
from geo_backend.services.score_persistence import (
    fetch_geo_history,
    fetch_igo_history,
    insert_hallucination_detections,
    insert_igo_metrics,
    persist_geo_score,
)


__all__ = [
    # ----- GEO Score -----
    'DEFAULT_GEO_CONFIG',
    'GeoScoreConfig',
    'compute_geo_score',
    # ----- IGO Metrics -----
    'DEFAULT_IGO_CONFIG',
    'IGOConfig',
    'calculate_igo_score',
    'classify_igo_metrics',
    'classify_kapi_metric',
    'compute_igo_metrics',
    'weekly_mention_rates',
    # ----- Hallucination Detection -----
    'DEFAULT_HALLUCINATION_CONFIG',
    'HallucinationConfig',
    'RISK_LEVEL_DESCRIPTIONS',
    'analyze_executions',
    'classify_risk',
    'detect_hallucinations',
    'group_executions_by_query',
    'summarize_analyses',
    # ----- Mention Store -----
    'fetch_brand',
    'fetch_execution_group',
    'fetch_mention_window',
    'fetch_recent_executions',
    # ----- Score Persistence -----
    'fetch_geo_history',
    'fetch_igo_history',
    'insert_hallucination_detections',
    'insert_igo_metrics',
    'persist_geo_score',
]
