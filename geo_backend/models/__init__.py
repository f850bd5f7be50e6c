"""
Package initialization file for backend models.

Exports all Pydantic schemas and enumerations from schemas.py and enums.py so
other modules can import them from geo_backend.models directly.

Usage:
    from geo_backend.models import (
        LLMProvider,
        MentionRecord,
        GeoScoreResult,
        IGOMetricsResult,
        HallucinationAnalysis,
    )
"""

# =============================================================================
# Enums
# =============================================================================

from geo_backend.models.enums import (
    LLMProvider,
    RiskLevel,
    KAPIMetric,
    KAPILevel,
)


# =============================================================================
# Schemas
# =============================================================================

from geo_backend.models.schemas import (
    # -------------------------------------------------------------------------
    # Aggregator inputs
    # -------------------------------------------------------------------------
    MentionRecord,
    MentionExecution,

    # -------------------------------------------------------------------------
    # Aggregator outputs
    # -------------------------------------------------------------------------
    GeoScoreBreakdown,
    GeoScoreResult,
    IGOProviderBreakdown,
    IGOMetadata,
    IGOMetricsResult,
    KAPIClassification,
    HallucinationAnalysis,
    HallucinationDetection,
    HallucinationSummary,

    # -------------------------------------------------------------------------
    # API contracts
    # -------------------------------------------------------------------------
    BrandCalculationRequest,
    HallucinationRequest,
    GeoMetricsResponse,
    IGOMetricsResponse,
    HallucinationResponse,
    GeoScoreHistoryItem,
    IGOMetricsHistoryItem,
    GeoScoreHistoryResponse,
    IGOMetricsHistoryResponse,
)


__all__ = [
    # Enums
    "LLMProvider",
    "RiskLevel",
    "KAPIMetric",
    "KAPILevel",
    # Inputs
    "MentionRecord",
    "MentionExecution",
    # Outputs
    "GeoScoreBreakdown",
    "GeoScoreResult",
    "IGOProviderBreakdown",
    "IGOMetadata",
    "IGOMetricsResult",
    "KAPIClassification",
    "HallucinationAnalysis",
    "HallucinationDetection",
    "HallucinationSummary",
    # API contracts
    "BrandCalculationRequest",
    "HallucinationRequest",
    "GeoMetricsResponse",
    "IGOMetricsResponse",
    "HallucinationResponse",
    "GeoScoreHistoryItem",
    "IGOMetricsHistoryItem",
    "GeoScoreHistoryResponse",
    "IGOMetricsHistoryResponse",
]
