"""
Pydantic models for the GEO metrics backend.

Covers the inputs consumed by the aggregators (mention records produced by the
LLM dispatch layer, raw LLM executions), the immutable result bundles they
produce (GEO score, IGO metrics, hallucination analyses), and the request /
response contracts of the calculation endpoints.

Field names are camelCase to keep the JSON contract the dashboard already
consumes. All result models are frozen: a calculation run produces them once
and they are only ever appended to history.

All models use Pydantic v2 syntax.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from geo_backend.models.enums import (
    KAPILevel,
    LLMProvider,
    RiskLevel,
)


# =============================================================================
# Aggregator Inputs
# =============================================================================


class MentionRecord(BaseModel):
    """
    One provider answer to one query, as analysed by the dispatch layer.

    `mentioned` is the discriminant: `confidence` and `position` are only
    meaningful when it is True. Aggregators ignore them otherwise and treat
    missing values as 0 / None.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "brandId": "b3f1c2",
                "provider": "chatgpt",
                "query": "best project management tools",
                "collectedAt": "2026-10-01T12:00:00Z",
                "mentioned": True,
                "confidence": 0.82,
                "position": 143,
            }
        }
    )

    brandId: str = Field(..., description="Brand the query was issued for")
    provider: LLMProvider = Field(..., description="LLM provider that answered")
    query: str = Field(..., description="Free text of the question asked")
    collectedAt: datetime = Field(..., description="When the answer was collected")
    mentioned: bool = Field(..., description="Whether the brand appeared in the answer")
    confidence: Optional[float] = Field(
        default=None,
        description="Mention confidence in [0, 1]; only set when mentioned"
    )
    position: Optional[int] = Field(
        default=None,
        description="Character offset of the first mention; only set when mentioned"
    )


class MentionExecution(BaseModel):
    """
    A raw LLM execution of a monitored query.

    Executions sharing a `queryId` form the group the hallucination detector
    cross-compares.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Execution identifier")
    queryId: str = Field(..., description="Monitored query this execution answers")
    brandId: Optional[str] = Field(default=None, description="Brand owning the query")
    provider: LLMProvider = Field(..., description="LLM provider that answered")
    query: Optional[str] = Field(default=None, description="Query text")
    response: Optional[str] = Field(default=None, description="Raw response text")
    confidence: Optional[float] = Field(
        default=None,
        description="Self-reported confidence, when the provider returns one"
    )
    executedAt: Optional[datetime] = Field(default=None, description="Execution timestamp")


# =============================================================================
# GEO Score
# =============================================================================


class GeoScoreBreakdown(BaseModel):
    """
    Pillar sub-scores and raw statistics behind a GEO score.

    The five pillars are the weighted inputs of the score. `visibility`,
    `authority`, `sentiment` and `consistency` are the legacy pillar names the
    monthly snapshot table still stores.
    """
    model_config = ConfigDict(frozen=True)

    # Pillars (0-100)
    baseTecnica: float = Field(default=0.0, ge=0.0, le=100.0)
    estruturaSemantica: float = Field(default=0.0, ge=0.0, le=100.0)
    relevanciaConversacional: float = Field(default=0.0, ge=0.0, le=100.0)
    autoridadeCognitiva: float = Field(default=0.0, ge=0.0, le=100.0)
    inteligenciaEstrategica: float = Field(default=0.0, ge=0.0, le=100.0)

    # Legacy pillars
    visibility: float = Field(default=0.0, description="Alias of baseTecnica")
    authority: float = Field(default=0.0, description="Alias of autoridadeCognitiva")
    sentiment: float = Field(default=0.0, description="Alias of relevanciaConversacional")
    consistency: float = Field(default=0.0, description="Cross-provider mention-rate consistency")

    # Raw statistics
    totalMentions: int = Field(default=0, ge=0)
    positiveMentions: int = Field(default=0, ge=0)
    mentionRate: float = Field(default=0.0, description="Positive mention rate as a percentage")
    uniqueQueries: int = Field(default=0, ge=0)
    providerCount: int = Field(default=0, ge=0)
    mentionedProviderCount: int = Field(default=0, ge=0)
    avgConfidence: float = Field(default=0.0, description="Mean confidence of mentioned records")
    evolution: float = Field(default=0.0, description="Trend between window halves, 50 = flat")


class GeoScoreResult(BaseModel):
    """Output of one GEO score calculation."""
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "score": 63.41,
                "cpi": 88.2,
                "hasData": True,
                "breakdown": {"baseTecnica": 72.0, "totalMentions": 40},
            }
        }
    )

    score: float = Field(default=0.0, ge=0.0, le=100.0, description="Composite GEO score")
    cpi: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="GEO CPI: cross-provider confidence consistency"
    )
    breakdown: GeoScoreBreakdown = Field(default_factory=GeoScoreBreakdown)
    hasData: bool = Field(default=True, description="False when the window held no mentions")


# =============================================================================
# IGO Metrics
# =============================================================================


class IGOProviderBreakdown(BaseModel):
    """Per-provider mention statistics used by GAP."""
    model_config = ConfigDict(frozen=True)

    provider: LLMProvider
    mentionRate: float = Field(..., description="Provider mention rate as a percentage")
    mentions: int = Field(..., ge=0, description="Records collected from the provider")


class IGOMetadata(BaseModel):
    """Intermediate statistics of an IGO calculation."""
    model_config = ConfigDict(frozen=True)

    totalMentions: int = 0
    correctMentions: int = 0
    providerCount: int = 0
    alignedProviders: int = 0
    consensusFactor: float = 0.0
    temporalStdDev: float = 0.0
    confidenceStdDev: float = 0.0
    weeklyDataPoints: int = 0
    providerBreakdown: List[IGOProviderBreakdown] = Field(default_factory=list)


class IGOMetricsResult(BaseModel):
    """Output of one IGO calculation."""
    model_config = ConfigDict(frozen=True)

    ice: float = Field(default=0.0, ge=0.0, le=100.0, description="Index of Cognitive Efficiency")
    gap: float = Field(default=0.0, ge=0.0, le=100.0, description="Observability Alignment Precision")
    cpi: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="IGO CPI: temporal predictability of the mention rate"
    )
    stability: float = Field(default=0.0, ge=0.0, le=100.0, description="Confidence stability")
    igoScore: float = Field(default=0.0, ge=0.0, le=100.0, description="Weighted composite of the four indices")
    metadata: IGOMetadata = Field(default_factory=IGOMetadata)
    hasData: bool = Field(default=True, description="False when the window held no mentions")


class KAPIClassification(BaseModel):
    """Qualitative level assigned to one IGO index value."""
    model_config = ConfigDict(frozen=True)

    label: str
    level: KAPILevel
    value: float


# =============================================================================
# Hallucination Detection
# =============================================================================


class HallucinationAnalysis(BaseModel):
    """Cross-provider reliability assessment of one response in a query group."""
    model_config = ConfigDict(frozen=True)

    provider: LLMProvider
    executionId: Optional[str] = None
    hallucinationRisk: float = Field(..., ge=0.0, le=100.0)
    divergenceScore: float = Field(..., ge=0.0, le=100.0)
    consensusAlignment: float = Field(..., ge=0.0, le=100.0)
    factualInconsistencies: List[str] = Field(default_factory=list, max_length=5)
    riskLevel: RiskLevel


class HallucinationDetection(BaseModel):
    """Row stored in hallucination_detections for a risky analysis."""
    model_config = ConfigDict(frozen=True)

    brandId: Optional[str]
    executionId: Optional[str]
    detected: bool
    confidence: float = Field(..., ge=0.0, le=1.0, description="1 - risk / 100")
    details: str = Field(..., description="JSON document with the analysis inputs")


class HallucinationSummary(BaseModel):
    """Counts of analyses per risk band."""
    totalAnalyses: int = 0
    criticalCount: int = 0
    highCount: int = 0
    moderateCount: int = 0
    lowCount: int = 0
    avgRiskScore: float = 0.0


# =============================================================================
# API Contracts
# =============================================================================


class BrandCalculationRequest(BaseModel):
    """Body of the GEO / IGO calculation endpoints."""
    model_config = ConfigDict(str_strip_whitespace=True)

    brandId: Optional[str] = Field(default=None, description="Brand to recalculate")


class HallucinationRequest(BaseModel):
    """Body of the hallucination detection endpoint. One of the two ids is required."""
    model_config = ConfigDict(str_strip_whitespace=True)

    executionId: Optional[str] = Field(default=None, description="Analyse this execution's query group")
    brandId: Optional[str] = Field(default=None, description="Analyse the brand's recent executions")


class GeoMetricsResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    score: float = 0.0
    cpi: float = 0.0
    breakdown: GeoScoreBreakdown = Field(default_factory=GeoScoreBreakdown)


class IGOMetricsResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    ice: float = 0.0
    gap: float = 0.0
    cpi: float = 0.0
    stability: float = 0.0
    igoScore: float = 0.0
    classification: Dict[str, KAPIClassification] = Field(default_factory=dict)
    metadata: IGOMetadata = Field(default_factory=IGOMetadata)
    durationMs: int = 0


class HallucinationResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    analyses: List[HallucinationAnalysis] = Field(default_factory=list)
    summary: HallucinationSummary = Field(default_factory=HallucinationSummary)
    riskLevels: Dict[str, str] = Field(default_factory=dict)


class GeoScoreHistoryItem(BaseModel):
    """A stored GEO score row."""
    score: float
    cpi: Optional[float] = None
    calculatedAt: datetime


class IGOMetricsHistoryItem(BaseModel):
    """A stored IGO metrics row."""
    ice: Optional[float] = None
    gap: Optional[float] = None
    cpi: Optional[float] = None
    stability: Optional[float] = None
    recordedAt: datetime


class GeoScoreHistoryResponse(BaseModel):
    brandId: str
    history: List[GeoScoreHistoryItem] = Field(default_factory=list)


class IGOMetricsHistoryResponse(BaseModel):
    brandId: str
    history: List[IGOMetricsHistoryItem] = Field(default_factory=list)
