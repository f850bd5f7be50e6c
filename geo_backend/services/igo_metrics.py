"""
IGO Metrics Aggregator - ICE, GAP, CPI and Stability

Computes the four IGO (Intelligence of Generative Optimization) indices from
the same 30-day mention window the GEO score uses, each through a different
statistical lens:

    | Index     | Measures                                   | Formula                                      |
    |-----------|--------------------------------------------|----------------------------------------------|
    | ICE       | Cognitive efficiency (hit rate)            | correct / total * 100                        |
    | GAP       | Alignment across providers                 | aligned / providers * 100 * consensusFactor  |
    | CPI       | Temporal predictability of the mention rate| 100 - stdDev(weekly rates) * 100 * 2         |
    | Stability | Dispersion of mention confidence           | 100 - stdDev(confidences) * 100 * 1.5        |

A provider is "aligned" when its own mention rate exceeds 0.5. The consensus
factor is max(0.5, 1 - stdDev(provider rates)), so disagreement between
providers can at most halve GAP.

The IGO CPI is unrelated to the GEO CPI computed in geo_score.py, which
measures cross-provider confidence agreement.

KAPI Classification:
    Each index is also mapped to a qualitative level (excellent / good /
    regular / critical) using per-metric thresholds, and the four are
    combined into a single weighted IGO score for the dashboard headline.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Sequence, Tuple

from geo_backend.models import (
    IGOMetadata,
    IGOMetricsResult,
    IGOProviderBreakdown,
    KAPIClassification,
    KAPILevel,
    KAPIMetric,
    MentionRecord,
)
from geo_backend.services.statistics import clamp, round2, safe_ratio, std_dev


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class IGOConfig:
    """Scaling constants of the IGO indices and composite score."""

    alignment_threshold: float = 0.5
    min_consensus_factor: float = 0.5
    bucket_days: int = 7
    temporal_penalty: float = 2.0
    stability_penalty: float = 1.5

    # Composite IGO score
    weight_ice: float = 0.30
    weight_gap: float = 0.25
    weight_cpi: float = 0.25
    weight_stability: float = 0.20


DEFAULT_IGO_CONFIG = IGOConfig()


# (excellent, good, regular) lower bounds; anything below is critical
KAPI_THRESHOLDS: Dict[KAPIMetric, Tuple[float, float, float]] = {
    KAPIMetric.ICE: (90.0, 75.0, 60.0),
    KAPIMetric.GAP: (85.0, 60.0, 40.0),
    KAPIMetric.CPI: (85.0, 70.0, 50.0),
    KAPIMetric.STABILITY: (80.0, 65.0, 45.0),
}

KAPI_LABELS: Dict[KAPILevel, str] = {
    KAPILevel.EXCELLENT: "Excelente",
    KAPILevel.GOOD: "Bom",
    KAPILevel.REGULAR: "Regular",
    KAPILevel.CRITICAL: "Crítico",
}


# =============================================================================
# Temporal Bucketing
# =============================================================================


def weekly_mention_rates(
    mentions: Sequence[MentionRecord],
    bucket_days: int = 7
) -> List[float]:
    """
    Bucket records into fixed windows anchored at the earliest collectedAt
    and return the positive-mention rate of each non-empty bucket.

    Buckets with no records are skipped rather than zero-filled, so a sparse
    window yields fewer data points.

    Args:
        mentions: Mention records in any order
        bucket_days: Width of each bucket in days

    Returns:
        Mention rates in chronological bucket order

    Example:
        Records on day 0 (mentioned), day 1 (not mentioned) and day 15
        (mentioned) produce buckets 0 and 2: [0.5, 1.0]
    """
    if not mentions:
        return []

    bucket_width = timedelta(days=bucket_days)
    start = min(m.collectedAt for m in mentions)

    buckets: Dict[int, List[bool]] = {}
    for m in mentions:
        index = int((m.collectedAt - start) / bucket_width)
        buckets.setdefault(index, []).append(m.mentioned)

    return [
        safe_ratio(sum(1 for flag in buckets[index] if flag), len(buckets[index]))
        for index in sorted(buckets)
    ]


# =============================================================================
# Main Aggregation
# =============================================================================


def empty_igo_metrics() -> IGOMetricsResult:
    """Zero-valued result signalling that the window held no mentions."""
    return IGOMetricsResult(hasData=False)


def compute_igo_metrics(
    mentions: Sequence[MentionRecord],
    config: IGOConfig = DEFAULT_IGO_CONFIG
) -> IGOMetricsResult:
    """
    Compute ICE, GAP, CPI and Stability for one brand's mention window.

    Args:
        mentions: All mention records of the brand within the scoring window.
        config: Scalings; defaults to DEFAULT_IGO_CONFIG.

    Returns:
        IGOMetricsResult with every index rounded to 2 decimals and the
        intermediate statistics in metadata.
    """
    mentions = list(mentions)
    total_mentions = len(mentions)
    if total_mentions == 0:
        return empty_igo_metrics()

    correct_mentions = sum(1 for m in mentions if m.mentioned)

    # 1. ICE
    ice = safe_ratio(correct_mentions, total_mentions) * 100

    # 2. GAP
    flags_by_provider: Dict[str, List[bool]] = {}
    for m in mentions:
        flags_by_provider.setdefault(m.provider.value, []).append(m.mentioned)

    provider_rates = {
        provider: safe_ratio(sum(1 for flag in flags if flag), len(flags))
        for provider, flags in flags_by_provider.items()
    }
    provider_count = len(provider_rates)
    aligned_providers = sum(
        1 for rate in provider_rates.values() if rate > config.alignment_threshold
    )
    consensus_factor = max(
        config.min_consensus_factor,
        1 - std_dev(provider_rates.values())
    )
    gap = safe_ratio(aligned_providers, provider_count) * 100 * consensus_factor

    # 3. CPI (temporal)
    weekly_rates = weekly_mention_rates(mentions, config.bucket_days)
    temporal_std_dev = std_dev(weekly_rates) * 100
    cpi = clamp(100 - temporal_std_dev * config.temporal_penalty)

    # 4. Stability
    confidences = [
        m.confidence for m in mentions
        if m.mentioned and m.confidence is not None
    ]
    confidence_std_dev = std_dev(confidences) * 100
    stability = clamp(100 - confidence_std_dev * config.stability_penalty)

    metadata = IGOMetadata(
        totalMentions=total_mentions,
        correctMentions=correct_mentions,
        providerCount=provider_count,
        alignedProviders=aligned_providers,
        consensusFactor=round2(consensus_factor),
        temporalStdDev=round2(temporal_std_dev),
        confidenceStdDev=round2(confidence_std_dev),
        weeklyDataPoints=len(weekly_rates),
        providerBreakdown=[
            IGOProviderBreakdown(
                provider=provider,
                mentionRate=round2(rate * 100),
                mentions=len(flags_by_provider[provider]),
            )
            for provider, rate in provider_rates.items()
        ],
    )

    ice = round2(clamp(ice))
    gap = round2(clamp(gap))
    cpi = round2(cpi)
    stability = round2(stability)

    return IGOMetricsResult(
        ice=ice,
        gap=gap,
        cpi=cpi,
        stability=stability,
        igoScore=calculate_igo_score(ice, gap, cpi, stability, config),
        metadata=metadata,
        hasData=True,
    )


# =============================================================================
# KAPI Classification
# =============================================================================


def calculate_igo_score(
    ice: float,
    gap: float,
    cpi: float,
    stability: float,
    config: IGOConfig = DEFAULT_IGO_CONFIG
) -> float:
    """
    Weighted composite of the four IGO indices.

    Example:
        >>> calculate_igo_score(100, 100, 100, 100)
        100.0
    """
    return round2(
        ice * config.weight_ice
        + gap * config.weight_gap
        + cpi * config.weight_cpi
        + stability * config.weight_stability
    )


def classify_kapi_metric(metric_id: str, value: float) -> KAPIClassification:
    """
    Map an index value to its qualitative KAPI level.

    Bounds are inclusive: an ICE of exactly 90 is excellent.

    Args:
        metric_id: One of "ice", "gap", "cpi", "stability"
        value: Index value (0-100)

    Returns:
        KAPIClassification. Unknown metric ids are classified critical with
        the label "N/A".
    """
    try:
        thresholds = KAPI_THRESHOLDS[KAPIMetric(metric_id)]
    except ValueError:
        return KAPIClassification(label="N/A", level=KAPILevel.CRITICAL, value=value)

    excellent, good, regular = thresholds
    if value >= excellent:
        level = KAPILevel.EXCELLENT
    elif value >= good:
        level = KAPILevel.GOOD
    elif value >= regular:
        level = KAPILevel.REGULAR
    else:
        level = KAPILevel.CRITICAL

    return KAPIClassification(label=KAPI_LABELS[level], level=level, value=value)


def classify_igo_metrics(result: IGOMetricsResult) -> Dict[str, KAPIClassification]:
    """Classify all four indices of a result, keyed by metric id."""
    return {
        metric.value: classify_kapi_metric(metric.value, getattr(result, metric.value))
        for metric in KAPIMetric
    }
