"""
GEO Score Aggregator - Five-Pillar Generative Engine Optimization Score

Converts a trailing window of mention records for one brand into the GEO
Score and its companion GEO CPI.

Algorithm Overview:
    Five independently computed pillars (each 0-100) are combined with fixed
    weights that sum to 1.0:

    | Pillar                     | Weight | Measures                              |
    |----------------------------|--------|---------------------------------------|
    | Base Tecnica               | 0.20   | Mention hit-rate plus volume bonus    |
    | Estrutura Semantica        | 0.15   | Breadth of distinct queries           |
    | Relevancia Conversacional  | 0.25   | Share of mentions early in the answer |
    | Autoridade Cognitiva       | 0.25   | Mean confidence of mentions           |
    | Inteligencia Estrategica   | 0.15   | Provider consistency and trend        |

    Consistency follows Montgomery-style scaling: the standard deviation of
    per-provider mention rates, penalized at 150x.

GEO CPI:
    Dispersion of average confidence across providers, penalized at 200x.
    This is NOT the IGO CPI (see igo_metrics.py), which measures temporal
    predictability of the mention rate. The two share a name only.

Edge Cases:
    - Empty window: all-zero result with hasData=False
    - Zero denominators: handled by statistics.safe_ratio
    - Out-of-range confidence values: pillar is clamped to [0, 100]

Usage:
    from geo_backend.services.geo_score import compute_geo_score

    result = compute_geo_score(mentions)
    print(result.score, result.cpi, result.breakdown.baseTecnica)
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from geo_backend.models import GeoScoreBreakdown, GeoScoreResult, MentionRecord
from geo_backend.services.statistics import (
    clamp,
    mean,
    rates_by_key,
    round2,
    safe_ratio,
    std_dev,
)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class GeoScoreConfig:
    """Weights and scaling constants of the GEO score."""

    weight_base_tecnica: float = 0.20
    weight_estrutura_semantica: float = 0.15
    weight_relevancia_conversacional: float = 0.25
    weight_autoridade_cognitiva: float = 0.25
    weight_inteligencia_estrategica: float = 0.15

    # Base Tecnica: rate weight and capped volume bonus (1 point per 5 records)
    mention_rate_weight: float = 80.0
    volume_bonus_cap: float = 20.0
    volume_bonus_divisor: float = 5.0

    # Estrutura Semantica: distinct queries needed for full coverage
    target_unique_queries: int = 20

    # Relevancia Conversacional: a mention before this offset counts as early
    early_position_threshold: int = 200

    # Inteligencia Estrategica
    consistency_penalty: float = 150.0
    consistency_weight: float = 0.6
    evolution_weight: float = 0.4

    # GEO CPI
    cpi_penalty: float = 200.0


DEFAULT_GEO_CONFIG = GeoScoreConfig()


# =============================================================================
# Pillar Calculations
# =============================================================================


def calculate_base_tecnica(
    mention_rate: float,
    total_mentions: int,
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> float:
    """
    Base Tecnica pillar: hit-rate plus a volume bonus capped at 20.

    Example:
        >>> calculate_base_tecnica(0.5, 50)
        50.0
    """
    volume_bonus = min(config.volume_bonus_cap, total_mentions / config.volume_bonus_divisor)
    return min(100.0, mention_rate * config.mention_rate_weight + volume_bonus)


def calculate_estrutura_semantica(
    unique_queries: int,
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> float:
    """Estrutura Semantica pillar: topic coverage breadth."""
    return min(100.0, unique_queries / config.target_unique_queries * 100)


def calculate_relevancia_conversacional(
    mentions: Sequence[MentionRecord],
    positive_mentions: int,
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> float:
    """
    Relevancia Conversacional pillar: share of positive mentions whose first
    occurrence is early in the response.
    """
    early_mentions = sum(
        1 for m in mentions
        if m.mentioned
        and m.position is not None
        and m.position < config.early_position_threshold
    )
    return min(100.0, safe_ratio(early_mentions, positive_mentions) * 100)


def calculate_consistency(
    provider_rates: List[float],
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> float:
    """
    Consistency of mention rates across providers.

    Example:
        >>> calculate_consistency([1.0, 0.0])
        25.0
    """
    return max(0.0, 100 - std_dev(provider_rates) * config.consistency_penalty)


def calculate_evolution(mentions: Sequence[MentionRecord]) -> float:
    """
    Trend of the mention rate between the two chronological halves of the
    window. A flat trend scores 50.

    The split point is len // 2, so with an odd count the second half holds
    the extra record.
    """
    ordered = sorted(mentions, key=lambda m: m.collectedAt)
    half_point = len(ordered) // 2
    first_half = ordered[:half_point]
    second_half = ordered[half_point:]

    first_rate = safe_ratio(sum(1 for m in first_half if m.mentioned), len(first_half))
    second_rate = safe_ratio(sum(1 for m in second_half if m.mentioned), len(second_half))

    return clamp(50 + (second_rate - first_rate) * 100)


def calculate_geo_cpi(
    mentions: Sequence[MentionRecord],
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> float:
    """
    GEO CPI: agreement of average confidence across providers.

    Zero and missing confidences are left out of a provider's average; a
    provider with none left contributes an average of 0.
    """
    confidences_by_provider: Dict[str, List[float]] = {}
    for m in mentions:
        values = confidences_by_provider.setdefault(m.provider.value, [])
        if m.mentioned and m.confidence:
            values.append(m.confidence)

    provider_confidences = [mean(values) for values in confidences_by_provider.values()]
    return clamp(100 - std_dev(provider_confidences) * config.cpi_penalty)


# =============================================================================
# Main Aggregation
# =============================================================================


def empty_geo_score() -> GeoScoreResult:
    """Zero-valued result signalling that the window held no mentions."""
    return GeoScoreResult(score=0.0, cpi=0.0, breakdown=GeoScoreBreakdown(), hasData=False)


def compute_geo_score(
    mentions: Sequence[MentionRecord],
    config: GeoScoreConfig = DEFAULT_GEO_CONFIG
) -> GeoScoreResult:
    """
    Compute the GEO score bundle for one brand's mention window.

    Process:
        1. Count records, positive mentions, distinct queries and providers
        2. Compute the five pillars
        3. Combine them with the configured weights
        4. Compute the GEO CPI from per-provider mean confidence
        5. Round every output to 2 decimals

    Args:
        mentions: All mention records of the brand within the scoring window.
        config: Weights and scalings; defaults to DEFAULT_GEO_CONFIG.

    Returns:
        GeoScoreResult. Pure: repeated calls with the same input return
        identical results.
    """
    mentions = list(mentions)
    total_mentions = len(mentions)
    if total_mentions == 0:
        return empty_geo_score()

    positive = [m for m in mentions if m.mentioned]
    positive_mentions = len(positive)
    mention_rate = safe_ratio(positive_mentions, total_mentions)

    unique_queries = len(set(m.query for m in mentions))
    providers = set(m.provider for m in mentions)
    mentioned_providers = set(m.provider for m in positive)

    avg_confidence = mean(
        m.confidence if m.confidence is not None else 0.0
        for m in positive
    )

    # Pillars
    base_tecnica = calculate_base_tecnica(mention_rate, total_mentions, config)
    estrutura_semantica = calculate_estrutura_semantica(unique_queries, config)
    relevancia_conversacional = calculate_relevancia_conversacional(
        mentions, positive_mentions, config
    )
    autoridade_cognitiva = clamp(avg_confidence * 100)

    flags_by_provider: Dict[str, List[bool]] = {}
    for m in mentions:
        flags_by_provider.setdefault(m.provider.value, []).append(m.mentioned)
    consistency = calculate_consistency(rates_by_key(flags_by_provider), config)
    evolution = calculate_evolution(mentions)
    inteligencia_estrategica = (
        consistency * config.consistency_weight
        + evolution * config.evolution_weight
    )

    score = (
        base_tecnica * config.weight_base_tecnica
        + estrutura_semantica * config.weight_estrutura_semantica
        + relevancia_conversacional * config.weight_relevancia_conversacional
        + autoridade_cognitiva * config.weight_autoridade_cognitiva
        + inteligencia_estrategica * config.weight_inteligencia_estrategica
    )
    cpi = calculate_geo_cpi(mentions, config)

    breakdown = GeoScoreBreakdown(
        baseTecnica=round2(base_tecnica),
        estruturaSemantica=round2(estrutura_semantica),
        relevanciaConversacional=round2(relevancia_conversacional),
        autoridadeCognitiva=round2(autoridade_cognitiva),
        inteligenciaEstrategica=round2(inteligencia_estrategica),
        visibility=round2(base_tecnica),
        authority=round2(autoridade_cognitiva),
        sentiment=round2(relevancia_conversacional),
        consistency=round2(consistency),
        totalMentions=total_mentions,
        positiveMentions=positive_mentions,
        mentionRate=round2(mention_rate * 100),
        uniqueQueries=unique_queries,
        providerCount=len(providers),
        mentionedProviderCount=len(mentioned_providers),
        avgConfidence=round2(avg_confidence),
        evolution=round2(evolution),
    )

    return GeoScoreResult(
        score=round2(clamp(score)),
        cpi=round2(cpi),
        breakdown=breakdown,
        hasData=True,
    )
