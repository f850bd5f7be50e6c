"""
Hallucination Risk Detector - Cross-Provider Divergence Analysis

Scores how likely each LLM response is to contain hallucinated content by
comparing it with the responses other providers gave to the same query.
There is no ground truth: a claim is suspicious when no other provider
backs it up.

Signals (per response R, compared with every other response in its group):
    1. Lexical divergence: share of R's words no other response uses
    2. Consensus alignment: share of R's words some other response uses
    3. Factual inconsistencies: numbers and proper nouns in R that no other
       response confirms (at most 5 flags, numbers first)
    4. Overconfidence: a flat +20 when R's self-reported confidence > 0.8

Risk Score:
    risk = divergence * 0.4
         + (20 if confidence > 0.8 else 0)
         + (100 - consensus) * 0.3
         + min(30, inconsistencies * 10)

    clamped to [0, 100].

Risk Bands:
    | Band     | Range  | Meaning                |
    |----------|--------|------------------------|
    | low      | 0-30   | Reliable response      |
    | moderate | 31-50  | Verify sources         |
    | high     | 51-70  | Manual review needed   |
    | critical | 71-100 | Possible hallucination |

Only analyses with risk > 30 become persisted detections, flagged as
detected when risk > 50.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from geo_backend.models import (
    HallucinationAnalysis,
    HallucinationDetection,
    HallucinationSummary,
    MentionExecution,
    RiskLevel,
)
from geo_backend.services.lexical import (
    extract_numbers,
    extract_proper_nouns,
    extract_words,
)
from geo_backend.services.statistics import clamp, mean, round2, safe_ratio

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class HallucinationConfig:
    """Weights and thresholds of the hallucination risk score."""

    divergence_weight: float = 0.4
    consensus_weight: float = 0.3
    overconfidence_threshold: float = 0.8
    overconfidence_penalty: float = 20.0
    inconsistency_penalty: float = 10.0
    max_inconsistency_penalty: float = 30.0
    max_inconsistencies: int = 5
    number_tolerance: float = 0.1
    min_group_size: int = 2


DEFAULT_HALLUCINATION_CONFIG = HallucinationConfig()


RISK_LEVEL_DESCRIPTIONS: Dict[str, str] = {
    RiskLevel.LOW.value: "0-30: Reliable response",
    RiskLevel.MODERATE.value: "31-50: Verify sources",
    RiskLevel.HIGH.value: "51-70: Manual review needed",
    RiskLevel.CRITICAL.value: "71-100: Possible hallucination",
}


# =============================================================================
# Lexical Signals
# =============================================================================


def _other_words(other_responses: Sequence[str]) -> Set[str]:
    return {word for text in other_responses for word in extract_words(text)}


def calculate_divergence(response: str, other_responses: Sequence[str]) -> float:
    """
    Percentage of the response's words that no other response uses.

    Args:
        response: Text being assessed
        other_responses: Every other response of the same query group

    Returns:
        Divergence 0-100; 0 for a response without words
    """
    words = extract_words(response)
    if not words:
        return 0.0

    others = _other_words(other_responses)
    unique_words = [word for word in words if word not in others]
    return safe_ratio(len(unique_words), len(words)) * 100


def calculate_consensus(response: str, other_responses: Sequence[str]) -> float:
    """
    Percentage of the response's words that at least one other response uses.

    Complements calculate_divergence: for a response with words the two
    always add up to 100.
    """
    words = extract_words(response)
    if not words:
        return 0.0

    others = _other_words(other_responses)
    matching_words = [word for word in words if word in others]
    return safe_ratio(len(matching_words), len(words)) * 100


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return str(value)


def _is_confirmed(number: float, other_numbers: Set[float], tolerance: float) -> bool:
    for other in other_numbers:
        largest = max(number, other)
        if largest > 0 and abs(number - other) / largest < tolerance:
            return True
    return False


def check_factual_consistency(
    response: str,
    other_responses: Sequence[str],
    config: HallucinationConfig = DEFAULT_HALLUCINATION_CONFIG
) -> List[str]:
    """
    List the numbers and names of a response that no other response confirms.

    A number is confirmed when some other response contains a number within
    10% relative difference; zero is never flagged. A proper noun is
    confirmed when it appears, case-insensitively, among the proper nouns
    of some other response.

    Args:
        response: Text being assessed
        other_responses: Every other response of the same query group
        config: Tolerance and flag cap

    Returns:
        One flag per unconfirmed occurrence in extraction order, numbers
        before names, truncated to config.max_inconsistencies

    Example:
        >>> check_factual_consistency("Founded by Jane Doe in 1998", ["Founded in 1998"])
        ['Name "Jane Doe" not confirmed by other LLMs']
    """
    inconsistencies: List[str] = []

    other_numbers = {n for text in other_responses for n in extract_numbers(text)}
    for number in extract_numbers(response):
        if number > 0 and not _is_confirmed(number, other_numbers, config.number_tolerance):
            inconsistencies.append(
                f"Number {_format_number(number)} not confirmed by other LLMs"
            )

    other_nouns = {
        noun.lower()
        for text in other_responses
        for noun in extract_proper_nouns(text)
    }
    for noun in extract_proper_nouns(response):
        if noun.lower() not in other_nouns:
            inconsistencies.append(f'Name "{noun}" not confirmed by other LLMs')

    return inconsistencies[:config.max_inconsistencies]


# =============================================================================
# Risk Scoring
# =============================================================================


def calculate_hallucination_risk(
    divergence: float,
    consensus: float,
    inconsistency_count: int,
    confidence: Optional[float] = None,
    config: HallucinationConfig = DEFAULT_HALLUCINATION_CONFIG
) -> float:
    """
    Combine the signals into a 0-100 hallucination risk.

    The overconfidence penalty is a flat addend: it is not scaled by the
    other factors.

    Example:
        >>> calculate_hallucination_risk(100, 0, 3, 0.95)
        100.0
        >>> calculate_hallucination_risk(0, 100, 0)
        0.0
    """
    risk = divergence * config.divergence_weight

    if confidence is not None and confidence > config.overconfidence_threshold:
        risk += config.overconfidence_penalty

    risk += (100 - consensus) * config.consensus_weight
    risk += min(
        config.max_inconsistency_penalty,
        inconsistency_count * config.inconsistency_penalty
    )

    return clamp(risk)


def classify_risk(risk: float) -> RiskLevel:
    """Map a risk score to its band."""
    if risk > 70:
        return RiskLevel.CRITICAL
    if risk > 50:
        return RiskLevel.HIGH
    if risk > 30:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


# =============================================================================
# Group Analysis
# =============================================================================


def detect_hallucinations(
    query_group: Sequence[MentionExecution],
    config: HallucinationConfig = DEFAULT_HALLUCINATION_CONFIG
) -> List[HallucinationAnalysis]:
    """
    Assess every response of one query group against its siblings.

    Executions without response text are ignored. When fewer than two
    responses remain the group cannot be cross-checked and an empty list is
    returned; this is not an error.

    Each response is compared with the *other* executions of the group,
    selected by position, so two providers returning identical text fully
    confirm each other.

    Args:
        query_group: Executions of the same query by different providers
        config: Weights and thresholds

    Returns:
        One analysis per responding execution, in input order
    """
    answered = [execution for execution in query_group if execution.response]
    if len(answered) < config.min_group_size:
        return []

    analyses: List[HallucinationAnalysis] = []
    for index, execution in enumerate(answered):
        other_responses = [
            other.response for position, other in enumerate(answered)
            if position != index
        ]

        divergence = calculate_divergence(execution.response, other_responses)
        consensus = calculate_consensus(execution.response, other_responses)
        inconsistencies = check_factual_consistency(
            execution.response, other_responses, config
        )
        risk = calculate_hallucination_risk(
            divergence,
            consensus,
            len(inconsistencies),
            execution.confidence,
            config,
        )

        analyses.append(HallucinationAnalysis(
            provider=execution.provider,
            executionId=execution.id,
            hallucinationRisk=round2(risk),
            divergenceScore=round2(divergence),
            consensusAlignment=round2(consensus),
            factualInconsistencies=inconsistencies,
            riskLevel=classify_risk(risk),
        ))

    return analyses


def group_executions_by_query(
    executions: Sequence[MentionExecution]
) -> Dict[str, List[MentionExecution]]:
    """Group executions by queryId, keeping first-seen query order."""
    groups: Dict[str, List[MentionExecution]] = {}
    for execution in executions:
        groups.setdefault(execution.queryId, []).append(execution)
    return groups


def build_detection(
    analysis: HallucinationAnalysis,
    brand_id: Optional[str],
    detected_threshold: float = 50.0
) -> HallucinationDetection:
    """Turn an analysis into the row stored in hallucination_detections."""
    risk = analysis.hallucinationRisk
    details = json.dumps({
        "provider": analysis.provider.value,
        "risk": risk,
        "divergence": analysis.divergenceScore,
        "consensus": analysis.consensusAlignment,
        "inconsistencies": analysis.factualInconsistencies,
    })
    return HallucinationDetection(
        brandId=brand_id,
        executionId=analysis.executionId,
        detected=risk > detected_threshold,
        confidence=round2(1 - risk / 100),
        details=details,
    )


def analyze_executions(
    executions: Sequence[MentionExecution],
    brand_id: Optional[str] = None,
    persist_threshold: float = 30.0,
    detected_threshold: float = 50.0,
    config: HallucinationConfig = DEFAULT_HALLUCINATION_CONFIG
) -> Tuple[List[HallucinationAnalysis], List[HallucinationDetection]]:
    """
    Run the detector over every query group in a batch of executions.

    Args:
        executions: Executions of possibly many queries
        brand_id: Fallback brand for detections whose execution carries none
        persist_threshold: Analyses above this risk become detections
        detected_threshold: Detections above this risk are flagged detected
        config: Detector weights and thresholds

    Returns:
        (analyses, detections). Detections are only built, not stored.
    """
    groups = group_executions_by_query(executions)
    logger.info(
        f"Analyzing {len(executions)} executions across {len(groups)} queries"
    )

    brand_by_execution = {e.id: e.brandId for e in executions}

    analyses: List[HallucinationAnalysis] = []
    detections: List[HallucinationDetection] = []

    for query_id, group in groups.items():
        group_analyses = detect_hallucinations(group, config)
        if not group_analyses:
            logger.debug(f"[query {query_id}] Skipped: fewer than 2 responses to compare")
            continue

        for analysis in group_analyses:
            analyses.append(analysis)
            if analysis.hallucinationRisk > persist_threshold:
                detections.append(build_detection(
                    analysis,
                    brand_by_execution.get(analysis.executionId) or brand_id,
                    detected_threshold,
                ))

    return analyses, detections


def summarize_analyses(analyses: Sequence[HallucinationAnalysis]) -> HallucinationSummary:
    """
    Count analyses per risk band and average their risk.

    Example:
        Risks [80, 60, 40, 10] give one analysis in each band and an
        average of 47.5.
    """
    risks = [a.hallucinationRisk for a in analyses]
    return HallucinationSummary(
        totalAnalyses=len(risks),
        criticalCount=sum(1 for r in risks if r > 70),
        highCount=sum(1 for r in risks if 50 < r <= 70),
        moderateCount=sum(1 for r in risks if 30 < r <= 50),
        lowCount=sum(1 for r in risks if r <= 30),
        avgRiskScore=round2(mean(risks)),
    )
