"""
Test suite for the five-pillar GEO Score aggregator.

The tests verify:
1. Empty windows return an all-zero result flagged hasData=False
2. Each pillar formula on hand-computed inputs
3. Consistency with perfect provider disagreement (std 0.5 -> 25)
4. Evolution between chronological halves
5. GEO CPI from per-provider confidence dispersion
6. Range, monotonicity and determinism properties
"""

import random

import pytest

from geo_backend.models import LLMProvider
from geo_backend.services.geo_score import (
    DEFAULT_GEO_CONFIG,
    GeoScoreConfig,
    calculate_base_tecnica,
    calculate_consistency,
    calculate_estrutura_semantica,
    calculate_evolution,
    compute_geo_score,
)


# =============================================================================
# Empty Input
# =============================================================================


class TestEmptyWindow:
    """compute_geo_score([]) returns zeros without raising."""

    def test_empty_returns_zero_result(self):
        result = compute_geo_score([])

        assert result.score == 0.0
        assert result.cpi == 0.0
        assert result.breakdown.totalMentions == 0
        assert result.breakdown.baseTecnica == 0.0
        assert result.hasData is False


# =============================================================================
# Pillar Formulas
# =============================================================================


class TestPillars:
    """Tests for the individual pillar functions."""

    def test_config_weights_sum_to_one(self):
        config = DEFAULT_GEO_CONFIG
        total = (
            config.weight_base_tecnica
            + config.weight_estrutura_semantica
            + config.weight_relevancia_conversacional
            + config.weight_autoridade_cognitiva
            + config.weight_inteligencia_estrategica
        )
        assert total == pytest.approx(1.0)

    def test_base_tecnica_volume_bonus(self):
        """Half the answers mention the brand, 50 records -> 40 + 10."""
        assert calculate_base_tecnica(0.5, 50) == pytest.approx(50.0)

    def test_base_tecnica_volume_bonus_capped(self):
        """The volume bonus never exceeds 20 points."""
        assert calculate_base_tecnica(0.0, 1000) == pytest.approx(20.0)
        assert calculate_base_tecnica(1.0, 1000) == pytest.approx(100.0)

    def test_estrutura_semantica_caps_at_100(self):
        assert calculate_estrutura_semantica(10) == pytest.approx(50.0)
        assert calculate_estrutura_semantica(25) == pytest.approx(100.0)

    def test_consistency_perfect_disagreement(self):
        """stdDev([1, 0]) = 0.5, so consistency = 100 - 75 = 25."""
        assert calculate_consistency([1.0, 0.0]) == pytest.approx(25.0)

    def test_consistency_never_negative(self):
        config = GeoScoreConfig(consistency_penalty=1000.0)
        assert calculate_consistency([1.0, 0.0], config) == 0.0

    def test_evolution_flat_is_fifty(self, make_mention):
        mentions = [make_mention(day=d) for d in range(6)]
        assert calculate_evolution(mentions) == pytest.approx(50.0)

    def test_evolution_declining(self, make_mention):
        """All mentioned early, none late -> 50 - 100, clamped to 0."""
        mentions = [make_mention(day=d, mentioned=d < 2) for d in range(4)]
        assert calculate_evolution(mentions) == 0.0

    def test_evolution_odd_count_second_half_larger(self, make_mention):
        """With 3 records the split is [1] | [2]."""
        mentions = [
            make_mention(day=0, mentioned=False),
            make_mention(day=1, mentioned=True),
            make_mention(day=2, mentioned=False),
        ]
        # first half rate 0.0, second half rate 0.5
        assert calculate_evolution(mentions) == pytest.approx(100.0)


# =============================================================================
# Worked Examples
# =============================================================================


@pytest.mark.scenario
class TestWorkedExamples:
    """Hand-computed end-to-end scores."""

    def test_single_provider_all_mentioned(self, make_mention):
        """
        10 records, one provider, one query, all mentioned at position 100
        with confidence 0.9:
            baseTecnica   = 80 + 10/5           = 82
            estrutura     = 1/20 * 100          = 5
            relevancia    = 10/10 * 100         = 100
            autoridade    = 0.9 * 100           = 90
            inteligencia  = 100*0.6 + 50*0.4    = 80
            score = 16.4 + 0.75 + 25 + 22.5 + 12 = 76.65
        """
        mentions = [make_mention(day=d, confidence=0.9) for d in range(10)]

        result = compute_geo_score(mentions)

        assert result.hasData is True
        assert result.breakdown.baseTecnica == 82.0
        assert result.breakdown.estruturaSemantica == 5.0
        assert result.breakdown.relevanciaConversacional == 100.0
        assert result.breakdown.autoridadeCognitiva == 90.0
        assert result.breakdown.consistency == 100.0
        assert result.breakdown.evolution == 50.0
        assert result.breakdown.inteligenciaEstrategica == 80.0
        assert result.score == pytest.approx(76.65, abs=0.01)
        assert result.cpi == 100.0
        assert result.breakdown.mentionRate == 100.0
        assert result.breakdown.avgConfidence == 0.9

    def test_perfect_provider_disagreement(self, make_mention):
        """One provider always mentions the brand, the other never does."""
        mentions = [
            make_mention(provider=LLMProvider.CHATGPT, day=0),
            make_mention(provider=LLMProvider.CHATGPT, day=1),
            make_mention(provider=LLMProvider.GEMINI, day=2, mentioned=False),
            make_mention(provider=LLMProvider.GEMINI, day=3, mentioned=False),
        ]

        result = compute_geo_score(mentions)

        assert result.breakdown.consistency == 25.0
        assert result.breakdown.providerCount == 2
        assert result.breakdown.mentionedProviderCount == 1
        assert result.breakdown.mentionRate == 50.0

    def test_evolution_rising_trend(self, make_mention):
        """First half rate 0.2, second half 0.8 -> 50 + 60, clamped to 100."""
        first_half = [make_mention(day=d, mentioned=(d == 0)) for d in range(5)]
        second_half = [make_mention(day=15 + d, mentioned=(d != 0)) for d in range(5)]

        result = compute_geo_score(first_half + second_half)

        assert result.breakdown.evolution == 100.0

    def test_geo_cpi_confidence_dispersion(self, make_mention):
        """Provider means 0.9 and 0.5 -> std 0.2 -> CPI 100 - 40 = 60."""
        mentions = [
            make_mention(provider=LLMProvider.CHATGPT, day=0, confidence=0.9),
            make_mention(provider=LLMProvider.CLAUDE, day=1, confidence=0.5),
        ]

        result = compute_geo_score(mentions)

        assert result.cpi == pytest.approx(60.0)

    def test_geo_cpi_provider_without_confidence_counts_zero(self, make_mention):
        """A provider with no confident mention averages 0: means [1.0, 0] -> CPI 0."""
        mentions = [
            make_mention(provider=LLMProvider.CHATGPT, day=0, confidence=1.0),
            make_mention(provider=LLMProvider.PERPLEXITY, day=1, mentioned=False),
        ]

        result = compute_geo_score(mentions)

        assert result.cpi == 0.0

    def test_geo_cpi_ignores_zero_confidence(self, make_mention):
        """Means [0.8, 0.8] once the 0.0 reading is dropped, so CPI stays 100."""
        mentions = [
            make_mention(provider=LLMProvider.CHATGPT, day=0, confidence=0.8),
            make_mention(provider=LLMProvider.CHATGPT, day=1, confidence=0.0),
            make_mention(provider=LLMProvider.CLAUDE, day=2, confidence=0.8),
        ]

        result = compute_geo_score(mentions)

        assert result.cpi == 100.0


# =============================================================================
# Record Handling
# =============================================================================


class TestRecordHandling:
    """Optional fields and out-of-contract values."""

    def test_late_or_missing_position_not_early(self, make_mention):
        mentions = [
            make_mention(day=0, position=10),
            make_mention(day=1, position=250),
            make_mention(day=2, position=None),
            make_mention(day=3, position=199),
        ]

        result = compute_geo_score(mentions)

        assert result.breakdown.relevanciaConversacional == 50.0

    def test_missing_confidence_counts_as_zero(self, make_mention):
        mentions = [
            make_mention(day=0, confidence=1.0),
            make_mention(day=1, confidence=None),
        ]

        result = compute_geo_score(mentions)

        assert result.breakdown.autoridadeCognitiva == 50.0

    def test_confidence_on_unmentioned_record_ignored(self, make_mention):
        mentions = [
            make_mention(day=0, confidence=0.6),
            make_mention(day=1, mentioned=False, confidence=0.1, position=5),
        ]

        result = compute_geo_score(mentions)

        assert result.breakdown.autoridadeCognitiva == 60.0
        assert result.breakdown.relevanciaConversacional == 100.0

    def test_legacy_pillars_mirror_new_pillars(self, make_mention):
        mentions = [make_mention(day=d, mentioned=d % 2 == 0) for d in range(8)]

        breakdown = compute_geo_score(mentions).breakdown

        assert breakdown.visibility == breakdown.baseTecnica
        assert breakdown.authority == breakdown.autoridadeCognitiva
        assert breakdown.sentiment == breakdown.relevanciaConversacional


# =============================================================================
# Properties
# =============================================================================


class TestProperties:
    """Range, monotonicity and determinism."""

    def test_range_with_adversarial_confidence(self, make_mention):
        mentions = [
            make_mention(provider=LLMProvider.CHATGPT, day=0, confidence=5.0),
            make_mention(provider=LLMProvider.GEMINI, day=1, confidence=0.0),
            make_mention(provider=LLMProvider.CLAUDE, day=2, confidence=-1.0),
        ]

        result = compute_geo_score(mentions)

        assert 0.0 <= result.score <= 100.0
        assert 0.0 <= result.cpi <= 100.0
        assert 0.0 <= result.breakdown.autoridadeCognitiva <= 100.0

    def test_range_single_unmentioned_record(self, make_mention):
        result = compute_geo_score([make_mention(mentioned=False)])

        assert 0.0 <= result.score <= 100.0
        assert result.breakdown.relevanciaConversacional == 0.0
        assert result.breakdown.autoridadeCognitiva == 0.0

    def test_more_positive_mentions_never_lowers_base_tecnica(self, make_mention):
        previous = -1.0
        for positives in range(0, 11):
            mentions = [make_mention(day=d, mentioned=d < positives) for d in range(10)]
            base = compute_geo_score(mentions).breakdown.baseTecnica
            assert base >= previous
            previous = base

    def test_deterministic(self, make_mention):
        mentions = [
            make_mention(
                provider=list(LLMProvider)[d % 4],
                query=f"query {d % 7}",
                day=d * 0.7,
                mentioned=d % 3 != 0,
                confidence=0.5 + (d % 5) / 10 if d % 3 != 0 else None,
                position=d * 37 if d % 3 != 0 else None,
            )
            for d in range(40)
        ]

        assert compute_geo_score(mentions) == compute_geo_score(mentions)

    def test_input_order_does_not_matter(self, make_mention):
        mentions = [make_mention(day=d, mentioned=d > 3) for d in range(10)]
        shuffled = list(mentions)
        random.Random(7).shuffle(shuffled)

        assert compute_geo_score(shuffled) == compute_geo_score(mentions)

    def test_outputs_have_two_decimals(self, make_mention):
        mentions = [make_mention(day=d, confidence=1 / 3, mentioned=d % 3 == 0) for d in range(7)]

        result = compute_geo_score(mentions)

        for value in (result.score, result.cpi, result.breakdown.autoridadeCognitiva):
            assert round(value, 2) == value
