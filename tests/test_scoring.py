# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for the scoring engine, weights, and verdict thresholds."""

from __future__ import annotations

import math

import pytest

from region_arbitrator.data.models import Factor, FactorWeights, RefereeConfidence, Verdict
from region_arbitrator.scoring import ScoringEngine, WeightValidationError, validate_weights
from region_arbitrator.scoring.thresholds import confidence_to_referee, score_to_verdict
from region_arbitrator.scoring.weights import DEFAULT_WEIGHTS


def _combine(engine: ScoringEngine, scores, weights=None):
    return engine.combine(scores.latency, scores.carbon, scores.cost, weights)


class TestValidateWeights:
    def test_defaults_valid(self):
        assert validate_weights(DEFAULT_WEIGHTS) is DEFAULT_WEIGHTS

    def test_within_tolerance(self):
        validate_weights(FactorWeights(carbon=0.4, latency=0.4, cost=0.2005))

    def test_sum_too_low(self):
        with pytest.raises(WeightValidationError, match="sum to 1.0"):
            validate_weights(FactorWeights(carbon=0.5, latency=0.3, cost=0.1))

    def test_negative(self):
        with pytest.raises(WeightValidationError, match="non-negative"):
            validate_weights(FactorWeights(carbon=0.7, latency=0.5, cost=-0.2))

    def test_single_weight_cap(self):
        with pytest.raises(WeightValidationError, match="exceed"):
            validate_weights(FactorWeights(carbon=0.85, latency=0.1, cost=0.05))

    def test_cap_is_inclusive(self):
        validate_weights(FactorWeights(carbon=0.8, latency=0.1, cost=0.1))

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(WeightValidationError, match="finite"):
            validate_weights(FactorWeights(carbon=bad, latency=0.5, cost=0.5))

    def test_is_value_error(self):
        assert issubclass(WeightValidationError, ValueError)


class TestScoringEngine:
    def test_weighted_sum(self, make_scores):
        composite = _combine(ScoringEngine(), make_scores(80, 80, 80))
        assert composite.overall_score == pytest.approx(80)
        assert composite.red_card_triggered is False

    def test_breakdown(self, make_scores):
        composite = _combine(ScoringEngine(), make_scores(latency=50, carbon=100, cost=50))
        assert composite.weighted_breakdown.latency == pytest.approx(20)
        assert composite.weighted_breakdown.carbon == pytest.approx(40)
        assert composite.weighted_breakdown.cost == pytest.approx(10)
        assert composite.overall_score == pytest.approx(70)

    def test_red_card_caps_score(self, make_scores):
        composite = _combine(ScoringEngine(), make_scores(latency=25, carbon=25, cost=70))
        assert composite.red_card_triggered is True
        assert composite.overall_score < 30

    def test_red_card_masks_strong_factors(self, make_scores):
        composite = _combine(ScoringEngine(), make_scores(latency=100, carbon=100, cost=20))
        assert composite.weighted_breakdown.cost == pytest.approx(4)
        assert composite.overall_score == 29

    def test_threshold_is_exclusive(self, make_scores):
        composite = _combine(ScoringEngine(), make_scores(30, 30, 30))
        assert composite.red_card_triggered is False
        assert composite.overall_score == pytest.approx(30)

    def test_confidence_is_minimum(self, make_scores):
        scores = make_scores(80, 80, 80, confidence=0.9)
        scores = scores.model_copy(
            update={"cost": scores.cost.model_copy(update={"confidence": 0.3})}
        )
        assert _combine(ScoringEngine(), scores).confidence == pytest.approx(0.3)

    def test_configured_weights(self, make_scores):
        engine = ScoringEngine(FactorWeights(carbon=0.8, latency=0.1, cost=0.1))
        composite = _combine(engine, make_scores(latency=40, carbon=90, cost=40))
        assert composite.overall_score == pytest.approx(80)

    def test_one_off_weights_validated(self, make_scores):
        with pytest.raises(WeightValidationError):
            _combine(ScoringEngine(), make_scores(50, 50, 50), FactorWeights(carbon=0.9, latency=0.05, cost=0.05))

    def test_invalid_constructor_weights(self):
        with pytest.raises(WeightValidationError):
            ScoringEngine(FactorWeights(carbon=0.5, latency=0.3, cost=0.1))

    def test_red_card_factor_order(self, make_scores):
        s = make_scores(latency=20, carbon=10, cost=90)
        assert ScoringEngine.red_card_factor(s.latency, s.carbon, s.cost) is Factor.carbon
        s = make_scores(latency=20, carbon=60, cost=10)
        assert ScoringEngine.red_card_factor(s.latency, s.carbon, s.cost) is Factor.latency
        s = make_scores(60, 60, 60)
        assert ScoringEngine.red_card_factor(s.latency, s.carbon, s.cost) is None
        assert not ScoringEngine.is_red_card(s.latency, s.carbon, s.cost)


class TestScoreToVerdict:
    def test_red(self):
        assert score_to_verdict(0) is Verdict.red_card
        assert score_to_verdict(39.99) is Verdict.red_card

    def test_yellow(self):
        assert score_to_verdict(40) is Verdict.yellow_card
        assert score_to_verdict(70) is Verdict.yellow_card

    def test_play_on(self):
        assert score_to_verdict(70.01) is Verdict.play_on
        assert score_to_verdict(100) is Verdict.play_on

    def test_override_wins(self):
        assert score_to_verdict(95, red_card_triggered=True) is Verdict.red_card


class TestRefereeConfidence:
    def test_bands(self):
        assert confidence_to_referee(0.8) is RefereeConfidence.high
        assert confidence_to_referee(0.79) is RefereeConfidence.medium
        assert confidence_to_referee(0.6) is RefereeConfidence.medium
        assert confidence_to_referee(0.59) is RefereeConfidence.low
