# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Composite scoring for the region arbitrator.

Combines the three factor scores with the configured weights and
enforces the Red-Card rule: if any single factor scores below 30 the
composite is capped at 29, however strong the other factors are.
"""

from __future__ import annotations

from region_arbitrator.data.models import (
    CarbonScore,
    CompositeScore,
    CostScore,
    Factor,
    FactorWeights,
    LatencyScore,
    WeightedBreakdown,
)
from region_arbitrator.scoring.thresholds import (
    INDIVIDUAL_RED_CARD_THRESHOLD,
    RED_CARD_SCORE_CAP,
)
from region_arbitrator.scoring.weights import DEFAULT_WEIGHTS, validate_weights


class ScoringEngine:
    """Weighted combination of factor scores.

    Weights are validated once, when the engine is built; an engine is
    immutable afterwards, so a new weight configuration means a new engine.

    Usage::

        engine = ScoringEngine(FactorWeights(carbon=0.5, latency=0.3, cost=0.2))
        composite = engine.combine(latency, carbon, cost)
    """

    def __init__(self, weights: FactorWeights = DEFAULT_WEIGHTS) -> None:
        self._weights = validate_weights(weights)

    @property
    def weights(self) -> FactorWeights:
        return self._weights

    def combine(
        self,
        latency: LatencyScore,
        carbon: CarbonScore,
        cost: CostScore,
        weights: FactorWeights | None = None,
    ) -> CompositeScore:
        """Return the composite score for one region.

        Args:
            latency: Latency factor score.
            carbon: Carbon factor score.
            cost: Cost factor score.
            weights: One-off weights; validated when given, otherwise the
                engine's configured weights are used.

        Returns:
            A :class:`CompositeScore` whose ``overall_score`` honors the
            Red-Card cap and whose ``confidence`` is the weakest factor
            confidence.
        """
        w = validate_weights(weights) if weights is not None else self._weights

        breakdown = WeightedBreakdown(
            latency=latency.score * w.latency,
            carbon=carbon.score * w.carbon,
            cost=cost.score * w.cost,
        )
        overall = breakdown.latency + breakdown.carbon + breakdown.cost

        triggered = self.is_red_card(latency, carbon, cost)
        if triggered:
            overall = min(overall, RED_CARD_SCORE_CAP)

        return CompositeScore(
            overall_score=round(max(0.0, min(100.0, overall)), 2),
            weighted_breakdown=breakdown,
            confidence=min(latency.confidence, carbon.confidence, cost.confidence),
            red_card_triggered=triggered,
        )

    @staticmethod
    def is_red_card(latency: LatencyScore, carbon: CarbonScore, cost: CostScore) -> bool:
        return ScoringEngine.red_card_factor(latency, carbon, cost) is not None

    @staticmethod
    def red_card_factor(
        latency: LatencyScore, carbon: CarbonScore, cost: CostScore
    ) -> Factor | None:
        """First factor (carbon, latency, cost order) below the Red-Card threshold."""
        if carbon.score < INDIVIDUAL_RED_CARD_THRESHOLD:
            return Factor.carbon
        if latency.score < INDIVIDUAL_RED_CARD_THRESHOLD:
            return Factor.latency
        if cost.score < INDIVIDUAL_RED_CARD_THRESHOLD:
            return Factor.cost
        return None
