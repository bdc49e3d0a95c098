# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Referee verdict generator.

Turns a composite score plus the three factor scores into a final
:class:`~region_arbitrator.data.models.ArbitratorVerdict`, with factor-aware
reasoning and a green suggestion.  Data-collection failures bypass scoring
entirely and produce a Blue Card.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from region_arbitrator.collectors.base import CollectionFailure
from region_arbitrator.data.models import (
    ArbitratorVerdict,
    CarbonCategory,
    CarbonScore,
    CloudRegion,
    CompositeScore,
    CostCategory,
    CostScore,
    FactorScoreSet,
    GreenSuggestion,
    LatencyCategory,
    LatencyScore,
    RefereeConfidence,
    Verdict,
    VerdictScores,
)
from region_arbitrator.scoring.thresholds import (
    CONCERN_BELOW,
    INDIVIDUAL_RED_CARD_THRESHOLD,
    NEUTRAL_FACTOR_CONFIDENCE,
    NEUTRAL_FACTOR_SCORE,
    OUTSTANDING_FROM,
    STRENGTH_FROM,
    STRONG_FROM,
    WEAK_BELOW,
    confidence_to_referee,
    score_to_verdict,
)
from region_arbitrator.verdicts.suggestions import (
    data_unavailable_suggestion,
    suggest_green_alternative,
)


def _pts(value: float) -> int:
    return round(value)


def _breakdown_sentence(composite: CompositeScore) -> str:
    b = composite.weighted_breakdown
    return (
        f"Factor breakdown - Carbon: {_pts(b.carbon)}pts, "
        f"Latency: {_pts(b.latency)}pts, Cost: {_pts(b.cost)}pts."
    )


# ---------------------------------------------------------------------------
# Reason builders, one per scored verdict
# ---------------------------------------------------------------------------

def _red_card_reason(composite: CompositeScore, scores: FactorScoreSet) -> str:
    carbon, latency, cost = scores.carbon, scores.latency, scores.cost
    parts = [f"The Referee issues a Red Card ({_pts(composite.overall_score)}/100)."]

    triggered = False
    if carbon.score < INDIVIDUAL_RED_CARD_THRESHOLD:
        triggered = True
        parts.append(
            f"The carbon intensity is unacceptably high ({_pts(carbon.score)}/100, "
            f"{carbon.category.value}). With only {_pts(carbon.renewable_percentage)}% "
            "renewable energy, this choice significantly contributes to environmental "
            "degradation. The Referee cannot sanction this environmental cost."
        )
    if latency.score < INDIVIDUAL_RED_CARD_THRESHOLD:
        triggered = True
        parts.append(
            f"The latency performance is critically poor ({_pts(latency.score)}/100, "
            f"{latency.category.value}). This will severely impact user experience and "
            "application responsiveness."
        )
    if cost.score < INDIVIDUAL_RED_CARD_THRESHOLD:
        triggered = True
        parts.append(
            f"The cost structure is prohibitively expensive ({_pts(cost.score)}/100, "
            f"{cost.category.value}). With a relative cost index of "
            f"{cost.relative_cost_index:.2f}, this choice lacks financial justification."
        )

    if triggered:
        parts.append(
            f"A single factor below {INDIVIDUAL_RED_CARD_THRESHOLD} cannot be offset by "
            "strength elsewhere."
        )
    else:
        parts.append("The overall performance is inadequate across multiple factors.")
        weak = []
        if carbon.score < WEAK_BELOW:
            weak.append(f"carbon impact ({_pts(carbon.score)}/100)")
        if latency.score < WEAK_BELOW:
            weak.append(f"latency performance ({_pts(latency.score)}/100)")
        if cost.score < WEAK_BELOW:
            weak.append(f"cost efficiency ({_pts(cost.score)}/100)")
        if weak:
            parts.append(f"Particularly concerning: {', '.join(weak)}.")

    parts.append(
        "The Referee strongly advises against this region. Consider the green alternative "
        "for a more sustainable and balanced choice."
    )
    return " ".join(parts)


def _yellow_card_reason(composite: CompositeScore, scores: FactorScoreSet) -> str:
    carbon, latency, cost = scores.carbon, scores.latency, scores.cost
    parts = [
        f"The Referee has reviewed your choice and issues a Yellow Card "
        f"({_pts(composite.overall_score)}/100)."
    ]

    concerns: list[str] = []
    strengths: list[str] = []
    for score, concern, strength in (
        (carbon, "carbon intensity is concerning", "good carbon performance"),
        (latency, "latency performance needs attention", "solid latency performance"),
        (cost, "cost efficiency could be better", "cost-effective pricing"),
    ):
        detail = f"({_pts(score.score)}/100, {score.category.value})"
        if score.score < CONCERN_BELOW:
            concerns.append(f"{concern} {detail}")
        elif score.score >= STRENGTH_FROM:
            strengths.append(f"{strength} {detail}")

    if concerns:
        parts.append(f"Primary concerns: {', '.join(concerns)}.")
    if strengths:
        parts.append(f"Positive aspects: {', '.join(strengths)}.")
    parts.append(
        "This region shows mixed performance across factors. Proceed with caution and "
        "consider the green alternative."
    )
    return " ".join(parts)


def _play_on_reason(composite: CompositeScore, scores: FactorScoreSet) -> str:
    carbon, latency, cost = scores.carbon, scores.latency, scores.cost
    parts = [
        f"The Referee approves this choice with a Play On verdict "
        f"({_pts(composite.overall_score)}/100)."
    ]

    outstanding: list[str] = []
    strong: list[str] = []
    if carbon.score >= OUTSTANDING_FROM:
        outstanding.append(
            f"exceptional carbon performance ({_pts(carbon.score)}/100, "
            f"{_pts(carbon.renewable_percentage)}% renewable)"
        )
    elif carbon.score >= STRONG_FROM:
        strong.append(f"solid carbon footprint ({_pts(carbon.score)}/100, {carbon.category.value})")

    if latency.score >= OUTSTANDING_FROM:
        outstanding.append(
            f"excellent latency performance ({_pts(latency.score)}/100, {latency.category.value})"
        )
    elif latency.score >= STRONG_FROM:
        strong.append(f"good latency performance ({_pts(latency.score)}/100, {latency.category.value})")

    if cost.score >= OUTSTANDING_FROM:
        outstanding.append(f"very cost-effective ({_pts(cost.score)}/100, {cost.category.value})")
    elif cost.score >= STRONG_FROM:
        strong.append(f"reasonable cost structure ({_pts(cost.score)}/100, {cost.category.value})")

    if outstanding:
        parts.append(f"Outstanding qualities: {', '.join(outstanding)}.")
    if strong:
        parts.append(f"Strong performance in: {', '.join(strong)}.")
    parts.append("This represents a pragmatic balance of performance and sustainability.")
    return " ".join(parts)


_REASON_BUILDERS = {
    Verdict.red_card: _red_card_reason,
    Verdict.yellow_card: _yellow_card_reason,
    Verdict.play_on: _play_on_reason,
}


# ---------------------------------------------------------------------------
# Blue Card neutral scores
# ---------------------------------------------------------------------------

_UNAVAILABLE = "Data unavailable - neutral score assigned"


def neutral_scores() -> FactorScoreSet:
    """Placeholder factor scores carried by a Blue Card."""
    return FactorScoreSet(
        latency=LatencyScore(
            score=NEUTRAL_FACTOR_SCORE,
            confidence=NEUTRAL_FACTOR_CONFIDENCE,
            reasoning=_UNAVAILABLE,
            category=LatencyCategory.acceptable,
        ),
        carbon=CarbonScore(
            score=NEUTRAL_FACTOR_SCORE,
            confidence=NEUTRAL_FACTOR_CONFIDENCE,
            reasoning=_UNAVAILABLE,
            category=CarbonCategory.moderate,
            renewable_percentage=0,
        ),
        cost=CostScore(
            score=NEUTRAL_FACTOR_SCORE,
            confidence=NEUTRAL_FACTOR_CONFIDENCE,
            reasoning=_UNAVAILABLE,
            category=CostCategory.moderate,
            relative_cost_index=1.0,
        ),
    )


class VerdictGenerator:
    """Issue referee verdicts from composite and factor scores.

    Usage::

        generator = VerdictGenerator()
        verdict = generator.generate(composite, region, scores)
    """

    def generate(
        self,
        composite: CompositeScore,
        region: CloudRegion,
        scores: FactorScoreSet,
        candidates: Sequence[CloudRegion] | None = None,
        candidate_scores: Mapping[str, FactorScoreSet] | None = None,
    ) -> ArbitratorVerdict:
        """Return the verdict for *region*.

        Args:
            composite: Output of the scoring engine for this region.
            region: The evaluated region.
            scores: The three factor scores that fed *composite*.
            candidates: Regions eligible as a greener alternative.
            candidate_scores: Factor scores keyed by region code; must
                include *region* itself for the alternative search to run.
        """
        verdict = score_to_verdict(composite.overall_score, composite.red_card_triggered)
        confidence = self.referee_confidence(scores)
        reason = " ".join(
            [
                _REASON_BUILDERS[verdict](composite, scores),
                _breakdown_sentence(composite),
                f"Referee Confidence: {confidence.value}.",
            ]
        )

        return ArbitratorVerdict(
            region=region,
            verdict=verdict,
            reason=reason,
            suggestion=self.suggest_green_alternative(region, candidates, candidate_scores),
            scores=VerdictScores(
                latency=scores.latency,
                carbon=scores.carbon,
                cost=scores.cost,
                composite=composite,
            ),
            referee_confidence=confidence,
        )

    def generate_blue_card(
        self, region: CloudRegion, failure: CollectionFailure
    ) -> ArbitratorVerdict:
        """Verdict for a region whose data could not be collected."""
        neutral = neutral_scores()
        reason = (
            "The Referee issues a Blue Card - insufficient data for fair assessment. "
            f"{failure.factor.value.capitalize()} data collection failed: {failure}. "
            "The Referee cannot make an informed decision without reliable data sources. "
            "This region requires further investigation before deployment consideration."
        )
        return ArbitratorVerdict(
            region=region,
            verdict=Verdict.blue_card,
            reason=reason,
            suggestion=data_unavailable_suggestion(failure),
            scores=VerdictScores(
                latency=neutral.latency,
                carbon=neutral.carbon,
                cost=neutral.cost,
                composite=CompositeScore(overall_score=0, confidence=0),
            ),
            referee_confidence=RefereeConfidence.low,
        )

    def suggest_green_alternative(
        self,
        region: CloudRegion,
        candidates: Sequence[CloudRegion] | None = None,
        candidate_scores: Mapping[str, FactorScoreSet] | None = None,
    ) -> GreenSuggestion:
        return suggest_green_alternative(region, candidates, candidate_scores)

    @staticmethod
    def referee_confidence(scores: FactorScoreSet) -> RefereeConfidence:
        """High / Medium / Low from the average factor confidence."""
        return confidence_to_referee(scores.average_confidence)
