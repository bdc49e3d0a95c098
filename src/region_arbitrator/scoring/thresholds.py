# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Verdict thresholds, the Red-Card rule, and confidence bands.

Every verdict can be traced back to one of the constants below.
"""

from region_arbitrator.data.models import RefereeConfidence, Verdict

# ---------------------------------------------------------------------------
# Red-Card rule: a single factor below this caps the composite below it
# ---------------------------------------------------------------------------
INDIVIDUAL_RED_CARD_THRESHOLD = 30
RED_CARD_SCORE_CAP = INDIVIDUAL_RED_CARD_THRESHOLD - 1

# ---------------------------------------------------------------------------
# Composite score -> verdict
# ---------------------------------------------------------------------------
RED_CARD_MAX = 40       # Below 40 = Red Card
YELLOW_CARD_MAX = 70    # 40-70 inclusive = Yellow Card, above = Play On

# ---------------------------------------------------------------------------
# Factor narrative bands
# ---------------------------------------------------------------------------
CONCERN_BELOW = 50
STRENGTH_FROM = 70
STRONG_FROM = 60
OUTSTANDING_FROM = 80
WEAK_BELOW = 40

# ---------------------------------------------------------------------------
# Green alternative search
# ---------------------------------------------------------------------------
ACCEPTABLE_LATENCY_SCORE = 50   # Roughly 100 ms baseline
ALTERNATIVE_CARBON_TIE = 5

# ---------------------------------------------------------------------------
# Referee confidence (average of the three factor confidences)
# ---------------------------------------------------------------------------
HIGH_CONFIDENCE_MIN = 0.8
MEDIUM_CONFIDENCE_MIN = 0.6

# ---------------------------------------------------------------------------
# Blue Card neutral defaults
# ---------------------------------------------------------------------------
NEUTRAL_FACTOR_SCORE = 50.0
NEUTRAL_FACTOR_CONFIDENCE = 0.5


def score_to_verdict(overall_score: float, red_card_triggered: bool = False) -> Verdict:
    """Map a composite score to a verdict; the override always wins."""
    if red_card_triggered or overall_score < RED_CARD_MAX:
        return Verdict.red_card
    if overall_score <= YELLOW_CARD_MAX:
        return Verdict.yellow_card
    return Verdict.play_on


def confidence_to_referee(average_confidence: float) -> RefereeConfidence:
    if average_confidence >= HIGH_CONFIDENCE_MIN:
        return RefereeConfidence.high
    if average_confidence >= MEDIUM_CONFIDENCE_MIN:
        return RefereeConfidence.medium
    return RefereeConfidence.low
