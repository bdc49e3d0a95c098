# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Core Pydantic v2 data models for the region arbitrator.

This module defines the complete data contract shared by the collectors,
analyzers, scoring engine, verdict generator, reporting and CLI layers.
Every model here is frozen: values are created once per evaluation and
consumed read-only afterwards.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


def utc_now() -> datetime:
    """Timezone-aware current time used for every generated timestamp."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class CloudProvider(str, Enum):
    """Cloud provider that operates a region."""

    aws = "AWS"
    azure = "Azure"
    gcp = "GCP"
    other = "Other"


class Factor(str, Enum):
    """The three independent dimensions a region is judged on."""

    latency = "latency"
    carbon = "carbon"
    cost = "cost"


class LatencyCategory(str, Enum):
    """Latency band derived from the baseline latency."""

    excellent = "excellent"
    good = "good"
    acceptable = "acceptable"
    poor = "poor"


class CarbonCategory(str, Enum):
    """Environmental band derived from intensity and renewable share."""

    very_clean = "very_clean"
    clean = "clean"
    moderate = "moderate"
    high_carbon = "high_carbon"


class CostCategory(str, Enum):
    """Price band derived from the composite cost index."""

    very_affordable = "very_affordable"
    affordable = "affordable"
    moderate = "moderate"
    expensive = "expensive"


class Verdict(str, Enum):
    """Final referee call for a region."""

    red_card = "Red Card"
    yellow_card = "Yellow Card"
    play_on = "Play On"
    blue_card = "Blue Card"

    @property
    def color(self) -> str:
        """Terminal / report color associated with this verdict."""
        return {
            Verdict.red_card: "red",
            Verdict.yellow_card: "yellow",
            Verdict.play_on: "green",
            Verdict.blue_card: "blue",
        }[self]


class RefereeConfidence(str, Enum):
    """Summary label for how much the referee trusts a verdict."""

    high = "High"
    medium = "Medium"
    low = "Low"


class SuggestionType(str, Enum):
    """Kind of actionable advice attached to a verdict."""

    alternative_region = "alternative_region"
    optimization_strategy = "optimization_strategy"
    no_better_option = "no_better_option"


# ---------------------------------------------------------------------------
# Region identity
# ---------------------------------------------------------------------------

class GeographicLocation(BaseModel):
    """Where a region's data centers physically sit."""

    model_config = {"frozen": True}

    country: str = Field(..., min_length=1, description="ISO country code, e.g. 'US'")
    city: Optional[str] = Field(default=None, description="Nearest city, if known")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class CloudRegion(BaseModel):
    """A cloud provider region under evaluation."""

    model_config = {"frozen": True}

    provider: CloudProvider = Field(default=CloudProvider.aws)
    region_code: str = Field(..., min_length=1, description="e.g. 'us-west-2', 'eastus'")
    display_name: str = Field(..., min_length=1)
    location: GeographicLocation


# ---------------------------------------------------------------------------
# Raw metrics (produced fresh per evaluation, never cached)
# ---------------------------------------------------------------------------

class LatencyMetrics(BaseModel):
    """Measured round-trip latency for one region."""

    model_config = {"frozen": True}

    average_latency: float = Field(..., description="Average latency in milliseconds")
    p95_latency: float = Field(..., description="95th percentile latency in milliseconds")
    measurement_timestamp: datetime = Field(default_factory=utc_now)
    source_location: str = Field(
        ..., description="Where the measurement came from; carries the region code"
    )


class CarbonMetrics(BaseModel):
    """Grid carbon data for the zone serving one region."""

    model_config = {"frozen": True}

    carbon_intensity: float = Field(..., description="Grid intensity in gCO2/kWh")
    renewable_percentage: float = Field(..., description="Renewable share, 0-100")
    data_source: str = Field(..., description="Provenance tag of the measurement")
    last_updated: Optional[datetime] = Field(default=None)


class CostMetrics(BaseModel):
    """Unit prices for one region."""

    model_config = {"frozen": True}

    compute_cost_per_hour: float = Field(..., description="USD per instance hour")
    storage_cost_per_gb: float = Field(..., description="USD per GB-month")
    network_cost_per_gb: float = Field(..., description="USD per GB egress")
    region: str = Field(default="", description="Region code the prices belong to")


# ---------------------------------------------------------------------------
# Factor scores
# ---------------------------------------------------------------------------

class FactorScore(BaseModel):
    """Normalized 0-100 score shared by all three factors."""

    model_config = {"frozen": True}

    score: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0.1, le=1.0)
    reasoning: str = Field(..., min_length=1)


class LatencyScore(FactorScore):
    category: LatencyCategory


class CarbonScore(FactorScore):
    category: CarbonCategory
    renewable_percentage: float = Field(..., ge=0, le=100)


class CostScore(FactorScore):
    category: CostCategory
    relative_cost_index: float = Field(..., ge=0)


class FactorScoreSet(BaseModel):
    """The three factor scores of one region."""

    model_config = {"frozen": True}

    latency: LatencyScore
    carbon: CarbonScore
    cost: CostScore

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_confidence(self) -> float:
        """Mean of the three factor confidences."""
        return (self.latency.confidence + self.carbon.confidence + self.cost.confidence) / 3


# ---------------------------------------------------------------------------
# Weights and composite score
# ---------------------------------------------------------------------------

class FactorWeights(BaseModel):
    """Relative importance of each factor in the composite score.

    Structural bounds only; the sum-to-one rule and the 0.8 cap are
    enforced by :func:`region_arbitrator.scoring.weights.validate_weights`
    so that callers get a single, descriptive error type.
    """

    model_config = {"frozen": True}

    carbon: float = 0.4
    latency: float = 0.4
    cost: float = 0.2

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> float:
        """Sum of the three weights."""
        return self.carbon + self.latency + self.cost


class WeightedBreakdown(BaseModel):
    """Each factor score multiplied by its weight."""

    model_config = {"frozen": True}

    latency: float = 0.0
    carbon: float = 0.0
    cost: float = 0.0


class CompositeScore(BaseModel):
    """Weighted combination of the three factor scores."""

    model_config = {"frozen": True}

    overall_score: float = Field(..., ge=0, le=100)
    weighted_breakdown: WeightedBreakdown = Field(default_factory=WeightedBreakdown)
    confidence: float = Field(..., ge=0, le=1.0)
    red_card_triggered: bool = Field(
        default=False,
        description="True when a single factor below 30 capped the overall score",
    )


# ---------------------------------------------------------------------------
# Verdict output
# ---------------------------------------------------------------------------

class GreenSuggestion(BaseModel):
    """Actionable advice attached to every verdict."""

    model_config = {"frozen": True}

    type: SuggestionType
    description: str = Field(..., min_length=1)
    alternative_region: Optional[CloudRegion] = None
    expected_impact: Optional[str] = None


class VerdictScores(BaseModel):
    """All scores that fed a verdict."""

    model_config = {"frozen": True}

    latency: LatencyScore
    carbon: CarbonScore
    cost: CostScore
    composite: CompositeScore


class ArbitratorVerdict(BaseModel):
    """Final, immutable artifact of one region evaluation."""

    model_config = {"frozen": True}

    region: CloudRegion
    verdict: Verdict
    reason: str = Field(..., min_length=1)
    suggestion: GreenSuggestion
    scores: VerdictScores
    timestamp: datetime = Field(default_factory=utc_now)
    referee_confidence: RefereeConfidence
