# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Carbon analysis: grid intensity plus a renewable-share adjustment."""

from __future__ import annotations

import math
from datetime import datetime

from region_arbitrator.analysis.errors import MetricValidationError
from region_arbitrator.data.models import (
    CarbonCategory,
    CarbonMetrics,
    CarbonScore,
    utc_now,
)

# ---------------------------------------------------------------------------
# Intensity benchmarks (gCO2/kWh)
# ---------------------------------------------------------------------------
MAX_CARBON_INTENSITY = 500     # Score = 0
VERY_CLEAN_THRESHOLD = 100
CLEAN_THRESHOLD = 200
MODERATE_THRESHOLD = 350
MAX_VALID_INTENSITY = 1000

# ---------------------------------------------------------------------------
# Renewable benchmarks (%)
# ---------------------------------------------------------------------------
HIGH_RENEWABLE_THRESHOLD = 80
GOOD_RENEWABLE_THRESHOLD = 50
LOW_RENEWABLE_THRESHOLD = 20

# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------
MAX_DATA_AGE_HOURS = 2.0
STALE_BASE_PENALTY = 0.2
STALE_MAX_PENALTY = 0.4
UNTRUSTED_SOURCE_PENALTY = 0.3
MOCK_CONFIDENCE_FACTOR = 0.3

TRUSTED_DATA_SOURCES = (
    "electricitymaps",
    "eia.gov",
    "iea.org",
    "ember-climate.org",
)


def normalize_carbon_score(carbon_intensity: float) -> float:
    """0 g = 100 points, 500 g = 0 points, linear in between."""
    if carbon_intensity <= 0:
        return 100.0
    if carbon_intensity >= MAX_CARBON_INTENSITY:
        return 0.0
    return max(0.0, min(100.0, 100.0 - carbon_intensity / MAX_CARBON_INTENSITY * 100.0))


def renewable_adjustment(renewable_percentage: float) -> float:
    """Bonus of up to +15 for clean mixes, penalty of up to -10 for dirty ones.

    The curve is continuous: +15..+10 above 80 %, +10..0 between 50 and
    80 %, 0..-5 between 20 and 50 %, and -5..-10 below 20 %.
    """
    r = renewable_percentage
    if r >= HIGH_RENEWABLE_THRESHOLD:
        return min(15.0, 10.0 + (r - HIGH_RENEWABLE_THRESHOLD) / 20.0 * 5.0)
    if r >= GOOD_RENEWABLE_THRESHOLD:
        return min(10.0, (r - GOOD_RENEWABLE_THRESHOLD) / 30.0 * 10.0)
    if r >= LOW_RENEWABLE_THRESHOLD:
        return -min(5.0, (GOOD_RENEWABLE_THRESHOLD - r) / 30.0 * 5.0)
    return -min(10.0, 5.0 + (LOW_RENEWABLE_THRESHOLD - r) / 20.0 * 5.0)


def categorize_carbon(carbon_intensity: float, renewable_percentage: float) -> CarbonCategory:
    """Joint intensity/renewable band; intensity sets the ceiling."""
    if carbon_intensity <= VERY_CLEAN_THRESHOLD:
        if renewable_percentage >= HIGH_RENEWABLE_THRESHOLD:
            return CarbonCategory.very_clean
        return CarbonCategory.clean
    if carbon_intensity <= CLEAN_THRESHOLD:
        if renewable_percentage >= GOOD_RENEWABLE_THRESHOLD:
            return CarbonCategory.clean
        return CarbonCategory.moderate
    if carbon_intensity <= MODERATE_THRESHOLD:
        if renewable_percentage >= LOW_RENEWABLE_THRESHOLD:
            return CarbonCategory.moderate
        return CarbonCategory.high_carbon
    return CarbonCategory.high_carbon


def _age_hours(timestamp: datetime) -> float:
    now = utc_now()
    if timestamp.tzinfo is None:
        now = now.replace(tzinfo=None)
    return (now - timestamp).total_seconds() / 3600.0


class CarbonAnalyzer:
    """Turn grid carbon data into a :class:`CarbonScore`.

    Usage::

        analyzer = CarbonAnalyzer()
        score = analyzer.analyze(metrics)
    """

    def __init__(self, trusted_sources: tuple[str, ...] = TRUSTED_DATA_SOURCES) -> None:
        self.trusted_sources = tuple(s.lower() for s in trusted_sources)

    def analyze(self, metrics: CarbonMetrics) -> CarbonScore:
        """Validate, score, and explain a region's carbon footprint.

        Raises
        ------
        MetricValidationError
            If intensity is outside [0, 1000], renewable share outside
            [0, 100], or the source or timestamp is missing.
        """
        self._validate(metrics)

        base = normalize_carbon_score(metrics.carbon_intensity)
        score = max(0.0, min(100.0, base + renewable_adjustment(metrics.renewable_percentage)))
        confidence = self._confidence(metrics)
        category = categorize_carbon(metrics.carbon_intensity, metrics.renewable_percentage)
        reasoning = self._reasoning(metrics, category, confidence)

        return CarbonScore(
            score=round(score, 2),
            confidence=confidence,
            reasoning=reasoning,
            category=category,
            renewable_percentage=metrics.renewable_percentage,
        )

    def thresholds(self) -> dict[str, float]:
        return {
            "very_clean": VERY_CLEAN_THRESHOLD,
            "clean": CLEAN_THRESHOLD,
            "moderate": MODERATE_THRESHOLD,
            "max_intensity": MAX_CARBON_INTENSITY,
        }

    def renewable_thresholds(self) -> dict[str, float]:
        return {
            "high": HIGH_RENEWABLE_THRESHOLD,
            "good": GOOD_RENEWABLE_THRESHOLD,
            "low": LOW_RENEWABLE_THRESHOLD,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(metrics: CarbonMetrics) -> None:
        intensity = metrics.carbon_intensity
        if not math.isfinite(intensity) or intensity < 0 or intensity > MAX_VALID_INTENSITY:
            raise MetricValidationError(f"Invalid carbon intensity: {intensity} gCO2/kWh")
        renewable = metrics.renewable_percentage
        if not math.isfinite(renewable) or renewable < 0 or renewable > 100:
            raise MetricValidationError(f"Invalid renewable percentage: {renewable}%")
        if not metrics.data_source or not metrics.data_source.strip():
            raise MetricValidationError("Carbon data source must be specified")
        if metrics.last_updated is None:
            raise MetricValidationError("Carbon data timestamp must be provided")

    def _confidence(self, metrics: CarbonMetrics) -> float:
        confidence = 1.0
        source = metrics.data_source.lower()

        if not any(trusted in source for trusted in self.trusted_sources):
            confidence -= UNTRUSTED_SOURCE_PENALTY

        # Grid mix moves hour by hour; anything past the window loses at least 0.2
        age = _age_hours(metrics.last_updated)  # type: ignore[arg-type]
        if age > MAX_DATA_AGE_HOURS:
            confidence -= min(
                STALE_BASE_PENALTY + (age - MAX_DATA_AGE_HOURS) / 40.0, STALE_MAX_PENALTY
            )

        # Internally inconsistent readings
        if metrics.carbon_intensity == 0 and metrics.renewable_percentage < 95:
            confidence -= 0.4
        if metrics.carbon_intensity > 600 and metrics.renewable_percentage > 50:
            confidence -= 0.3

        if "mock" in source or "test" in source:
            confidence *= MOCK_CONFIDENCE_FACTOR

        return max(0.1, min(1.0, confidence))

    @staticmethod
    def _reasoning(metrics: CarbonMetrics, category: CarbonCategory, confidence: float) -> str:
        intensity = round(metrics.carbon_intensity)
        renewable = round(metrics.renewable_percentage)

        framing = {
            CarbonCategory.very_clean: "represents exemplary environmental stewardship",
            CarbonCategory.clean: "demonstrates good environmental responsibility",
            CarbonCategory.moderate: "shows mixed environmental impact requiring consideration",
            CarbonCategory.high_carbon: (
                "carries significant environmental cost that demands justification"
            ),
        }[category]
        parts = [
            f"Carbon intensity of {intensity}g CO2/kWh with {renewable}% renewable energy "
            f"{framing}"
        ]

        if renewable >= HIGH_RENEWABLE_THRESHOLD:
            parts.append("Excellent renewable energy mix supports sustainable operations")
        elif renewable >= GOOD_RENEWABLE_THRESHOLD:
            parts.append("Good renewable energy adoption helps offset carbon impact")
        elif renewable >= LOW_RENEWABLE_THRESHOLD:
            parts.append("Limited renewable energy increases environmental concern")
        else:
            parts.append("Very low renewable energy significantly amplifies carbon footprint")

        if confidence < 0.6:
            parts.append("Assessment confidence reduced due to data quality concerns")
        elif confidence > 0.9:
            parts.append("High confidence in environmental assessment")

        if category is CarbonCategory.high_carbon:
            parts.append(
                "The Referee questions whether performance gains justify this environmental cost"
            )

        return ". ".join(parts) + "."
