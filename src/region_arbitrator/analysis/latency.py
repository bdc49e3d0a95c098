# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Latency analysis: static baseline score, measured-ping confidence.

The scored quantity is the region's entry in a static baseline table,
never the measured ping, so verdicts stay comparable no matter where
the evaluation runs.  The measured ping only validates how far the
baseline can be trusted.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Mapping

from region_arbitrator.analysis.baselines import (
    STATIC_LATENCY_MAP,
    UNKNOWN_REGION_BASELINE,
    LatencyBaseline,
)
from region_arbitrator.analysis.errors import MetricValidationError
from region_arbitrator.data.models import (
    LatencyCategory,
    LatencyMetrics,
    LatencyScore,
    utc_now,
)

MAX_LATENCY_MS = 200.0

EXCELLENT_THRESHOLD = 50    # ms
GOOD_THRESHOLD = 100        # ms
ACCEPTABLE_THRESHOLD = 150  # ms

MAX_DATA_AGE_HOURS = 24.0
PING_VARIANCE_THRESHOLD = 0.5
P95_RATIO_THRESHOLD = 2.5
MOCK_CONFIDENCE_FACTOR = 0.4
IMPLAUSIBLE_CONFIDENCE_FACTOR = 0.3


def normalize_latency_score(latency_ms: float) -> float:
    """0 ms = 100 points, 200 ms = 0 points, linear in between."""
    if latency_ms <= 0:
        return 100.0
    if latency_ms >= MAX_LATENCY_MS:
        return 0.0
    return max(0.0, min(100.0, 100.0 - latency_ms / MAX_LATENCY_MS * 100.0))


def categorize_latency(latency_ms: float) -> LatencyCategory:
    if latency_ms <= EXCELLENT_THRESHOLD:
        return LatencyCategory.excellent
    if latency_ms <= GOOD_THRESHOLD:
        return LatencyCategory.good
    if latency_ms <= ACCEPTABLE_THRESHOLD:
        return LatencyCategory.acceptable
    return LatencyCategory.poor


def _age_hours(timestamp: datetime) -> float:
    now = utc_now()
    if timestamp.tzinfo is None:
        now = now.replace(tzinfo=None)
    return (now - timestamp).total_seconds() / 3600.0


class LatencyAnalyzer:
    """Turn latency measurements into a :class:`LatencyScore`.

    Usage::

        analyzer = LatencyAnalyzer()
        score = analyzer.analyze(metrics)
    """

    def __init__(self, baselines: Mapping[str, LatencyBaseline] | None = None) -> None:
        self._baselines: dict[str, LatencyBaseline] = dict(
            STATIC_LATENCY_MAP if baselines is None else baselines
        )
        # Longest codes first so "us-east-1" never shadows a longer code containing it
        self._codes = sorted(self._baselines, key=len, reverse=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(self, metrics: LatencyMetrics) -> LatencyScore:
        """Score the region's baseline latency and rate the measurement."""
        self._validate(metrics)

        baseline = self.baseline_for(metrics.source_location)
        score = normalize_latency_score(baseline.baseline_latency)
        confidence = self._confidence(metrics, baseline)
        category = categorize_latency(baseline.baseline_latency)
        reasoning = self._reasoning(metrics, baseline, category, confidence)

        return LatencyScore(
            score=round(score, 2),
            confidence=confidence,
            reasoning=reasoning,
            category=category,
        )

    def baseline_for(self, source_location: str) -> LatencyBaseline:
        """Baseline entry whose region code appears in *source_location*."""
        for code in self._codes:
            if code in source_location:
                return self._baselines[code]
        return UNKNOWN_REGION_BASELINE

    def available_regions(self) -> list[str]:
        return list(self._baselines)

    def region_baseline(self, region_code: str) -> LatencyBaseline | None:
        return self._baselines.get(region_code)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(metrics: LatencyMetrics) -> None:
        for name in ("average_latency", "p95_latency"):
            value = getattr(metrics, name)
            if not math.isfinite(value) or value < 0:
                raise MetricValidationError(f"Invalid {name}: {value} ms")
        if not metrics.source_location.strip():
            raise MetricValidationError("Latency source location must be specified")

    @staticmethod
    def _confidence(metrics: LatencyMetrics, baseline: LatencyBaseline) -> float:
        confidence = 1.0

        age = _age_hours(metrics.measurement_timestamp)
        if age > MAX_DATA_AGE_HOURS:
            confidence -= min(age / (MAX_DATA_AGE_HOURS * 2), 0.5)

        # Measured ping diverging from the baseline undermines the baseline
        real_ping = metrics.average_latency
        variance = abs(real_ping - baseline.baseline_latency) / baseline.baseline_latency
        if variance > PING_VARIANCE_THRESHOLD:
            confidence -= min(variance * 0.6, 0.7)

        if real_ping > 0:
            p95_ratio = metrics.p95_latency / real_ping
            if p95_ratio > P95_RATIO_THRESHOLD:
                confidence -= min((p95_ratio - P95_RATIO_THRESHOLD) * 0.15, 0.25)

        if "mock" in metrics.source_location.lower():
            confidence *= MOCK_CONFIDENCE_FACTOR

        if real_ping < 1 or real_ping > 1000:
            confidence *= IMPLAUSIBLE_CONFIDENCE_FACTOR

        return max(0.1, min(1.0, confidence))

    @staticmethod
    def _reasoning(
        metrics: LatencyMetrics,
        baseline: LatencyBaseline,
        category: LatencyCategory,
        confidence: float,
    ) -> str:
        baseline_ms = round(baseline.baseline_latency)
        real_ping = round(metrics.average_latency)
        variance = abs(metrics.average_latency - baseline.baseline_latency) / baseline.baseline_latency

        assessment = {
            LatencyCategory.excellent: "delivers exceptional global performance",
            LatencyCategory.good: "provides good global performance",
            LatencyCategory.acceptable: "meets acceptable global standards",
            LatencyCategory.poor: "shows concerning global performance",
        }[category]
        parts = [
            f"{baseline.description} baseline latency of {baseline_ms}ms {assessment} "
            f"({category.value})"
        ]

        if variance > PING_VARIANCE_THRESHOLD:
            direction = "higher" if metrics.average_latency > baseline.baseline_latency else "lower"
            parts.append(
                f"Real measurement of {real_ping}ms diverges from the baseline "
                f"({direction} than expected), reducing confidence"
            )
        elif variance < 0.2:
            parts.append(f"Real measurement of {real_ping}ms confirms baseline expectations")

        if confidence < 0.6:
            parts.append("Low confidence due to measurement inconsistencies")
        elif confidence > 0.9:
            parts.append("High confidence in assessment")

        return ". ".join(parts) + "."
