# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Cost analysis: per-dimension market indexing on a logarithmic curve.

Each price is divided by its market baseline, the three indices are
combined 50/30/20 (compute/storage/network), and the composite index is
mapped to a score with ``50 - 25 * log2(index)``::

    0.5x baseline -> 75
    1.0x baseline -> 50
    2.0x baseline -> 25
    4.0x baseline ->  0

This is the single authoritative cost normalization; the scoring engine
only ever consumes the resulting score.
"""

from __future__ import annotations

import math

from region_arbitrator.analysis.baselines import DEFAULT_COST_BASELINES, CostBaselines
from region_arbitrator.analysis.errors import MetricValidationError
from region_arbitrator.data.models import CostCategory, CostMetrics, CostScore

# ---------------------------------------------------------------------------
# Category thresholds (composite index relative to baseline)
# ---------------------------------------------------------------------------
VERY_AFFORDABLE_THRESHOLD = 0.7
AFFORDABLE_THRESHOLD = 0.9
MODERATE_THRESHOLD = 1.2

# ---------------------------------------------------------------------------
# Dimension weights (must sum to 1.0)
# ---------------------------------------------------------------------------
COMPUTE_WEIGHT = 0.5
STORAGE_WEIGHT = 0.3
NETWORK_WEIGHT = 0.2

# ---------------------------------------------------------------------------
# Sanity bounds (USD)
# ---------------------------------------------------------------------------
MAX_COMPUTE_COST = 10.0
MAX_STORAGE_COST = 1.0
MAX_NETWORK_COST = 2.0

EXTREME_HIGH_INDEX = 5.0
EXTREME_LOW_INDEX = 0.1
MAX_INDEX_SPREAD = 3.0
COST_DRIVER_THRESHOLD = 1.5
MOCK_CONFIDENCE_FACTOR = 0.3


def normalize_cost_score(cost_index: float) -> float:
    """Map a composite cost index to 0-100 with ``50 - 25 * log2(index)``."""
    if cost_index <= 0:
        return 100.0
    return max(0.0, min(100.0, 50.0 - math.log2(cost_index) * 25.0))


def categorize_cost(cost_index: float) -> CostCategory:
    if cost_index <= VERY_AFFORDABLE_THRESHOLD:
        return CostCategory.very_affordable
    if cost_index <= AFFORDABLE_THRESHOLD:
        return CostCategory.affordable
    if cost_index <= MODERATE_THRESHOLD:
        return CostCategory.moderate
    return CostCategory.expensive


class CostAnalyzer:
    """Turn regional unit prices into a :class:`CostScore`.

    Usage::

        analyzer = CostAnalyzer()
        score = analyzer.analyze(metrics)
    """

    def __init__(self, baselines: CostBaselines = DEFAULT_COST_BASELINES) -> None:
        self._baselines = baselines

    def analyze(self, metrics: CostMetrics) -> CostScore:
        """Validate, index, score, and explain a region's pricing."""
        self._validate(metrics)

        compute_idx, storage_idx, network_idx = self.dimension_indices(metrics)
        composite = (
            compute_idx * COMPUTE_WEIGHT
            + storage_idx * STORAGE_WEIGHT
            + network_idx * NETWORK_WEIGHT
        )

        score = normalize_cost_score(composite)
        confidence = self._confidence(metrics, composite, (compute_idx, storage_idx, network_idx))
        category = categorize_cost(composite)
        reasoning = self._reasoning(
            composite, (compute_idx, storage_idx, network_idx), category, confidence
        )

        return CostScore(
            score=round(score, 2),
            confidence=confidence,
            reasoning=reasoning,
            category=category,
            relative_cost_index=round(composite, 2),
        )

    def dimension_indices(self, metrics: CostMetrics) -> tuple[float, float, float]:
        """``actual / baseline`` for compute, storage, and network."""
        return (
            metrics.compute_cost_per_hour / self._baselines.compute,
            metrics.storage_cost_per_gb / self._baselines.storage,
            metrics.network_cost_per_gb / self._baselines.network,
        )

    def thresholds(self) -> dict[str, float]:
        return {
            "very_affordable": VERY_AFFORDABLE_THRESHOLD,
            "affordable": AFFORDABLE_THRESHOLD,
            "moderate": MODERATE_THRESHOLD,
            "extreme_multiplier": EXTREME_HIGH_INDEX,
        }

    def baselines(self) -> CostBaselines:
        return self._baselines

    def dimension_weights(self) -> dict[str, float]:
        return {"compute": COMPUTE_WEIGHT, "storage": STORAGE_WEIGHT, "network": NETWORK_WEIGHT}

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(metrics: CostMetrics) -> None:
        checks = (
            ("compute", metrics.compute_cost_per_hour, MAX_COMPUTE_COST, "/hour"),
            ("storage", metrics.storage_cost_per_gb, MAX_STORAGE_COST, "/GB"),
            ("network", metrics.network_cost_per_gb, MAX_NETWORK_COST, "/GB"),
        )
        for name, value, upper, unit in checks:
            if not math.isfinite(value) or value < 0 or value > upper:
                raise MetricValidationError(f"Invalid {name} cost: ${value}{unit}")
        if not metrics.region or not metrics.region.strip():
            raise MetricValidationError("Cost metrics must specify a region")

    @staticmethod
    def _confidence(
        metrics: CostMetrics, composite: float, indices: tuple[float, float, float]
    ) -> float:
        confidence = 1.0

        if composite > EXTREME_HIGH_INDEX or composite < EXTREME_LOW_INDEX:
            confidence -= 0.4

        # Dimensions priced wildly apart usually means bad input
        low, high = min(indices), max(indices)
        if low > 0:
            spread = high / low
            if spread > MAX_INDEX_SPREAD:
                confidence -= min((spread - MAX_INDEX_SPREAD) * 0.1, 0.3)

        zero_count = sum(1 for idx in indices if idx == 0)
        confidence -= zero_count * 0.2

        region = metrics.region.lower()
        if "mock" in region or "test" in region:
            confidence *= MOCK_CONFIDENCE_FACTOR

        return max(0.1, min(1.0, confidence))

    @staticmethod
    def _reasoning(
        composite: float,
        indices: tuple[float, float, float],
        category: CostCategory,
        confidence: float,
    ) -> str:
        compute_idx, storage_idx, network_idx = (round(i, 2) for i in indices)

        framing = {
            CostCategory.very_affordable: "delivering exceptional value with significant cost savings",
            CostCategory.affordable: "providing good value below market rates",
            CostCategory.moderate: "reflecting standard market pricing with acceptable premiums",
            CostCategory.expensive: "carrying premium pricing that requires cost justification",
        }[category]
        parts = [
            f"Multi-dimensional cost analysis shows {composite:.2f}x market baseline {framing}",
            f"Breakdown: compute {compute_idx}x, storage {storage_idx}x, network {network_idx}x",
        ]

        top = max(compute_idx, storage_idx, network_idx)
        if top > COST_DRIVER_THRESHOLD:
            if compute_idx == top:
                parts.append("Compute costs are the primary cost driver")
            elif storage_idx == top:
                parts.append("Storage costs are the primary cost driver")
            else:
                parts.append("Network costs are the primary cost driver")

        if confidence < 0.6:
            parts.append("Cost assessment confidence reduced due to data inconsistencies")
        elif confidence > 0.9:
            parts.append("High confidence in cost analysis")

        if category is CostCategory.expensive:
            parts.append(
                "The Referee questions whether performance benefits justify this cost premium"
            )

        return ". ".join(parts) + "."
